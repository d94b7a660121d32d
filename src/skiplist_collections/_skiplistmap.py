"""
SkipListMap - Ordered map implementation

This module provides SkipListMap, the ordered map container with a
dict-like API. It wraps the skip list engine in map mode and adds the
lookup helpers of ordered maps (floor/ceiling keys, range views) plus the
engine's position-based API.
"""

from collections.abc import Mapping, MutableMapping
import random
from typing import (
    Any, Callable, Dict, Generic, Iterator, List, Optional,
    Tuple, TypeVar, Union, Iterable
)

from skiplist_collections._comparator import Comparator
from skiplist_collections._diagnostics import LevelReport, level_report, sketch
from skiplist_collections._position import Position
from skiplist_collections._skiplist import SkipList


K = TypeVar('K')
V = TypeVar('V')

_MISSING = object()


class SkipListMap(MutableMapping, Generic[K, V]):
    """Ordered map based on a skip list.

    Provides dict-like API. Supports custom ordering via comparator or key
    functions. ``m[k] = v`` overwrites; ``insert(k, v)`` never does.

    Example:
        >>> m = SkipListMap()
        >>> m['alice'] = 100
        >>> m['bob'] = 200
        >>> print(m['alice'])
        100
        >>> list(m.keys())
        ['alice', 'bob']
        >>> m.insert('alice', 0)[1]
        False
    """

    __slots__ = ('_skiplist',)

    def __init__(
        self,
        items: Optional[Union[Mapping, Iterable[Tuple[K, V]]]] = None,
        *,
        p: Optional[float] = None,
        max_level: Optional[int] = None,
        cmp: Optional[Union[Comparator, Callable[[Any, Any], int]]] = None,
        key: Optional[Callable[[Any], Any]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize SkipListMap.

        Args:
            items: Initial mapping or key-value pairs (first occurrence of
                a key wins)
            p: Promotion probability in (0, 1)
            max_level: Maximum tower height
            cmp: Comparator or comparison function
            key: Key extraction function
            seed: Seed for the promotion coin flips
            rng: Random source to use instead of a seeded one
        """
        if isinstance(items, Mapping):
            items = items.items()
        self._skiplist: SkipList[K, V] = SkipList(
            items,
            p=p,
            max_level=max_level,
            cmp=cmp,
            key=key,
            values=True,
            seed=seed,
            rng=rng,
        )

    @classmethod
    def _wrap(cls, engine: SkipList[K, V]) -> 'SkipListMap[K, V]':
        result = cls.__new__(cls)
        result._skiplist = engine
        return result

    # ==========================================================================
    # MutableMapping interface
    # ==========================================================================

    def __getitem__(self, key: K) -> V:
        """Get value for key.

        Raises:
            KeyError: If key not found
        """
        return self._skiplist.at(key)

    def __setitem__(self, key: K, value: V) -> None:
        """Set value for key, replacing any existing value."""
        self._skiplist.upsert(key).value = value

    def __delitem__(self, key: K) -> None:
        """Delete key.

        Raises:
            KeyError: If key not found
        """
        if not self._skiplist.erase(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return self._skiplist.exists(key)  # type: ignore

    def __len__(self) -> int:
        return len(self._skiplist)

    def __iter__(self) -> Iterator[K]:
        """Iterate over keys in ascending order."""
        return iter(self._skiplist)

    def __reversed__(self) -> Iterator[K]:
        """Iterate over keys in descending order."""
        return reversed(self._skiplist)

    # ==========================================================================
    # Dict-like operations
    # ==========================================================================

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get value for key with default."""
        position = self._skiplist.find(key)
        return default if position.is_end else position.value

    def pop(self, key: K, default: Any = _MISSING) -> V:
        """Remove and return value for key.

        Raises:
            KeyError: If key not found and no default given
        """
        position = self._skiplist.find(key)
        if position.is_end:
            if default is _MISSING:
                raise KeyError(key)
            return default
        value = position.value
        self._skiplist.erase_at(position)
        return value

    def popitem(self) -> Tuple[K, V]:
        """Remove and return the (key, value) pair with the smallest key.

        Raises:
            KeyError: If map is empty
        """
        if self._skiplist.empty():
            raise KeyError("popitem(): map is empty")
        position = self._skiplist.begin()
        item = position.item()
        self._skiplist.erase_at(position)
        return item

    def setdefault(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get value, inserting default first if key doesn't exist."""
        return self._skiplist.upsert(key, default).value

    def update(self, other: Union[Dict[K, V], Iterable[Tuple[K, V]], None] = None, **kwargs: V) -> None:
        """Update from mapping or iterable of pairs, overwriting values."""
        if other is not None:
            if isinstance(other, Mapping):
                other = other.items()
            for k, v in other:
                self[k] = v
        for k, v in kwargs.items():
            self[k] = v  # type: ignore

    def clear(self) -> None:
        """Remove all entries."""
        self._skiplist.clear()

    def copy(self) -> 'SkipListMap[K, V]':
        """Create an independent copy with the same configuration."""
        return self._wrap(self._skiplist.copy())

    __copy__ = copy

    def __eq__(self, other: object) -> bool:
        """Same keys (under this map's comparator) with equal values."""
        if not isinstance(other, Mapping):
            return NotImplemented
        if len(self) != len(other):
            return False
        matched = self._wrap(self._skiplist._empty_like())
        for k, v in other.items():
            position = self._skiplist.find(k) if k is not None else self._skiplist.end()
            if position.is_end or position.value != v or not matched.insert(k, v)[1]:
                return False
        return True

    __hash__ = None  # type: ignore

    # ==========================================================================
    # Container API
    # ==========================================================================

    def insert(self, key: K, value: V) -> Tuple[Position[K, V], bool]:
        """Insert key with value unless key already exists.

        Returns:
            Tuple of (position of key, True if inserted); an existing
            value is left untouched
        """
        return self._skiplist.insert(key, value)

    def at(self, key: K) -> V:
        """Value for key.

        Raises:
            KeyError: If key not found
        """
        return self._skiplist.at(key)

    def upsert(self, key: K, default: Optional[V] = None) -> Position[K, V]:
        """Find key, inserting it with default first if absent.

        Returns:
            Position whose value can be assigned in place
        """
        return self._skiplist.upsert(key, default)

    def erase(self, key: K) -> int:
        """Remove key; return the number removed (0 or 1)."""
        return self._skiplist.erase(key)

    def erase_at(self, position: Position[K, V]) -> Position[K, V]:
        """Remove the entry at position; return the following position."""
        return self._skiplist.erase_at(position)

    def exists(self, key: K) -> bool:
        return self._skiplist.exists(key)

    def count(self, key: K) -> int:
        return self._skiplist.count(key)

    def find(self, key: K) -> Position[K, V]:
        return self._skiplist.find(key)

    def lower_bound(self, key: K) -> Position[K, V]:
        return self._skiplist.lower_bound(key)

    def upper_bound(self, key: K) -> Position[K, V]:
        return self._skiplist.upper_bound(key)

    def front(self) -> K:
        """Smallest key (EmptyContainerError when empty)."""
        return self._skiplist.front()

    def back(self) -> K:
        """Largest key (EmptyContainerError when empty)."""
        return self._skiplist.back()

    def begin(self) -> Position[K, V]:
        return self._skiplist.begin()

    def end(self) -> Position[K, V]:
        return self._skiplist.end()

    def rbegin(self) -> Position[K, V]:
        return self._skiplist.rbegin()

    def rend(self) -> Position[K, V]:
        return self._skiplist.rend()

    def empty(self) -> bool:
        return self._skiplist.empty()

    # ==========================================================================
    # Ordered operations
    # ==========================================================================

    def first_key(self) -> K:
        """Smallest key.

        Raises:
            EmptyContainerError: If map is empty (a KeyError)
        """
        return self._skiplist.front()

    def last_key(self) -> K:
        """Largest key.

        Raises:
            EmptyContainerError: If map is empty (a KeyError)
        """
        return self._skiplist.back()

    def floor_key(self, key: K) -> Optional[K]:
        """Greatest key less than or equal to key, or None."""
        position = self._skiplist.upper_bound(key).prev()
        return None if position.is_rend else position.key

    def ceiling_key(self, key: K) -> Optional[K]:
        """Smallest key greater than or equal to key, or None."""
        position = self._skiplist.lower_bound(key)
        return None if position.is_end else position.key

    def lower_key(self, key: K) -> Optional[K]:
        """Greatest key strictly less than key, or None."""
        position = self._skiplist.lower_bound(key).prev()
        return None if position.is_rend else position.key

    def higher_key(self, key: K) -> Optional[K]:
        """Smallest key strictly greater than key, or None."""
        position = self._skiplist.upper_bound(key)
        return None if position.is_end else position.key

    # ==========================================================================
    # Range operations
    # ==========================================================================

    def keys(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[K]:
        """Iterate over keys with start <= key < stop."""
        return self._skiplist.keys(start, stop)

    def values(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[V]:
        """Iterate over values in key order."""
        return self._skiplist.values(start, stop)

    def items(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[Tuple[K, V]]:
        """Iterate over (key, value) pairs with start <= key < stop."""
        return self._skiplist.items(start, stop)

    def submap(
        self,
        start: K,
        stop: K,
        inclusive: bool = False,
    ) -> 'SkipListMap[K, V]':
        """Get submap for key range.

        Args:
            start: Start key (inclusive)
            stop: Stop key
            inclusive: If True, include stop key

        Returns:
            New SkipListMap with entries in range
        """
        result = self._wrap(self._skiplist._empty_like())
        for k, v in self._skiplist.items(start, stop):
            result.insert(k, v)
        if inclusive:
            position = self._skiplist.find(stop)
            if not position.is_end:
                result.insert(*position.item())
        return result

    # ==========================================================================
    # Diagnostics
    # ==========================================================================

    def sketch(self) -> List[List[K]]:
        """Keys present at each level, level 0 first."""
        return sketch(self._skiplist)

    def level_report(self) -> LevelReport:
        return level_report(self._skiplist)

    def check_invariants(self) -> None:
        self._skiplist.check_invariants()

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def probability(self) -> float:
        return self._skiplist.probability

    @property
    def max_level(self) -> int:
        return self._skiplist.max_level

    @property
    def comparator_type(self) -> str:
        """Get comparator type string."""
        return self._skiplist.comparator_type

    def __repr__(self) -> str:
        """String representation."""
        items = [kv for _, kv in zip(range(6), self.items())]
        if len(items) > 5:
            items_str = ", ".join(f"{k!r}: {v!r}" for k, v in items[:5]) + ", ..."
        else:
            items_str = ", ".join(f"{k!r}: {v!r}" for k, v in items)
        return f"SkipListMap({{{items_str}}})"
