"""
SkipListSet - Ordered set implementation

This module provides SkipListSet, an ordered set container with a set-like
API on top of the skip list engine. Besides the collections.abc.MutableSet
protocol it exposes the engine's position-based API (insert, find,
lower_bound, upper_bound, erase_at, begin/end).
"""

import collections.abc
from collections.abc import MutableSet
import random
from typing import (
    Any, Callable, Generic, Iterator, List, Optional,
    Tuple, TypeVar, Union, Iterable, AbstractSet
)

from skiplist_collections._comparator import Comparator
from skiplist_collections._diagnostics import LevelReport, level_report, sketch
from skiplist_collections._errors import EmptyContainerError
from skiplist_collections._position import Position
from skiplist_collections._skiplist import SkipList


T = TypeVar('T')


class SkipListSet(MutableSet, Generic[T]):
    """Ordered set based on a skip list.

    Supports custom ordering via comparator or key functions.

    Example:
        >>> s = SkipListSet()
        >>> s.add('alice')
        >>> s.add('bob')
        >>> s.add('alice')  # No effect, already exists
        >>> list(s)
        ['alice', 'bob']
        >>> 'alice' in s
        True
    """

    __slots__ = ('_skiplist',)

    def __init__(
        self,
        items: Optional[Iterable[T]] = None,
        *,
        p: Optional[float] = None,
        max_level: Optional[int] = None,
        cmp: Optional[Union[Comparator, Callable[[Any, Any], int]]] = None,
        key: Optional[Callable[[Any], Any]] = None,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize SkipListSet.

        Args:
            items: Initial items (later duplicates are ignored)
            p: Promotion probability in (0, 1)
            max_level: Maximum tower height
            cmp: Comparator or comparison function
            key: Key extraction function
            seed: Seed for the promotion coin flips
            rng: Random source to use instead of a seeded one
        """
        self._skiplist: SkipList[T, None] = SkipList(
            items,
            p=p,
            max_level=max_level,
            cmp=cmp,
            key=key,
            seed=seed,
            rng=rng,
        )

    @classmethod
    def _wrap(cls, engine: SkipList[T, None]) -> 'SkipListSet[T]':
        result = cls.__new__(cls)
        result._skiplist = engine
        return result

    def _empty_like(self) -> 'SkipListSet[T]':
        return self._wrap(self._skiplist._empty_like())

    def _members_of(self, other: Iterable[T]) -> 'SkipListSet[T]':
        """Items of other, ordered and matched by this set's comparator."""
        result = self._empty_like()
        for item in other:
            if item is not None:
                result.add(item)
        return result

    # ==========================================================================
    # MutableSet interface
    # ==========================================================================

    def add(self, item: T) -> None:
        """Add an item to the set.

        If the item already exists, this has no effect.
        """
        self._skiplist.insert(item)

    def discard(self, item: T) -> None:
        """Remove an item if present (no exception if missing)."""
        self._skiplist.erase(item)

    def remove(self, item: T) -> None:
        """Remove an item.

        Raises:
            KeyError: If item not found
        """
        if not self._skiplist.erase(item):
            raise KeyError(item)

    def pop(self) -> T:
        """Remove and return the smallest item.

        Raises:
            EmptyContainerError: If set is empty (a KeyError)
        """
        if self._skiplist.empty():
            raise EmptyContainerError("pop from an empty set")
        position = self._skiplist.begin()
        item = position.key
        self._skiplist.erase_at(position)
        return item

    def __contains__(self, item: object) -> bool:
        return self._skiplist.exists(item)  # type: ignore

    def __len__(self) -> int:
        return len(self._skiplist)

    def __iter__(self) -> Iterator[T]:
        """Iterate over items in ascending order."""
        return iter(self._skiplist)

    def __reversed__(self) -> Iterator[T]:
        """Iterate over items in descending order."""
        return reversed(self._skiplist)

    def clear(self) -> None:
        """Remove all items."""
        self._skiplist.clear()

    # ==========================================================================
    # Container API
    # ==========================================================================

    def insert(self, item: T) -> Tuple[Position[T, None], bool]:
        """Insert item.

        Returns:
            Tuple of (position of item, True if it was inserted)
        """
        return self._skiplist.insert(item)

    def erase(self, item: T) -> int:
        """Remove item; return the number removed (0 or 1)."""
        return self._skiplist.erase(item)

    def erase_at(self, position: Position[T, None]) -> Position[T, None]:
        """Remove the item at position; return the following position."""
        return self._skiplist.erase_at(position)

    def exists(self, item: T) -> bool:
        return self._skiplist.exists(item)

    def count(self, item: T) -> int:
        return self._skiplist.count(item)

    def find(self, item: T) -> Position[T, None]:
        return self._skiplist.find(item)

    def lower_bound(self, item: T) -> Position[T, None]:
        return self._skiplist.lower_bound(item)

    def upper_bound(self, item: T) -> Position[T, None]:
        return self._skiplist.upper_bound(item)

    def front(self) -> T:
        """Smallest item (EmptyContainerError when empty)."""
        return self._skiplist.front()

    def back(self) -> T:
        """Largest item (EmptyContainerError when empty)."""
        return self._skiplist.back()

    def begin(self) -> Position[T, None]:
        return self._skiplist.begin()

    def end(self) -> Position[T, None]:
        return self._skiplist.end()

    def rbegin(self) -> Position[T, None]:
        return self._skiplist.rbegin()

    def rend(self) -> Position[T, None]:
        return self._skiplist.rend()

    def empty(self) -> bool:
        return self._skiplist.empty()

    # ==========================================================================
    # Set operations
    # ==========================================================================

    def copy(self) -> 'SkipListSet[T]':
        """Create an independent copy with the same configuration.

        Returns:
            New SkipListSet with same items and tower shape
        """
        return self._wrap(self._skiplist.copy())

    __copy__ = copy

    def union(self, *others: Iterable[T]) -> 'SkipListSet[T]':
        """Return union with other iterables."""
        result = self.copy()
        for other in others:
            for item in other:
                result.add(item)
        return result

    def __or__(self, other: AbstractSet[T]) -> 'SkipListSet[T]':
        """Union operator."""
        return self.union(other)

    def intersection(self, *others: Iterable[T]) -> 'SkipListSet[T]':
        """Return intersection with other iterables."""
        result = self._empty_like()
        other_sets = [self._members_of(o) for o in others]

        for item in self:
            if all(item in s for s in other_sets):
                result.add(item)

        return result

    def __and__(self, other: AbstractSet[T]) -> 'SkipListSet[T]':
        """Intersection operator."""
        return self.intersection(other)

    def difference(self, *others: Iterable[T]) -> 'SkipListSet[T]':
        """Return difference with other iterables."""
        result = self.copy()
        for other in others:
            for item in other:
                result.discard(item)
        return result

    def __sub__(self, other: AbstractSet[T]) -> 'SkipListSet[T]':
        """Difference operator."""
        return self.difference(other)

    def symmetric_difference(self, other: Iterable[T]) -> 'SkipListSet[T]':
        """Return items in exactly one of self and other."""
        result = self.copy()
        for item in self._members_of(other):
            if not result.erase(item):
                result.add(item)
        return result

    def __xor__(self, other: AbstractSet[T]) -> 'SkipListSet[T]':
        """Symmetric difference operator."""
        return self.symmetric_difference(other)

    def issubset(self, other: Iterable[T]) -> bool:
        """Check if this is a subset."""
        members = self._members_of(other)
        return all(item in members for item in self)

    def issuperset(self, other: Iterable[T]) -> bool:
        """Check if this is a superset."""
        return all(item is not None and item in self for item in other)

    def __eq__(self, other: object) -> bool:
        """Equality comparison against any set."""
        if isinstance(other, collections.abc.Set):
            if len(self) != len(other):
                return False
            members = self._members_of(other)
            return len(members) == len(self) and all(x in self for x in members)
        return NotImplemented

    __hash__ = None  # type: ignore

    # ==========================================================================
    # Ordered operations
    # ==========================================================================

    def first(self) -> T:
        """Smallest item (EmptyContainerError when empty)."""
        return self._skiplist.front()

    def last(self) -> T:
        """Largest item (EmptyContainerError when empty)."""
        return self._skiplist.back()

    def floor(self, item: T) -> Optional[T]:
        """Greatest item less than or equal to item, or None."""
        position = self._skiplist.upper_bound(item).prev()
        return None if position.is_rend else position.key

    def ceiling(self, item: T) -> Optional[T]:
        """Smallest item greater than or equal to item, or None."""
        position = self._skiplist.lower_bound(item)
        return None if position.is_end else position.key

    def lower(self, item: T) -> Optional[T]:
        """Greatest item strictly less than item, or None."""
        position = self._skiplist.lower_bound(item).prev()
        return None if position.is_rend else position.key

    def higher(self, item: T) -> Optional[T]:
        """Smallest item strictly greater than item, or None."""
        position = self._skiplist.upper_bound(item)
        return None if position.is_end else position.key

    def range(
        self,
        start: Optional[T] = None,
        stop: Optional[T] = None,
    ) -> Iterator[T]:
        """Iterate over items with start <= item < stop."""
        return self._skiplist.keys(start, stop)

    # ==========================================================================
    # Diagnostics
    # ==========================================================================

    def sketch(self) -> List[List[T]]:
        """Items present at each level, level 0 first."""
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
        items = [x for _, x in zip(range(6), self)]
        if len(items) > 5:
            items_str = ", ".join(f"{x!r}" for x in items[:5]) + ", ..."
        else:
            items_str = ", ".join(f"{x!r}" for x in items)
        return f"SkipListSet({{{items_str}}})"
