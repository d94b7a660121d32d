"""
skiplist - Randomized skip list engine

This module provides the skip list shared by the set and map containers.
Every level is a doubly linked list; every entry owns a vertical tower of
nodes, one per level it was promoted to. The minimum entry always owns a
full-height tower, so the head of each level is the minimum's node there.
All other towers get a geometric height: one extra level per successful
Bernoulli(p) trial, stopping at the first failure or at max_level.
"""

import copy
import logging
import random
from collections.abc import Mapping
from typing import (
    Any, Callable, Generic, Iterable, Iterator, List, Optional,
    Tuple, TypeVar, Union
)

from skiplist_collections._comparator import Comparator, resolve_comparator
from skiplist_collections._config import (
    config,
    validate_max_level,
    validate_probability,
)
from skiplist_collections._errors import (
    EmptyContainerError,
    InvalidPositionError,
    InvariantError,
    NodeConstructionError,
)
from skiplist_collections._node import Entry, Node
from skiplist_collections._position import Position


K = TypeVar('K')
V = TypeVar('V')

logger = logging.getLogger(__name__)


class SkipList(Generic[K, V]):
    """Skip list with a full-height head spine.

    The list stores unique keys ordered by an injected Comparator. In map
    mode (``values=True``) each entry also carries a value that can be
    replaced in place through a Position.

    Example:
        >>> sl = SkipList([9, 7, 6, 1, 3], seed=42)
        >>> list(sl)
        [1, 3, 6, 7, 9]
        >>> sl.lower_bound(5).key
        6
        >>> sl.insert(6)[1]
        False
    """

    __slots__ = (
        '_heads',
        '_last',
        '_size',
        '_probability',
        '_max_level',
        '_comparator',
        '_random',
        '_has_values',
    )

    def __init__(
        self,
        items: Optional[Iterable[Any]] = None,
        *,
        p: Optional[float] = None,
        max_level: Optional[int] = None,
        cmp: Optional[Union[Comparator, Callable[[Any, Any], int]]] = None,
        key: Optional[Callable[[Any], Any]] = None,
        values: bool = False,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize skip list.

        Args:
            items: Keys (set mode) or (key, value) pairs (map mode); later
                duplicates of a key are ignored
            p: Promotion probability in (0, 1), default from config
            max_level: Maximum tower height (>= 1), default from config
            cmp: Comparator or three-way comparison function
            key: Key extraction function
            values: Store a value with every key (map mode)
            seed: Seed for the promotion coin flips
            rng: Random source to use instead of a seeded one

        Raises:
            ValueError: If p or max_level is out of range
            TypeError: If cmp/key are invalid
        """
        self._probability = validate_probability(
            config.default_probability if p is None else p
        )
        self._max_level = validate_max_level(
            config.default_max_level if max_level is None else max_level
        )
        self._comparator = resolve_comparator(cmp, key)
        if rng is None:
            rng = random.Random(config.default_seed if seed is None else seed)
        self._random = rng
        self._has_values = bool(values)

        self._heads: List[Optional[Node[K, V]]] = [None] * self._max_level
        self._last: Optional[Node[K, V]] = None
        self._size = 0

        if items is not None:
            self.extend(items)

    # ==========================================================================
    # Internals
    # ==========================================================================

    def _compare(self, a: Any, b: Any) -> int:
        """Compare two sort keys."""
        return self._comparator.compare(a, b)

    def _coin_flip(self) -> bool:
        """One Bernoulli(p) promotion trial."""
        return self._random.random() < self._probability

    def _random_height(self) -> int:
        """Tower height: 1 plus the run of successful flips, capped."""
        height = 1
        while height < self._max_level and self._coin_flip():
            height += 1
        return height

    def _after_mutation(self) -> None:
        if config.check_invariants:
            self.check_invariants()

    def _search(self, sort_key: Any) -> Tuple[Optional[Node[K, V]], Optional[Node[K, V]]]:
        """Descend from the top head looking for sort_key.

        Returns:
            (level-0 node of the match, None) when found, otherwise
            (None, level-0 predecessor) where the predecessor is None if
            the key sorts before the minimum or the list is empty
        """
        node = self._heads[-1]
        if node is None:
            return None, None

        cmp = self._compare(sort_key, node.sort_key)
        if cmp < 0:
            return None, None
        if cmp == 0:
            return self._heads[0], None

        while True:
            nxt = node.next
            while nxt is not None:
                cmp = self._compare(nxt.sort_key, sort_key)
                if cmp < 0:
                    node = nxt
                    nxt = node.next
                else:
                    break
            if nxt is not None and cmp == 0:
                return nxt.bottom(), None
            if node.down is None:
                return None, node
            node = node.down

    def _lower_bound_node(self, key: K) -> Optional[Node[K, V]]:
        found, pred = self._search(self._comparator.extract_key(key))
        if found is not None:
            return found
        if pred is None:
            return self._heads[0]
        return pred.next

    def _check_position(self, position: Position[K, V]) -> Node[K, V]:
        if not isinstance(position, Position) or position.owner is not self:
            raise InvalidPositionError("position does not belong to this skip list")
        node = position._node
        if node is None:
            raise InvalidPositionError("cannot erase through a sentinel position")
        if not node.entry.alive:
            raise InvalidPositionError("position refers to an erased entry")
        return node

    def _new_entry(self, key: K, value: Optional[V], sort_key: Any) -> Entry[K, V]:
        return Entry(key, value, sort_key=sort_key)

    def _build_full_tower(self, entry: Entry[K, V]) -> None:
        """Create a max-height tower for entry as the head of every level."""
        below: Optional[Node[K, V]] = None
        for level in range(self._max_level):
            succ = self._heads[level]
            node = Node(entry, level, next=succ, down=below)
            if succ is not None:
                succ.prev = node
            if below is not None:
                below.up = node
            self._heads[level] = node
            below = node

    def _demote(self, bottom: Node[K, V]) -> int:
        """Cut a full-height tower down to a random height.

        Returns:
            The height the tower was cut to
        """
        height = self._random_height()
        top = bottom
        for _ in range(height - 1):
            top = top.up
        doomed = top.up
        top.up = None
        while doomed is not None:
            above = doomed.up
            doomed.prev.next = doomed.next
            if doomed.next is not None:
                doomed.next.prev = doomed.prev
            doomed.detach()
            doomed = above
        return height

    def _release_tower(self, bottom: Node[K, V]) -> None:
        """Detach every node of a tower, from level 0 upward."""
        entry = bottom.entry
        node: Optional[Node[K, V]] = bottom
        while node is not None:
            above = node.up
            node.detach()
            node = above
        entry.alive = False

    def _replace_minimum(self, old_bottom: Node[K, V]) -> None:
        """Remove the minimum and rebuild the head spine on its successor."""
        new_bottom = old_bottom.next
        entry = new_bottom.entry
        candidate: Optional[Node[K, V]] = new_bottom
        below: Optional[Node[K, V]] = None
        synthesized = 0

        for level in range(self._max_level):
            old = self._heads[level]
            succ = old.next
            if candidate is not None and candidate is succ:
                node = candidate
                node.prev = None
                candidate = node.up
            else:
                candidate = None
                node = Node(entry, level, next=succ, down=below)
                if succ is not None:
                    succ.prev = node
                if below is not None:
                    below.up = node
                synthesized += 1
            self._heads[level] = node
            old.detach()
            below = node

        old_bottom.entry.alive = False
        logger.debug(
            "new minimum %r: synthesized %d head node(s)",
            entry.key, synthesized,
        )

    def _unlink(self, bottom: Node[K, V]) -> None:
        """Remove the tower whose level-0 node is bottom."""
        if bottom.prev is None:
            if bottom.next is None:
                self._release_tower(bottom)
                self._heads = [None] * self._max_level
                self._last = None
            else:
                self._replace_minimum(bottom)
        else:
            if bottom is self._last:
                self._last = bottom.prev
            entry = bottom.entry
            node: Optional[Node[K, V]] = bottom
            while node is not None:
                above = node.up
                node.prev.next = node.next
                if node.next is not None:
                    node.next.prev = node.prev
                node.detach()
                node = above
            entry.alive = False
        self._size -= 1

    def _iter_nodes(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[Node[K, V]]:
        """Level-0 nodes with start <= key < stop."""
        if start is None:
            node = self._heads[0]
        else:
            node = self._lower_bound_node(start)
        stop_key = None if stop is None else self._comparator.extract_key(stop)
        while node is not None:
            if stop is not None and self._compare(node.sort_key, stop_key) >= 0:
                break
            yield node
            node = node.next

    def _iter_level(self, level: int) -> Iterator[Node[K, V]]:
        node = self._heads[level]
        while node is not None:
            yield node
            node = node.next

    # ==========================================================================
    # Search
    # ==========================================================================

    def exists(self, key: K) -> bool:
        """Check if key is stored."""
        found, _ = self._search(self._comparator.extract_key(key))
        return found is not None

    def count(self, key: K) -> int:
        """Number of entries with this key (0 or 1)."""
        return 1 if self.exists(key) else 0

    def find(self, key: K) -> Position[K, V]:
        """Position of key, or end() if absent."""
        found, _ = self._search(self._comparator.extract_key(key))
        return Position(self, found)

    def lower_bound(self, key: K) -> Position[K, V]:
        """Position of the first key not less than key, or end()."""
        return Position(self, self._lower_bound_node(key))

    def upper_bound(self, key: K) -> Position[K, V]:
        """Position of the first key strictly greater than key, or end()."""
        node = self._lower_bound_node(key)
        if node is not None:
            sort_key = self._comparator.extract_key(key)
            if self._compare(node.sort_key, sort_key) == 0:
                node = node.next
        return Position(self, node)

    def at(self, key: K) -> Optional[V]:
        """Value stored for key.

        Raises:
            KeyError: If key is not stored
        """
        found, _ = self._search(self._comparator.extract_key(key))
        if found is None:
            raise KeyError(key)
        return found.entry.value

    def height(self, key: K) -> int:
        """Tower height of key's entry (0 if absent)."""
        found, _ = self._search(self._comparator.extract_key(key))
        height = 0
        while found is not None:
            height += 1
            found = found.up
        return height

    # ==========================================================================
    # Mutation
    # ==========================================================================

    def insert(self, key: K, value: Optional[V] = None) -> Tuple[Position[K, V], bool]:
        """Insert key (with value in map mode) if it is absent.

        An existing entry is never overwritten.

        Args:
            key: Key to insert
            value: Value to store (map mode only)

        Returns:
            Tuple of (position of the key, True if inserted)

        Raises:
            NodeConstructionError: If key is None
            TypeError: If a value is given to a keys-only list
        """
        if key is None:
            raise NodeConstructionError("cannot insert None as a key")
        if not self._has_values and value is not None:
            raise TypeError("this skip list stores keys only")
        sort_key = self._comparator.extract_key(key)

        if self._size == 0:
            entry = self._new_entry(key, value, sort_key)
            self._build_full_tower(entry)
            self._last = self._heads[0]
            self._size = 1
            self._after_mutation()
            return Position(self, self._heads[0]), True

        head = self._heads[0]
        cmp = self._compare(sort_key, head.sort_key)
        if cmp == 0:
            return Position(self, head), False

        if cmp < 0:
            entry = self._new_entry(key, value, sort_key)
            old_minimum = head
            self._build_full_tower(entry)
            height = self._demote(old_minimum)
            logger.debug(
                "new minimum %r: previous minimum %r demoted to height %d",
                key, old_minimum.entry.key, height,
            )
            self._size += 1
            self._after_mutation()
            return Position(self, self._heads[0]), True

        update: List[Optional[Node[K, V]]] = [None] * self._max_level
        node = self._heads[-1]
        for level in range(self._max_level - 1, -1, -1):
            nxt = node.next
            while nxt is not None:
                cmp = self._compare(nxt.sort_key, sort_key)
                if cmp < 0:
                    node = nxt
                    nxt = node.next
                else:
                    break
            if nxt is not None and cmp == 0:
                return Position(self, nxt.bottom()), False
            update[level] = node
            if level > 0:
                node = node.down

        entry = self._new_entry(key, value, sort_key)
        height = self._random_height()
        below: Optional[Node[K, V]] = None
        bottom: Optional[Node[K, V]] = None
        for level in range(height):
            pred = update[level]
            node = Node(entry, level, next=pred.next, prev=pred, down=below)
            if pred.next is not None:
                pred.next.prev = node
            pred.next = node
            if below is None:
                bottom = node
            else:
                below.up = node
            below = node

        if bottom.next is None:
            self._last = bottom
        self._size += 1
        self._after_mutation()
        return Position(self, bottom), True

    def extend(self, items: Iterable[Any]) -> None:
        """Insert every key (or (key, value) pair in map mode) of items."""
        if self._has_values:
            if isinstance(items, Mapping):
                items = items.items()
            for k, v in items:
                self.insert(k, v)
        else:
            for k in items:
                self.insert(k)

    def upsert(self, key: K, default: Optional[V] = None) -> Position[K, V]:
        """Find key, inserting it with default first if absent.

        Returns:
            Position of the key; its value is assignable in map mode
        """
        position, _ = self.insert(key, default)
        return position

    def erase(self, key: K) -> int:
        """Remove key.

        Returns:
            1 if the key was removed, 0 if it was absent
        """
        found, _ = self._search(self._comparator.extract_key(key))
        if found is None:
            return 0
        self._unlink(found)
        self._after_mutation()
        return 1

    def erase_at(self, position: Position[K, V]) -> Position[K, V]:
        """Remove the entry at position.

        Returns:
            Position following the removed entry

        Raises:
            InvalidPositionError: If position is a sentinel, stale, or
                from another list
        """
        node = self._check_position(position)
        following = node.next
        self._unlink(node)
        self._after_mutation()
        return Position(self, following)

    def clear(self) -> None:
        """Remove all entries."""
        released = self._size
        node = self._heads[0]
        while node is not None:
            nxt = node.next
            self._release_tower(node)
            node = nxt
        self._heads = [None] * self._max_level
        self._last = None
        self._size = 0
        logger.debug("cleared skip list, released %d tower(s)", released)

    # ==========================================================================
    # Ends and iteration
    # ==========================================================================

    def front(self) -> K:
        """Smallest key.

        Raises:
            EmptyContainerError: If the list is empty
        """
        if self._size == 0:
            raise EmptyContainerError("front() called on an empty skip list")
        return self._heads[0].entry.key

    def back(self) -> K:
        """Largest key.

        Raises:
            EmptyContainerError: If the list is empty
        """
        if self._size == 0:
            raise EmptyContainerError("back() called on an empty skip list")
        return self._last.entry.key

    def begin(self) -> Position[K, V]:
        return Position(self, self._heads[0])

    def end(self) -> Position[K, V]:
        return Position(self, None)

    def rbegin(self) -> Position[K, V]:
        return Position(self, self._last, rend=self._last is None)

    def rend(self) -> Position[K, V]:
        return Position(self, None, rend=True)

    def empty(self) -> bool:
        return self._size == 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, key: object) -> bool:
        return self.exists(key)  # type: ignore

    def __iter__(self) -> Iterator[K]:
        """Iterate over keys in ascending order."""
        for node in self._iter_nodes():
            yield node.entry.key

    def __reversed__(self) -> Iterator[K]:
        """Iterate over keys in descending order."""
        node = self._last
        while node is not None:
            yield node.entry.key
            node = node.prev

    def items(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[Tuple[K, Optional[V]]]:
        """Iterate over (key, value) pairs with start <= key < stop."""
        for node in self._iter_nodes(start, stop):
            yield node.entry.key, node.entry.value

    def keys(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[K]:
        """Iterate over keys with start <= key < stop."""
        for node in self._iter_nodes(start, stop):
            yield node.entry.key

    def values(
        self,
        start: Optional[K] = None,
        stop: Optional[K] = None,
    ) -> Iterator[Optional[V]]:
        """Iterate over values in key order."""
        for node in self._iter_nodes(start, stop):
            yield node.entry.value

    # ==========================================================================
    # Copying
    # ==========================================================================

    def _empty_like(self) -> 'SkipList[K, V]':
        rng = random.Random()
        rng.setstate(self._random.getstate())
        return SkipList(
            p=self._probability,
            max_level=self._max_level,
            cmp=self._comparator,
            values=self._has_values,
            rng=rng,
        )

    def _copy_into(
        self,
        target: 'SkipList[K, V]',
        copy_item: Callable[[Any], Any],
    ) -> None:
        """Rebuild every tower of self, same heights, into empty target."""
        tails: List[Optional[Node[K, V]]] = [None] * self._max_level
        bottom = self._heads[0]
        while bottom is not None:
            source = bottom.entry
            entry = Entry(
                copy_item(source.key),
                copy_item(source.value),
                sort_key=copy_item(source.sort_key),
            )
            below: Optional[Node[K, V]] = None
            node: Optional[Node[K, V]] = bottom
            while node is not None:
                level = node.level
                tail = tails[level]
                clone = Node(entry, level, prev=tail, down=below)
                if tail is None:
                    target._heads[level] = clone
                else:
                    tail.next = clone
                if below is not None:
                    below.up = clone
                tails[level] = clone
                below = clone
                node = node.up
            bottom = bottom.next
        target._last = tails[0]
        target._size = self._size

    def copy(self) -> 'SkipList[K, V]':
        """Structural copy: new entries and nodes, same keys and values."""
        clone = self._empty_like()
        self._copy_into(clone, lambda item: item)
        logger.debug("copied skip list of %d entries", self._size)
        return clone

    def __copy__(self) -> 'SkipList[K, V]':
        return self.copy()

    def __deepcopy__(self, memo: dict) -> 'SkipList[K, V]':
        clone = self._empty_like()
        memo[id(self)] = clone
        self._copy_into(clone, lambda item: copy.deepcopy(item, memo))
        return clone

    # ==========================================================================
    # Validation
    # ==========================================================================

    def check_invariants(self) -> None:
        """Walk every level and verify the structural invariants.

        Raises:
            InvariantError: On the first violated invariant
        """
        if self._size == 0:
            if any(head is not None for head in self._heads):
                raise InvariantError("empty list has a non-empty level")
            if self._last is not None:
                raise InvariantError("empty list has a last node")
            return

        spine = self._heads[0].entry
        lower_ids: set = set()
        for level in range(self._max_level):
            head = self._heads[level]
            if head is None:
                raise InvariantError(f"level {level} has no head")
            if head.entry is not spine:
                raise InvariantError(f"level {level} head is not the minimum")
            if head.prev is not None:
                raise InvariantError(f"level {level} head has a predecessor")

            ids = set()
            count = 0
            prev: Optional[Node[K, V]] = None
            for node in self._iter_level(level):
                count += 1
                ids.add(id(node))
                if node.level != level:
                    raise InvariantError(f"node {node!r} found on level {level}")
                if not node.entry.alive:
                    raise InvariantError(f"released node {node!r} still linked")
                if node.prev is not prev:
                    raise InvariantError(f"broken prev link at {node!r}")
                if prev is not None and self._compare(prev.sort_key, node.sort_key) >= 0:
                    raise InvariantError(f"level {level} out of order at {node!r}")
                if level == 0:
                    if node.down is not None:
                        raise InvariantError(f"level-0 node {node!r} has a down link")
                else:
                    down = node.down
                    if down is None or id(down) not in lower_ids:
                        raise InvariantError(f"node {node!r} has no copy below")
                    if down.entry is not node.entry or down.up is not node:
                        raise InvariantError(f"broken tower at {node!r}")
                if node.up is not None and node.up.down is not node:
                    raise InvariantError(f"broken up link at {node!r}")
                prev = node

            if level == 0:
                if count != self._size:
                    raise InvariantError(
                        f"level 0 holds {count} entries, size is {self._size}"
                    )
                if prev is not self._last:
                    raise InvariantError("last does not reference the maximum")
            lower_ids = ids

    # ==========================================================================
    # Properties
    # ==========================================================================

    @property
    def has_values(self) -> bool:
        """True in map mode."""
        return self._has_values

    @property
    def probability(self) -> float:
        return self._probability

    @property
    def max_level(self) -> int:
        return self._max_level

    @property
    def comparator(self) -> Comparator:
        return self._comparator

    @property
    def comparator_type(self) -> str:
        """Get the comparator type."""
        return self._comparator.type

    def __eq__(self, other: object) -> bool:
        """Same mode, length, and equal (key, value) sequences."""
        if not isinstance(other, SkipList):
            return NotImplemented
        if self._has_values != other._has_values or len(self) != len(other):
            return False
        return all(a == b for a, b in zip(self.items(), other.items()))

    __hash__ = None  # type: ignore

    def __repr__(self) -> str:
        """String representation."""
        keys = [repr(k) for _, k in zip(range(6), self)]
        if len(keys) > 5:
            keys = keys[:5] + ["..."]
        return f"SkipList([{', '.join(keys)}], p={self._probability}, max_level={self._max_level})"
