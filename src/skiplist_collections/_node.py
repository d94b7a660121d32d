"""
node - Entries and per-level nodes of a skip list

An Entry is the single storage slot of one key (and, in map mode, its
value). A Node is one placement of an entry at one level: it sits in the
level's horizontal doubly linked list and in the entry's vertical tower.
Every node of a tower references the same Entry, so the key is stored once
and a value updated through any of them is seen by all.
"""

from typing import Any, Generic, Optional, TypeVar

from skiplist_collections._errors import NodeConstructionError


K = TypeVar('K')
V = TypeVar('V')

_UNSET = object()


class Entry(Generic[K, V]):
    """Storage slot shared by every node of one tower."""

    __slots__ = ('key', 'sort_key', 'value', 'alive')

    def __init__(
        self,
        key: K,
        value: Optional[V] = None,
        sort_key: Any = _UNSET,
    ):
        """Initialize entry.

        Args:
            key: Entry key (immutable after creation)
            value: Entry value (map mode only)
            sort_key: Extracted sort key (for key function comparators)

        Raises:
            NodeConstructionError: If key is None
        """
        if key is None:
            raise NodeConstructionError("cannot create an entry without a key")
        self.key = key
        self.sort_key = key if sort_key is _UNSET else sort_key
        self.value = value
        self.alive = True

    def __repr__(self) -> str:
        return f"Entry({self.key!r}, {self.value!r})"


class Node(Generic[K, V]):
    """One placement of an entry at one level."""

    __slots__ = ('entry', 'level', 'next', 'prev', 'up', 'down')

    def __init__(
        self,
        entry: Entry[K, V],
        level: int = 0,
        next: Optional['Node[K, V]'] = None,
        prev: Optional['Node[K, V]'] = None,
        down: Optional['Node[K, V]'] = None,
    ):
        """Initialize node.

        Args:
            entry: Shared entry this node places
            level: Level index (0 is the bottom, complete level)
            next: Horizontal successor at this level
            prev: Horizontal predecessor at this level
            down: Same entry at level - 1

        Raises:
            NodeConstructionError: If entry is None
        """
        if entry is None:
            raise NodeConstructionError("cannot create a node without an entry")
        self.entry = entry
        self.level = level
        self.next = next
        self.prev = prev
        self.up: Optional[Node[K, V]] = None
        self.down = down

    @property
    def key(self) -> K:
        return self.entry.key

    @property
    def sort_key(self) -> Any:
        return self.entry.sort_key

    @property
    def value(self) -> Optional[V]:
        return self.entry.value

    def get_next(self) -> Optional['Node[K, V]']:
        return self.next

    def get_prev(self) -> Optional['Node[K, V]']:
        return self.prev

    def get_up(self) -> Optional['Node[K, V]']:
        return self.up

    def get_down(self) -> Optional['Node[K, V]']:
        return self.down

    def bottom(self) -> 'Node[K, V]':
        """Follow down links to the level-0 node of this tower."""
        node = self
        while node.down is not None:
            node = node.down
        return node

    def top(self) -> 'Node[K, V]':
        """Follow up links to the highest node of this tower."""
        node = self
        while node.up is not None:
            node = node.up
        return node

    def detach(self) -> None:
        """Clear all four links (node is no longer part of any list)."""
        self.next = None
        self.prev = None
        self.up = None
        self.down = None

    def __repr__(self) -> str:
        return f"Node<{self.entry.key!r}@{self.level}>"
