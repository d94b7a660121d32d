"""
position - Bidirectional cursors over the bottom level of a skip list

A Position references one level-0 node of a skip list, or one of the two
sentinels: ``end`` (past the maximum) and ``rend`` (before the minimum).
Moving a position returns a new Position; positions never expose nodes.
"""

from typing import Any, Generic, Optional, Tuple, TypeVar

from skiplist_collections._errors import InvalidPositionError
from skiplist_collections._node import Node


K = TypeVar('K')
V = TypeVar('V')


class Position(Generic[K, V]):
    """Cursor into a skip list, or a past-the-end / before-begin sentinel.

    A position stays valid until its entry is erased or the list is
    cleared. Using an invalidated position raises InvalidPositionError.

    Example:
        >>> s = SkipListSet([1, 3, 6])
        >>> pos = s.lower_bound(2)
        >>> pos.key
        3
        >>> pos.next().key
        6
        >>> s.end().prev().key
        6
    """

    __slots__ = ('_owner', '_node', '_rend')

    def __init__(
        self,
        owner: Any,
        node: Optional[Node[K, V]] = None,
        rend: bool = False,
    ):
        """Initialize position.

        Args:
            owner: Skip list the position belongs to
            node: Level-0 node, or None for a sentinel
            rend: With node None, selects rend instead of end
        """
        self._owner = owner
        self._node = node
        self._rend = rend and node is None

    @property
    def owner(self) -> Any:
        """Skip list this position belongs to."""
        return self._owner

    @property
    def is_end(self) -> bool:
        """True for the past-the-end sentinel."""
        return self._node is None and not self._rend

    @property
    def is_rend(self) -> bool:
        """True for the before-begin sentinel."""
        return self._rend

    @property
    def is_valid(self) -> bool:
        """True if the position references a live entry."""
        return self._node is not None and self._node.entry.alive

    def _live_node(self) -> Node[K, V]:
        if self._node is None:
            which = 'rend' if self._rend else 'end'
            raise InvalidPositionError(f"cannot dereference the {which} position")
        if not self._node.entry.alive:
            raise InvalidPositionError("position refers to an erased entry")
        return self._node

    @property
    def key(self) -> K:
        """Key at this position.

        Raises:
            InvalidPositionError: On a sentinel or invalidated position
        """
        return self._live_node().entry.key

    @property
    def value(self) -> Optional[V]:
        """Value at this position (None in set mode).

        Raises:
            InvalidPositionError: On a sentinel or invalidated position
        """
        return self._live_node().entry.value

    @value.setter
    def value(self, value: V) -> None:
        """Replace the value in place.

        Raises:
            TypeError: If the owning list stores no values
            InvalidPositionError: On a sentinel or invalidated position
        """
        node = self._live_node()
        if not self._owner.has_values:
            raise TypeError("set positions have no assignable value")
        node.entry.value = value

    def item(self) -> Tuple[K, Optional[V]]:
        """(key, value) pair at this position."""
        entry = self._live_node().entry
        return entry.key, entry.value

    def next(self) -> 'Position[K, V]':
        """Position of the next larger key, or end.

        Raises:
            InvalidPositionError: If called on end or an invalidated position
        """
        if self._rend:
            return self._owner.begin()
        if self._node is None:
            raise InvalidPositionError("cannot advance past the end position")
        node = self._live_node()
        return Position(self._owner, node.next)

    def prev(self) -> 'Position[K, V]':
        """Position of the next smaller key, or rend.

        Raises:
            InvalidPositionError: If called on rend or an invalidated position
        """
        if self._rend:
            raise InvalidPositionError("cannot move before the rend position")
        if self._node is None:
            return self._owner.rbegin()
        node = self._live_node()
        return Position(self._owner, node.prev, rend=node.prev is None)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Position):
            return NotImplemented
        return (
            self._owner is other._owner
            and self._node is other._node
            and self._rend == other._rend
        )

    def __hash__(self) -> int:
        return hash((id(self._owner), id(self._node), self._rend))

    def __repr__(self) -> str:
        if self._rend:
            return "Position(rend)"
        if self._node is None:
            return "Position(end)"
        if not self._node.entry.alive:
            return "Position(<erased>)"
        return f"Position({self._node.entry.key!r})"
