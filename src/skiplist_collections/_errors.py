"""
errors - Exception types raised by skiplist_collections

No-op outcomes (inserting a duplicate key, erasing an absent key) are not
errors and are reported through return values instead.
"""


class SkipListError(Exception):
    """Base class for errors raised by skip list containers."""
    pass


class EmptyContainerError(SkipListError, KeyError):
    """Exception raised when reading front/back of an empty container."""

    def __init__(self, message: str = "container is empty"):
        super().__init__(message)

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class NodeConstructionError(SkipListError, ValueError):
    """Exception raised when an entry or node is built without a key."""
    pass


class InvalidPositionError(SkipListError, ValueError):
    """Exception raised on use of a sentinel, stale or foreign position."""
    pass


class InvariantError(SkipListError, AssertionError):
    """Exception raised by check_invariants() on a corrupted structure."""
    pass


__all__ = [
    'SkipListError',
    'EmptyContainerError',
    'NodeConstructionError',
    'InvalidPositionError',
    'InvariantError',
]
