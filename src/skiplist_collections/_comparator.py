"""
comparator - Pluggable total orders for skip list containers

This module provides the ordering capability injected into every skip list:
natural ordering, reversed ordering, type-specialized orderings, custom
three-way Python callables and key functions. Containers never rely on a
built-in less-than on the stored type; every comparison goes through a
Comparator.
"""

import functools
from enum import Enum
from typing import Any, Callable, Optional, TypeVar, Union


T = TypeVar('T')


class ComparatorType(Enum):
    """Comparator implementation type."""
    NATURAL = "natural"
    REVERSE = "reverse"
    NUMERIC = "numeric"
    STRING = "string"
    KEY_FUNC = "key_func"
    PYTHON = "python"


def _compare_natural(a: Any, b: Any) -> int:
    """Three-way comparison using natural ordering.

    Returns:
        -1 if a < b, 0 if a == b, 1 if a > b
    """
    if a < b:
        return -1
    elif b < a:
        return 1
    return 0


def _compare_reverse(a: Any, b: Any) -> int:
    """Reverse natural ordering."""
    return _compare_natural(b, a)


def _compare_numeric(a: Any, b: Any) -> int:
    """Comparison for int/float keys."""
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return (a > b) - (a < b)
    return _compare_natural(a, b)


def _compare_string(a: Any, b: Any) -> int:
    """Comparison for str keys (code point order, locale-unaware)."""
    if isinstance(a, str) and isinstance(b, str):
        return (a > b) - (a < b)
    return _compare_natural(a, b)


class Comparator:
    """Three-way key comparison for ordered containers.

    Strategies:

    - Natural ordering (default): uses the keys' ``__lt__``
    - Reverse ordering: inverts natural ordering
    - Numeric / string: specialized paths for int/float and str keys
    - Key function: extracts a sort key once per entry (like sorted(key=...))
    - Python callable: custom three-way comparison function

    Examples:
        # Natural ordering (default)
        s = SkipListSet()

        # Reverse ordering
        s = SkipListSet(cmp=Comparator.reverse())

        # Key function
        m = SkipListMap(key=str.lower)

        # Custom Python callable
        def by_length(a, b):
            return len(a) - len(b)
        s = SkipListSet(cmp=by_length)
    """

    __slots__ = ('_type', '_compare_func', '_key_func')

    def __init__(
        self,
        cmp_type: ComparatorType,
        compare_func: Callable[[Any, Any], int],
        key_func: Optional[Callable[[Any], Any]] = None,
    ):
        """Initialize comparator (internal use - use static methods)."""
        self._type = cmp_type
        self._compare_func = compare_func
        self._key_func = key_func

    @staticmethod
    def natural() -> 'Comparator':
        """Create a comparator using Python's natural ordering.

        Returns:
            Comparator with natural ordering
        """
        return _NATURAL_COMPARATOR

    @staticmethod
    def reverse() -> 'Comparator':
        """Create a comparator that reverses natural ordering.

        Returns:
            Comparator with reversed natural ordering
        """
        return _REVERSE_COMPARATOR

    @staticmethod
    def numeric() -> 'Comparator':
        """Create a comparator specialized for int and float keys.

        Returns:
            Comparator for numeric keys
        """
        return _NUMERIC_COMPARATOR

    @staticmethod
    def string() -> 'Comparator':
        """Create a comparator specialized for str keys.

        Returns:
            Comparator for string keys
        """
        return _STRING_COMPARATOR

    @staticmethod
    def from_callable(func: Callable[[Any, Any], int]) -> 'Comparator':
        """Create a comparator from a Python callable.

        The callable must accept two arguments and return a negative
        integer, zero or a positive integer when the first argument sorts
        before, together with, or after the second. It must define a total
        order: keys comparing equal are treated as the same key.

        Args:
            func: Comparison function

        Returns:
            Comparator wrapping the callable

        Raises:
            TypeError: If func is not callable
        """
        if not callable(func):
            raise TypeError("func must be callable")
        return Comparator(ComparatorType.PYTHON, func)

    @staticmethod
    def from_less(less: Callable[[Any, Any], bool]) -> 'Comparator':
        """Create a comparator from a strict less-than predicate.

        Args:
            less: Predicate returning True when a sorts before b

        Returns:
            Comparator deriving three-way results from the predicate

        Raises:
            TypeError: If less is not callable
        """
        if not callable(less):
            raise TypeError("less must be callable")

        @functools.wraps(less)
        def compare(a: Any, b: Any) -> int:
            if less(a, b):
                return -1
            if less(b, a):
                return 1
            return 0

        return Comparator(ComparatorType.PYTHON, compare)

    @staticmethod
    def from_key(key_func: Callable[[Any], Any]) -> 'Comparator':
        """Create a comparator from a key function.

        The key function extracts a comparison key from each element.
        Keys are extracted once, when an entry is created, and compared
        using natural ordering.

        Args:
            key_func: Function to extract comparison key

        Returns:
            Comparator using key function

        Raises:
            TypeError: If key_func is not callable
        """
        if not callable(key_func):
            raise TypeError("key_func must be callable")
        return Comparator(ComparatorType.KEY_FUNC, _compare_natural, key_func)

    def compare(self, a: Any, b: Any) -> int:
        """Compare two already-extracted sort keys.

        Returns:
            Negative if a < b, 0 if a == b, positive if a > b
        """
        return self._compare_func(a, b)

    def extract_key(self, value: Any) -> Any:
        """Extract comparison key from a value.

        For key function comparators, this extracts the sort key.
        For other comparators, returns the value unchanged.
        """
        if self._key_func is not None:
            return self._key_func(value)
        return value

    @property
    def type(self) -> str:
        """Get comparator type as string."""
        return self._type.value

    def __repr__(self) -> str:
        return f"Comparator(type='{self.type}')"


def resolve_comparator(
    cmp: Optional[Union[Comparator, Callable[[Any, Any], int]]] = None,
    key: Optional[Callable[[Any], Any]] = None,
) -> Comparator:
    """Resolve comparator from cmp/key parameters.

    Used by container constructors to create the appropriate comparator
    from user-provided parameters.

    Args:
        cmp: Comparator instance or three-way comparison callable
        key: Key extraction function

    Returns:
        Resolved Comparator

    Raises:
        TypeError: If both cmp and key are provided
        TypeError: If cmp is not Comparator or callable
        TypeError: If key is not callable
    """
    if cmp is not None and key is not None:
        raise TypeError("Cannot specify both 'cmp' and 'key'")

    if cmp is not None:
        if isinstance(cmp, Comparator):
            return cmp
        if callable(cmp):
            return Comparator.from_callable(cmp)
        raise TypeError("cmp must be a Comparator or callable")

    if key is not None:
        if not callable(key):
            raise TypeError("key must be callable")
        return Comparator.from_key(key)

    return _NATURAL_COMPARATOR


# Singleton comparators for common cases
_NATURAL_COMPARATOR = Comparator(ComparatorType.NATURAL, _compare_natural)
_REVERSE_COMPARATOR = Comparator(ComparatorType.REVERSE, _compare_reverse)
_NUMERIC_COMPARATOR = Comparator(ComparatorType.NUMERIC, _compare_numeric)
_STRING_COMPARATOR = Comparator(ComparatorType.STRING, _compare_string)
