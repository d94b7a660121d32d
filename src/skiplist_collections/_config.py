"""
config - Runtime configuration for skiplist_collections

This module provides the process-wide defaults used when a container is
created without explicit parameters: promotion probability, maximum tower
height, random seed, and the debug switch that re-validates the structure
after every mutation. Defaults can be overridden through environment
variables prefixed with SKIPLIST_COLLECTIONS_.
"""

import os
from typing import Optional, Dict, Any


DEFAULT_PROBABILITY = 0.5
DEFAULT_MAX_LEVEL = 10


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    """Get environment variable with prefix."""
    full_name = f"SKIPLIST_COLLECTIONS_{name}"
    return os.environ.get(full_name, default)


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Get boolean environment variable."""
    value = _get_env(name)
    if value is None:
        return default
    return value.lower() in ('1', 'true', 'yes', 'on')


def _get_env_int(name: str, default: Optional[int]) -> Optional[int]:
    """Get integer environment variable."""
    value = _get_env(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_float(name: str, default: float) -> float:
    """Get float environment variable."""
    value = _get_env(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def validate_probability(value: float) -> float:
    """Check a promotion probability.

    Args:
        value: Candidate probability

    Returns:
        The probability as a float

    Raises:
        ValueError: If value is not strictly between 0 and 1
    """
    p = float(value)
    if not 0.0 < p < 1.0:
        raise ValueError(f"probability must be in (0, 1), got {value!r}")
    return p


def validate_max_level(value: int) -> int:
    """Check a maximum tower height.

    Args:
        value: Candidate height

    Returns:
        The height as an int

    Raises:
        ValueError: If value is less than 1
    """
    level = int(value)
    if level < 1:
        raise ValueError(f"max_level must be >= 1, got {value!r}")
    return level


class Config:
    """Global configuration for skiplist_collections.

    Writes affect only containers created after the write, except
    check_invariants which is consulted on every mutation.
    """

    __slots__ = (
        '_default_probability',
        '_default_max_level',
        '_default_seed',
        '_check_invariants',
        '_initialized',
    )

    def __init__(self) -> None:
        """Initialize configuration (called once at module import)."""
        self._initialized = False
        self._init()

    def _init(self) -> None:
        """Perform initialization from environment or defaults."""
        if self._initialized:
            return

        probability = _get_env_float('PROBABILITY', DEFAULT_PROBABILITY)
        try:
            self._default_probability = validate_probability(probability)
        except ValueError:
            self._default_probability = DEFAULT_PROBABILITY

        max_level = _get_env_int('MAX_LEVEL', DEFAULT_MAX_LEVEL)
        try:
            self._default_max_level = validate_max_level(max_level)
        except (TypeError, ValueError):
            self._default_max_level = DEFAULT_MAX_LEVEL

        self._default_seed = _get_env_int('SEED', None)
        self._check_invariants = _get_env_bool('CHECK_INVARIANTS', False)

        self._initialized = True

    def reset(self) -> None:
        """Re-read every setting from the environment."""
        self._initialized = False
        self._init()

    @property
    def default_probability(self) -> float:
        """Promotion probability used when a container gets no p."""
        return self._default_probability

    @default_probability.setter
    def default_probability(self, value: float) -> None:
        """Set default promotion probability.

        Raises:
            ValueError: If value is not strictly between 0 and 1
        """
        self._default_probability = validate_probability(value)

    @property
    def default_max_level(self) -> int:
        """Maximum tower height used when a container gets no max_level."""
        return self._default_max_level

    @default_max_level.setter
    def default_max_level(self, value: int) -> None:
        """Set default maximum tower height.

        Raises:
            ValueError: If value is less than 1
        """
        self._default_max_level = validate_max_level(value)

    @property
    def default_seed(self) -> Optional[int]:
        """Seed for each container's random source (None = OS entropy)."""
        return self._default_seed

    @default_seed.setter
    def default_seed(self, value: Optional[int]) -> None:
        """Set default seed."""
        if value is not None and not isinstance(value, int):
            raise ValueError(f"seed must be an int or None, got {value!r}")
        self._default_seed = value

    @property
    def check_invariants(self) -> bool:
        """Whether every mutation re-validates the whole structure."""
        return self._check_invariants

    @check_invariants.setter
    def check_invariants(self, value: bool) -> None:
        """Enable or disable invariant checking after mutations."""
        self._check_invariants = bool(value)

    def to_dict(self) -> Dict[str, Any]:
        """Current settings as a dictionary."""
        return {
            'default_probability': self._default_probability,
            'default_max_level': self._default_max_level,
            'default_seed': self._default_seed,
            'check_invariants': self._check_invariants,
        }

    def __repr__(self) -> str:
        """String representation of configuration."""
        return (
            f"Config("
            f"default_probability={self.default_probability}, "
            f"default_max_level={self.default_max_level}, "
            f"check_invariants={self.check_invariants})"
        )


# Global configuration instance (initialized at module import)
config = Config()
