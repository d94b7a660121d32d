"""
skiplist_collections - Randomized skip list containers for Python

This package provides an ordered set and an ordered map built on one
skip list engine, with expected logarithmic search, insertion and deletion,
bound queries and bidirectional ordered iteration.
"""

__version__ = "0.1.0"

# Tier 0: Configuration & Errors
from skiplist_collections._config import config

from skiplist_collections._errors import (
    SkipListError,
    EmptyContainerError,
    NodeConstructionError,
    InvalidPositionError,
    InvariantError,
)

# Tier 1: Comparator System
from skiplist_collections._comparator import (
    Comparator,
    ComparatorType,
    resolve_comparator,
)

# Tier 2: Nodes & Positions
from skiplist_collections._node import (
    Entry,
    Node,
)

from skiplist_collections._position import (
    Position,
)

# Tier 3: Core Algorithm & Diagnostics
from skiplist_collections._skiplist import (
    SkipList,
)

from skiplist_collections._diagnostics import (
    LevelReport,
    format_sketch,
    level_report,
    log_sketch,
    sketch,
)

# Tier 4: Public API
from skiplist_collections._skiplistset import (
    SkipListSet,
)

from skiplist_collections._skiplistmap import (
    SkipListMap,
)

__all__ = [
    # Version
    "__version__",
    # Tier 0: config
    "config",
    # Tier 0: errors
    "SkipListError",
    "EmptyContainerError",
    "NodeConstructionError",
    "InvalidPositionError",
    "InvariantError",
    # Tier 1: comparator
    "Comparator",
    "ComparatorType",
    "resolve_comparator",
    # Tier 2: node / position
    "Entry",
    "Node",
    "Position",
    # Tier 3: Core Algorithm
    "SkipList",
    "LevelReport",
    "format_sketch",
    "level_report",
    "log_sketch",
    "sketch",
    # Tier 4: Public API
    "SkipListSet",
    "SkipListMap",
]
