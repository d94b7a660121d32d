"""
diagnostics - Per-level dumps and height statistics for skip lists

This module provides debugging aids: a per-level "sketch" of the keys each
level holds, and a LevelReport summarizing tower heights against the
expected geometric distribution. Nothing here is part of the containers'
functional contract.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from skiplist_collections._skiplist import SkipList


logger = logging.getLogger(__name__)


def _engine(container: Any) -> SkipList:
    """Accept a SkipList or a container wrapping one."""
    if isinstance(container, SkipList):
        return container
    engine = getattr(container, '_skiplist', None)
    if isinstance(engine, SkipList):
        return engine
    raise TypeError(f"expected a skip list container, got {type(container).__name__}")


def sketch(container: Any) -> List[List[Any]]:
    """Keys present at each level, level 0 first.

    Args:
        container: SkipList, SkipListSet or SkipListMap

    Returns:
        One ascending key list per level
    """
    sl = _engine(container)
    return [
        [node.entry.key for node in sl._iter_level(level)]
        for level in range(sl.max_level)
    ]


def format_sketch(container: Any) -> str:
    """Render sketch() one line per level, level 0 first."""
    lines = []
    for level, keys in enumerate(sketch(container)):
        lines.append(f"L{level}: " + " ".join(str(k) for k in keys))
    return "\n".join(lines)


def log_sketch(
    container: Any,
    log: Optional[logging.Logger] = None,
    level: int = logging.DEBUG,
) -> None:
    """Write the per-level dump through logging.

    Args:
        container: SkipList, SkipListSet or SkipListMap
        log: Logger to use (defaults to this module's logger)
        level: Logging level of the messages
    """
    log = log or logger
    if not log.isEnabledFor(level):
        return
    for index, keys in enumerate(sketch(container)):
        log.log(level, "L%d (%d): %s", index, len(keys), " ".join(str(k) for k in keys))


@dataclass
class LevelReport:
    """Shape of a skip list: level occupancy and tower heights."""
    size: int = 0
    max_level: int = 0
    probability: float = 0.0

    # Nodes linked at each level, level 0 first
    nodes_per_level: List[int] = field(default_factory=list)

    # height -> number of towers, head spine excluded
    height_histogram: Dict[int, int] = field(default_factory=dict)

    # Tallest tower other than the head spine (0 with fewer than 2 entries)
    max_height: int = 0
    mean_height: float = 0.0

    @property
    def expected_mean_height(self) -> float:
        """Mean of the uncapped geometric height distribution, 1 / (1 - p)."""
        if self.probability >= 1.0:
            return float(self.max_level)
        return 1.0 / (1.0 - self.probability)

    @property
    def total_nodes(self) -> int:
        return sum(self.nodes_per_level)

    def __str__(self) -> str:
        """Human-readable report."""
        lines = [
            "SkipList Level Report",
            "=====================",
            f"Entries:                {self.size:,}",
            f"Max level:              {self.max_level}",
            f"Probability:            {self.probability}",
            f"Total nodes:            {self.total_nodes:,}",
            "",
            "Nodes per level:",
        ]
        for level, count in enumerate(self.nodes_per_level):
            lines.append(f"  L{level:<3}                  {count:,}")

        lines.extend([
            "",
            f"Tallest tower:          {self.max_height}",
            f"Mean tower height:      {self.mean_height:.2f}"
            f" (expected {self.expected_mean_height:.2f})",
        ])
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable format."""
        return {
            'size': self.size,
            'max_level': self.max_level,
            'probability': self.probability,
            'nodes_per_level': list(self.nodes_per_level),
            'height_histogram': {str(h): n for h, n in sorted(self.height_histogram.items())},
            'max_height': self.max_height,
            'mean_height': self.mean_height,
            'expected_mean_height': self.expected_mean_height,
        }

    def to_json(self, path: Optional[Union[str, Path]] = None) -> str:
        """Export as JSON."""
        json_str = json.dumps(self.to_dict(), indent=2)
        if path:
            Path(path).write_text(json_str)
        return json_str


def level_report(container: Any) -> LevelReport:
    """Compute a LevelReport for a skip list container."""
    sl = _engine(container)
    nodes_per_level = [
        sum(1 for _ in sl._iter_level(level)) for level in range(sl.max_level)
    ]

    histogram: Dict[int, int] = {}
    bottom = sl._heads[0]
    # The minimum always spans every level; leave it out of the statistics
    node = bottom.next if bottom is not None else None
    while node is not None:
        height = 0
        tower = node
        while tower is not None:
            height += 1
            tower = tower.up
        histogram[height] = histogram.get(height, 0) + 1
        node = node.next

    towers = sum(histogram.values())
    mean = (
        sum(h * n for h, n in histogram.items()) / towers
        if towers > 0 else 0.0
    )

    return LevelReport(
        size=len(sl),
        max_level=sl.max_level,
        probability=sl.probability,
        nodes_per_level=nodes_per_level,
        height_histogram=histogram,
        max_height=max(histogram) if histogram else 0,
        mean_height=mean,
    )
