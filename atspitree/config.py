"""Configuration for atspitree.

Protocol constants (interface names, the null-child sentinel literals),
the default per-call timeout, and the dataclasses used to configure tree
walks.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Set


# Per-call deadline used when a handle is created without one (seconds)
DEFAULT_TIMEOUT = 1.0

ACCESSIBLE_INTERFACE = "org.a11y.atspi.Accessible"
TEXT_INTERFACE = "org.a11y.atspi.Text"
PROPERTIES_INTERFACE = "org.freedesktop.DBus.Properties"

# GetChildAtIndex answers with this pair when the index has no child
REGISTRY_BUS_NAME = "org.a11y.atspi.Registry"
NULL_PATH = "/org/a11y/atspi/null"


class WalkStrategy(Enum):
    """How to walk the accessibility tree."""
    BREADTH_FIRST = "bfs"           # Level by level
    DEPTH_FIRST_PRE = "dfs"         # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent


@dataclass
class DepthConfig:
    """Configuration for depth-based filtering."""

    min_depth: int = 0                          # Minimum depth to yield
    max_depth: Optional[int] = None             # Maximum depth to walk
    specific_depths: Optional[Set[int]] = None  # Only these specific depths

    def should_yield(self, depth: int) -> bool:
        """Check if nodes at this depth should be yielded.

        Args:
            depth: Current depth

        Returns:
            True if depth is within configured range
        """
        if self.specific_depths is not None:
            return depth in self.specific_depths

        if depth < self.min_depth:
            return False
        if self.max_depth is not None and depth > self.max_depth:
            return False

        return True

    def should_explore(self, depth: int) -> bool:
        """Check if children at this depth should be explored.

        Args:
            depth: Current depth

        Returns:
            True if we should go deeper
        """
        if self.specific_depths is not None:
            return any(d > depth for d in self.specific_depths)

        if self.max_depth is not None:
            return depth < self.max_depth

        return True
