"""Configuration system for ComposeTreeLib.

This module defines how users specify their traversal requirements:
which order to walk in, which depths to yield, which nodes to keep and
how descriptions are laid out.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Union

from .exceptions import ConfigurationError


class TraversalStrategy(Enum):
    """How to walk the tree.

    Pre-order is the reference order used by ``accept`` and by
    ``create_iterator()`` when no strategy is given.
    """
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    BREADTH_FIRST = "bfs"           # Level by level

    @classmethod
    def parse(cls, value: Union['TraversalStrategy', str]) -> 'TraversalStrategy':
        """Accept an enum member, its value, its name or a common alias."""
        if isinstance(value, cls):
            return value
        text = str(value).lower()
        for member in cls:
            if text in (member.value, member.name.lower()):
                return member
        if text in _STRATEGY_ALIASES:
            return cls(_STRATEGY_ALIASES[text])
        raise ConfigurationError([
            f"Unknown traversal strategy: {value}. "
            f"Choose from: {', '.join(m.value for m in cls)}"
        ])


_STRATEGY_ALIASES = {
    'dfs': "dfs_pre",
    'pre_order': "dfs_pre",
    'post_order': "dfs_post",
    'breadth_first': "bfs",
    'level': "bfs",
    'level_order': "bfs",
}


@dataclass
class DepthConfig:
    """Configuration for depth-based filtering."""

    min_depth: int = 0                  # Minimum depth to yield
    max_depth: Optional[int] = None     # Maximum depth to traverse

    def should_yield(self, depth: int) -> bool:
        """Check if nodes at this depth should be yielded."""
        if depth < self.min_depth:
            return False
        if self.max_depth is not None and depth > self.max_depth:
            return False
        return True

    def should_explore(self, depth: int) -> bool:
        """Check if children of a node at this depth should be explored."""
        if self.max_depth is not None:
            return depth < self.max_depth
        return True


@dataclass
class FilterConfig:
    """Configuration for filtering yielded nodes.

    Filters only decide what is yielded. Children of a filtered-out
    composite are still walked.
    """

    include_filter: Optional[Callable[[Any], bool]] = None
    exclude_filter: Optional[Callable[[Any], bool]] = None

    def should_include(self, node) -> bool:
        """Check if a node passes the filters.

        Exclusion takes precedence over inclusion.
        """
        if self.exclude_filter and self.exclude_filter(node):
            return False
        if self.include_filter:
            return bool(self.include_filter(node))
        return True


@dataclass
class DescribeConfig:
    """Layout options for ``describe()`` and the render helpers."""

    indent: str = "  "
    show_measure: bool = False


@dataclass
class TraversalConfig:
    """Complete configuration for a tree traversal."""

    strategy: TraversalStrategy = TraversalStrategy.DEPTH_FIRST_PRE
    depth: DepthConfig = field(default_factory=DepthConfig)
    filter: FilterConfig = field(default_factory=FilterConfig)

    @classmethod
    def shallow(cls, max_depth: int = 1) -> 'TraversalConfig':
        """Create config for a shallow walk.

        Args:
            max_depth: How deep to go (default 1 = immediate children only)
        """
        return cls(depth=DepthConfig(max_depth=max_depth))

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if not isinstance(self.strategy, TraversalStrategy):
            errors.append(f"strategy must be a TraversalStrategy, got {self.strategy!r}")

        if self.depth.min_depth < 0:
            errors.append("min_depth cannot be negative")

        if self.depth.max_depth is not None:
            if self.depth.max_depth < 0:
                errors.append("max_depth cannot be negative")
            if self.depth.max_depth < self.depth.min_depth:
                errors.append("max_depth cannot be less than min_depth")

        return errors

    def validate_or_raise(self) -> 'TraversalConfig':
        """Raise ConfigurationError if ``validate()`` finds problems."""
        errors = self.validate()
        if errors:
            raise ConfigurationError(errors)
        return self
