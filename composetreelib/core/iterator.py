"""Fail-fast traversal iterators for ComposeTreeLib.

An iterator walks a tree in a fixed order and hands out one node per
``next()`` call. It does not own the tree and it does not tolerate
structural change: the root's ``structure_version`` is recorded when the
iterator is created and compared on every ``has_next()``/``next()`` call.
Any add, remove or move below the root since then raises
ConcurrentModificationError. Re-create the iterator to walk the new tree.

Iterators over an unmutated tree are fully independent of each other.

State machine::

    NOT_STARTED --next()--> POSITIONED --next()--> POSITIONED
                                       --next()--> EXHAUSTED (raises)
"""

import dataclasses
import logging
from abc import ABC, abstractmethod
from collections import deque
from enum import Enum
from typing import Any, Deque, List, Optional, Tuple, Union

from ..config import TraversalConfig, TraversalStrategy
from ..exceptions import ConcurrentModificationError, TraversalExhaustedError

logger = logging.getLogger(__name__)

Step = Tuple[Any, int]


class IteratorState(Enum):
    """Lifecycle of a traversal cursor."""
    NOT_STARTED = "not_started"
    POSITIONED = "positioned"
    EXHAUSTED = "exhausted"


class TreeIterator(ABC):
    """Abstract base class for traversal orders.

    Subclasses only implement ``_advance``, the raw walk. Depth limits,
    filtering, lookahead and modification checks live here.
    """

    def __init__(self, root, config: Optional[TraversalConfig] = None):
        """Initialize iterator over the tree rooted at ``root``.

        Args:
            root: Any Component; the walk never leaves its subtree
            config: Depth limits and filters (strategy is ignored here)

        Raises:
            ConfigurationError: If ``config`` is invalid
        """
        self.root = root
        self.config = (config or TraversalConfig()).validate_or_raise()
        self._expected_version = self._root_version()
        self._state = IteratorState.NOT_STARTED
        self._current = None
        self._current_depth: Optional[int] = None
        self._lookahead: Optional[Step] = None
        self._walk_done = False

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def current(self):
        """Node returned by the last successful ``next()``, else None."""
        return self._current

    @property
    def depth_of_current(self) -> Optional[int]:
        """Depth of ``current`` relative to the root."""
        return self._current_depth

    def has_next(self) -> bool:
        """Check whether ``next()`` would return a node.

        Raises:
            ConcurrentModificationError: If the tree changed structurally
        """
        self._check_for_modification()
        return self._peek() is not None

    def next(self):
        """Return the next node.

        Raises:
            ConcurrentModificationError: If the tree changed structurally
            TraversalExhaustedError: If every node has been returned
        """
        self._check_for_modification()
        step = self._peek()
        if step is None:
            self._state = IteratorState.EXHAUSTED
            self._current = None
            self._current_depth = None
            raise TraversalExhaustedError(
                f"Traversal of {self.root.id!r} is exhausted"
            )
        self._lookahead = None
        self._current, self._current_depth = step
        self._state = IteratorState.POSITIONED
        return self._current

    def __iter__(self) -> 'TreeIterator':
        return self

    def __next__(self):
        return self.next()

    @abstractmethod
    def _advance(self) -> Optional[Step]:
        """Return the next raw ``(node, depth)`` of the walk, or None."""
        pass

    def _explores(self, node, depth: int) -> bool:
        """Check if the children of ``node`` belong to the walk."""
        return not node.is_leaf() and self.config.depth.should_explore(depth)

    def _accepts(self, node, depth: int) -> bool:
        return (self.config.depth.should_yield(depth) and
                self.config.filter.should_include(node))

    def _peek(self) -> Optional[Step]:
        while self._lookahead is None and not self._walk_done:
            step = self._advance()
            if step is None:
                self._walk_done = True
            elif self._accepts(*step):
                self._lookahead = step
        return self._lookahead

    def _root_version(self) -> int:
        return getattr(self.root, "structure_version", 0)

    def _check_for_modification(self) -> None:
        actual = self._root_version()
        if actual != self._expected_version:
            logger.debug("Concurrent modification of %s: version %d -> %d",
                         self.root.id, self._expected_version, actual)
            raise ConcurrentModificationError(
                self.root, self._expected_version, actual
            )


class PreOrderIterator(TreeIterator):
    """Depth-first pre-order: a node, then each child left to right."""

    def __init__(self, root, config: Optional[TraversalConfig] = None):
        super().__init__(root, config)
        self._stack: List[Step] = [(root, 0)]

    def _advance(self) -> Optional[Step]:
        if not self._stack:
            return None
        node, depth = self._stack.pop()
        if self._explores(node, depth):
            for child in reversed(node.children):
                self._stack.append((child, depth + 1))
        return node, depth


class PostOrderIterator(TreeIterator):
    """Depth-first post-order: every child subtree, then the node.

    Good for aggregation, where a composite's value depends on its
    children having been seen first.
    """

    def __init__(self, root, config: Optional[TraversalConfig] = None):
        super().__init__(root, config)
        self._stack: List[Tuple[Any, int, bool]] = [(root, 0, False)]

    def _advance(self) -> Optional[Step]:
        while self._stack:
            node, depth, expanded = self._stack.pop()
            if expanded or not self._explores(node, depth):
                return node, depth
            self._stack.append((node, depth, True))
            for child in reversed(node.children):
                self._stack.append((child, depth + 1, False))
        return None


class BreadthFirstIterator(TreeIterator):
    """Level-order: all nodes at depth N before any node at depth N+1."""

    def __init__(self, root, config: Optional[TraversalConfig] = None):
        super().__init__(root, config)
        self._queue: Deque[Step] = deque([(root, 0)])

    def _advance(self) -> Optional[Step]:
        if not self._queue:
            return None
        node, depth = self._queue.popleft()
        if self._explores(node, depth):
            self._queue.extend((child, depth + 1) for child in node.children)
        return node, depth


_ITERATORS = {
    TraversalStrategy.DEPTH_FIRST_PRE: PreOrderIterator,
    TraversalStrategy.DEPTH_FIRST_POST: PostOrderIterator,
    TraversalStrategy.BREADTH_FIRST: BreadthFirstIterator,
}


def create_iterator(root,
                    strategy: Union[TraversalStrategy, str, None] = None,
                    config: Optional[TraversalConfig] = None) -> TreeIterator:
    """Create an iterator over ``root`` by strategy.

    Args:
        root: Node to start from
        strategy: Overrides ``config.strategy`` when given
        config: Depth limits, filters and default strategy

    Returns:
        TreeIterator instance

    Raises:
        ConfigurationError: If the strategy name is unknown or the config
            is invalid
    """
    config = config or TraversalConfig()
    if strategy is not None:
        config = dataclasses.replace(config, strategy=TraversalStrategy.parse(strategy))
    config.validate_or_raise()
    return _ITERATORS[config.strategy](root, config)
