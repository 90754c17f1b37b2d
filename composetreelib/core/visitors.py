"""Stock visitors for ComposeTreeLib.

Visitors define what happens at each node during ``accept``. This allows
the same tree to be summed, counted, rendered or searched without the
node classes knowing about any of these operations.
"""

from collections import Counter
from typing import Any, Callable, List, Optional, Union

from ..config import DescribeConfig
from .dispatch import Visitor, VisitResult, handles
from .kinds import NodeKind, kind_key


class MeasureVisitor(Visitor):
    """Sums leaf measures across a tree.

    Handles exactly leaves and composites; any other node kind raises
    UnsupportedOperationError.
    """

    def __init__(self):
        super().__init__()
        self.total: Union[int, float] = 0

    @handles(NodeKind.LEAF)
    def visit_leaf(self, node) -> None:
        self.total += node.measure()

    @handles(NodeKind.COMPOSITE)
    def visit_composite(self, node) -> None:
        pass


class MaxMeasureVisitor(Visitor):
    """Finds the largest leaf measure (None for a tree without leaves)."""

    def __init__(self):
        super().__init__()
        self.maximum: Optional[Union[int, float]] = None
        self.node = None

    @handles(NodeKind.LEAF)
    def visit_leaf(self, node) -> None:
        value = node.measure()
        if self.maximum is None or value > self.maximum:
            self.maximum = value
            self.node = node

    @handles(NodeKind.COMPOSITE)
    def visit_composite(self, node) -> None:
        pass


class CountVisitor(Visitor):
    """Counts nodes per kind."""

    def __init__(self):
        super().__init__()
        self.counts: Counter = Counter()
        self.max_depth = 0

    @handles(NodeKind.ANY)
    def visit_node(self, node) -> None:
        self.counts[kind_key(node.kind)] += 1
        self.max_depth = max(self.max_depth, self.depth)

    @property
    def total(self) -> int:
        return sum(self.counts.values())


class IdentifierVisitor(Visitor):
    """Collects node ids in visit order."""

    def __init__(self):
        super().__init__()
        self.ids: List[str] = []

    @handles(NodeKind.ANY)
    def visit_node(self, node) -> None:
        self.ids.append(node.id)


class RenderVisitor(Visitor):
    """Collects one indented description line per node."""

    def __init__(self, config: Optional[DescribeConfig] = None):
        super().__init__()
        self.config = config or DescribeConfig()
        self.lines: List[str] = []

    @handles(NodeKind.ANY)
    def visit_node(self, node) -> None:
        self.lines.append(node.describe_line(self.depth, self.config))

    def text(self) -> str:
        return "\n".join(self.lines)


class FindVisitor(Visitor):
    """Stops the traversal at the first node matching ``predicate``."""

    def __init__(self, predicate: Callable[[Any], bool]):
        super().__init__()
        self.predicate = predicate
        self.found = None

    @handles(NodeKind.ANY)
    def visit_node(self, node) -> VisitResult:
        if self.predicate(node):
            self.found = node
            return VisitResult.STOP
        return VisitResult.CONTINUE


class DepthLimitVisitor(Visitor):
    """Runs another visitor but does not descend below ``max_depth``.

    Depth is relative to the node ``accept`` was first called on. The
    wrapped visitor still decides per kind, so it can raise
    UnsupportedOperationError as usual.
    """

    def __init__(self, inner: Visitor, max_depth: int):
        super().__init__()
        if max_depth < 0:
            raise ValueError("max_depth cannot be negative")
        self.inner = inner
        self.max_depth = max_depth

    @handles(NodeKind.ANY)
    def visit_node(self, node) -> VisitResult:
        self.inner.depth = self.depth
        result = self.inner.dispatch(node)
        if result is VisitResult.STOP:
            return result
        if self.depth >= self.max_depth:
            return VisitResult.SKIP_CHILDREN
        return result

