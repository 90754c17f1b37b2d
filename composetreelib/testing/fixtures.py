"""Test fixtures for ComposeTreeLib consumers.

These helpers build trees from compact literals and record what a
visitor saw, so test suites of projects using ComposeTreeLib do not need
to repeat the same setup code.
"""

import numbers
from typing import Any, Dict, List, Optional, Set, Tuple

from ..core.dispatch import Visitor, VisitResult, handles
from ..core.kinds import NodeKind
from ..core.node import Component, Composite, Leaf


def build_tree(literal: Any) -> Component:
    """Build a tree from a nested literal.

    Literal forms:
    - ``(node_id, [child, ...])`` -> Composite with those children
    - ``(node_id, payload)`` -> Leaf with that payload
    - a bare number -> Leaf with a generated id

    Example:
        root = build_tree(("root", [
            ("A", [("A1", 1), ("A2", 2)]),
            ("B", 3),
        ]))

    Raises:
        ValueError: If ``literal`` matches none of the forms
    """
    if isinstance(literal, numbers.Real) and not isinstance(literal, bool):
        return Leaf(literal)
    if isinstance(literal, tuple) and len(literal) == 2:
        node_id, body = literal
        if isinstance(body, list):
            return Composite(node_id, children=[build_tree(child) for child in body])
        return Leaf(body, node_id=node_id)
    raise ValueError(f"Cannot build a node from {literal!r}")


def index_tree(root: Component) -> Dict[str, Component]:
    """Map every id in the tree to its node.

    Raises:
        ValueError: If two nodes share an id
    """
    nodes: Dict[str, Component] = {}
    for node in root.create_iterator():
        if node.id in nodes:
            raise ValueError(f"Duplicate node id {node.id!r}")
        nodes[node.id] = node
    return nodes


def tree_shape(root: Component) -> Tuple:
    """Return ``(id, (child shapes...))``, handy for before/after asserts."""
    return (root.id, tuple(tree_shape(child) for child in root.children))


class RecordingVisitor(Visitor):
    """Visitor that records every handler call as ``(kind, id, depth)``.

    Args:
        skip: Ids whose children are skipped
        stop_at: Id at which the whole traversal stops
    """

    def __init__(self, skip: Optional[Set[str]] = None,
                 stop_at: Optional[str] = None):
        super().__init__()
        self.skip = set(skip or ())
        self.stop_at = stop_at
        self.calls: List[Tuple[str, str, int]] = []

    @handles(NodeKind.LEAF)
    def visit_leaf(self, node) -> VisitResult:
        return self._record("leaf", node)

    @handles(NodeKind.COMPOSITE)
    def visit_composite(self, node) -> VisitResult:
        return self._record("composite", node)

    @property
    def ids(self) -> List[str]:
        return [node_id for _, node_id, _ in self.calls]

    def _record(self, handler: str, node) -> VisitResult:
        self.calls.append((handler, node.id, self.depth))
        if node.id == self.stop_at:
            return VisitResult.STOP
        if node.id in self.skip:
            return VisitResult.SKIP_CHILDREN
        return VisitResult.CONTINUE


class LeafOnlyVisitor(Visitor):
    """Visitor with a leaf handler and nothing else.

    Useful for checking that dispatch fails at the first composite.
    """

    def __init__(self):
        super().__init__()
        self.seen: List[str] = []

    @handles(NodeKind.LEAF)
    def visit_leaf(self, node) -> None:
        self.seen.append(node.id)


def kinds_seen(visitor: RecordingVisitor) -> Set[str]:
    """Set of handler names a RecordingVisitor used."""
    return {handler for handler, _, _ in visitor.calls}
