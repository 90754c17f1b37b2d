"""Core abstractions for ComposeTreeLib.

This package contains the node model, the visitor dispatch machinery and
the traversal iterators that the rest of the library builds on.
"""

from .kinds import NodeKind, kind_key, register_kind, registered_kinds, unregister_kind
from .dispatch import (
    DispatchRegistry,
    FunctionVisitor,
    Visitor,
    VisitResult,
    default_registry,
    handles,
)
from .iterator import (
    BreadthFirstIterator,
    IteratorState,
    PostOrderIterator,
    PreOrderIterator,
    TreeIterator,
    create_iterator,
)
from .node import Component, Composite, Leaf
from .visitors import (
    CountVisitor,
    DepthLimitVisitor,
    FindVisitor,
    IdentifierVisitor,
    MaxMeasureVisitor,
    MeasureVisitor,
    RenderVisitor,
)

__all__ = [
    # Kinds
    "NodeKind",
    "kind_key",
    "register_kind",
    "registered_kinds",
    "unregister_kind",
    # Nodes
    "Component",
    "Leaf",
    "Composite",
    # Dispatch
    "DispatchRegistry",
    "Visitor",
    "FunctionVisitor",
    "VisitResult",
    "default_registry",
    "handles",
    # Iteration
    "TreeIterator",
    "PreOrderIterator",
    "PostOrderIterator",
    "BreadthFirstIterator",
    "IteratorState",
    "create_iterator",
    # Visitors
    "MeasureVisitor",
    "MaxMeasureVisitor",
    "CountVisitor",
    "IdentifierVisitor",
    "RenderVisitor",
    "FindVisitor",
    "DepthLimitVisitor",
]
