"""ComposeTreeLib - Composite trees with visitor dispatch and fail-fast iteration.

ComposeTreeLib builds heterogeneous part/whole trees (Leaf and Composite
nodes), runs operations over them through kind-keyed visitor dispatch,
and walks them with iterators that refuse to continue once the tree has
changed under them.

Quick start:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from composetreelib import Composite, Leaf, MeasureVisitor

    root = Composite("root")
    root.add_child(Leaf(3))
    total = MeasureVisitor().run(root).total
━━━━━━━━━━━━━━━━━━━━━━━━━━

All operations are synchronous and in-memory. A tree shared between
threads must be guarded by the caller, one lock per tree held for a whole
mutation or traversal.
"""

__version__ = "0.1.0"

from .exceptions import (
    AlreadyOwnedError,
    ConcurrentModificationError,
    ConfigurationError,
    CycleDetectedError,
    NodeNotFoundError,
    TraversalExhaustedError,
    TreeError,
    UnsupportedOperationError,
)
from .config import (
    DepthConfig,
    DescribeConfig,
    FilterConfig,
    TraversalConfig,
    TraversalStrategy,
)
from .core import (
    BreadthFirstIterator,
    Component,
    Composite,
    CountVisitor,
    DepthLimitVisitor,
    DispatchRegistry,
    FindVisitor,
    FunctionVisitor,
    IdentifierVisitor,
    IteratorState,
    Leaf,
    MaxMeasureVisitor,
    MeasureVisitor,
    NodeKind,
    PostOrderIterator,
    PreOrderIterator,
    RenderVisitor,
    TreeIterator,
    Visitor,
    VisitResult,
    create_iterator,
    default_registry,
    handles,
    register_kind,
    registered_kinds,
    unregister_kind,
)
from .api import (
    count_nodes,
    find_node,
    find_nodes,
    get_leaf_nodes,
    get_tree_paths,
    get_tree_stats,
    render_tree,
    total_measure,
    traverse_tree,
)

__all__ = [
    "__version__",
    # Errors
    "TreeError",
    "CycleDetectedError",
    "AlreadyOwnedError",
    "NodeNotFoundError",
    "UnsupportedOperationError",
    "ConcurrentModificationError",
    "TraversalExhaustedError",
    "ConfigurationError",
    # Config
    "TraversalConfig",
    "TraversalStrategy",
    "DepthConfig",
    "FilterConfig",
    "DescribeConfig",
    # Nodes
    "NodeKind",
    "Component",
    "Leaf",
    "Composite",
    "register_kind",
    "registered_kinds",
    "unregister_kind",
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
    # API
    "traverse_tree",
    "count_nodes",
    "find_node",
    "find_nodes",
    "get_leaf_nodes",
    "get_tree_paths",
    "get_tree_stats",
    "render_tree",
    "total_measure",
]
