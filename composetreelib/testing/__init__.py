"""Testing utilities for ComposeTreeLib consumers."""

from .fixtures import (
    LeafOnlyVisitor,
    RecordingVisitor,
    build_tree,
    index_tree,
    kinds_seen,
    tree_shape,
)

__all__ = [
    'build_tree',
    'index_tree',
    'tree_shape',
    'kinds_seen',
    'RecordingVisitor',
    'LeafOnlyVisitor',
]
