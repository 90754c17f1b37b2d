"""High-level API for ComposeTreeLib.

This module provides simple, functional interfaces for common tree
operations. These functions wrap the iterators and visitors for ease of
use in simple cases.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from .config import (
    DepthConfig,
    DescribeConfig,
    FilterConfig,
    TraversalConfig,
    TraversalStrategy,
)
from .core.iterator import create_iterator
from .core.kinds import NodeKind
from .core.node import Component
from .core.visitors import CountVisitor, FindVisitor, MeasureVisitor, RenderVisitor


def traverse_tree(
    root: Component,
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    include_filter: Optional[Callable[[Component], bool]] = None,
    exclude_filter: Optional[Callable[[Component], bool]] = None,
) -> Iterator[Component]:
    """Simple interface for tree traversal.

    Args:
        root: Starting node for traversal
        strategy: Traversal strategy (dfs_pre, dfs_post, bfs)
        max_depth: Maximum depth to traverse
        min_depth: Minimum depth before yielding nodes
        include_filter: Function to determine if node should be yielded
        exclude_filter: Function to determine if node should be skipped

    Returns:
        A fail-fast iterator; mutating the tree while consuming it raises
        ConcurrentModificationError

    Raises:
        ConfigurationError: If the options are inconsistent

    Example:
        >>> for node in traverse_tree(root, max_depth=2):
        ...     print(node.id)
    """
    config = TraversalConfig(
        strategy=TraversalStrategy.parse(strategy),
        depth=DepthConfig(min_depth=min_depth, max_depth=max_depth),
        filter=FilterConfig(
            include_filter=include_filter,
            exclude_filter=exclude_filter,
        ),
    )
    return create_iterator(root, config=config)


def count_nodes(root: Component, **kwargs) -> int:
    """Count nodes that match the traversal options (see traverse_tree)."""
    count = 0
    for _ in traverse_tree(root, **kwargs):
        count += 1
    return count


def find_nodes(
    root: Component,
    predicate: Callable[[Component], bool],
    **kwargs
) -> Iterator[Component]:
    """Yield nodes that match ``predicate``.

    Example:
        >>> big = list(find_nodes(root, lambda n: n.measure() > 100))
    """
    kwargs['include_filter'] = predicate
    yield from traverse_tree(root, **kwargs)


def find_node(root: Component, node_id: str) -> Optional[Component]:
    """Return the first node in pre-order whose id is ``node_id``."""
    return FindVisitor(lambda node: node.id == node_id).run(root).found


def get_leaf_nodes(root: Component, **kwargs) -> Iterator[Component]:
    """Yield every leaf node, in traversal order."""
    for node in traverse_tree(root, **kwargs):
        if node.is_leaf():
            yield node


def get_tree_paths(root: Component, **kwargs) -> Iterator[List[str]]:
    """Yield the id path from the tree root to each traversed node."""
    for node in traverse_tree(root, **kwargs):
        yield node.path()


def total_measure(root: Component) -> Union[int, float]:
    """Sum of leaf measures, computed by visiting the tree."""
    return MeasureVisitor().run(root).total


def render_tree(root: Component, indent: str = "  ",
                show_measure: bool = False) -> str:
    """Return an indented, one-line-per-node rendering of the tree."""
    config = DescribeConfig(indent=indent, show_measure=show_measure)
    return RenderVisitor(config).run(root).text()


def get_tree_stats(root: Component) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with total, leaf and composite counts, counts per
        kind, maximum depth, average branching and total measure

    Raises:
        TypeError: If some leaf cannot be measured

    Example:
        >>> stats = get_tree_stats(root)
        >>> print(f"Total nodes: {stats['total_nodes']}")
    """
    counter = CountVisitor().run(root)
    counts = dict(counter.counts)
    composites = counts.get(NodeKind.COMPOSITE.value, 0)
    stats = {
        'total_nodes': counter.total,
        'leaf_nodes': counts.get(NodeKind.LEAF.value, 0),
        'composite_nodes': composites,
        'by_kind': counts,
        'max_depth': counter.max_depth,
        'total_measure': root.measure(),
    }
    stats['average_branching'] = (
        (counter.total - 1) / composites if composites else 0
    )
    return stats
