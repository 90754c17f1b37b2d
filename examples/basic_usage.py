#!/usr/bin/env python3
"""Demo script for ComposeTreeLib.

Builds a small bill-of-materials tree, runs a few stock visitors and a
custom one over it, walks it with each traversal strategy, and shows
what happens when the tree changes under a live iterator.
"""

import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from composetreelib import (
    Composite,
    ConcurrentModificationError,
    CycleDetectedError,
    Leaf,
    MeasureVisitor,
    NodeKind,
    Visitor,
    VisitResult,
    get_tree_stats,
    handles,
    render_tree,
    traverse_tree,
)


class PriceListVisitor(Visitor):
    """Collect ``(path, price)`` for every part."""

    def __init__(self):
        super().__init__()
        self.rows = []

    @handles(NodeKind.LEAF)
    def visit_part(self, node):
        self.rows.append(("/".join(node.path()), node.measure()))

    @handles(NodeKind.COMPOSITE)
    def visit_assembly(self, node):
        # Drafts are not priced yet
        if node.id.startswith("draft"):
            return VisitResult.SKIP_CHILDREN
        return VisitResult.CONTINUE


def build_bike() -> Composite:
    bike = Composite("bike")
    frame = bike.add_child(Composite("frame"))
    frame.add_child(Leaf(120, node_id="tube-set"))
    frame.add_child(Leaf(35, node_id="fork"))
    wheels = bike.add_child(Composite("wheels"))
    wheels.add_child(Leaf(80, node_id="front"))
    wheels.add_child(Leaf(90, node_id="rear"))
    draft = bike.add_child(Composite("draft-lights"))
    draft.add_child(Leaf(15, node_id="lamp"))
    return bike


def demo_visitors(bike: Composite):
    print("\n=== Visitors ===")
    print(render_tree(bike, show_measure=True))
    print(f"\nTotal price: {MeasureVisitor().run(bike).total}")

    visitor = PriceListVisitor().run(bike)
    for path, price in visitor.rows:
        print(f"  {path:<24} {price:>5}")


def demo_traversal(bike: Composite):
    print("\n=== Traversal ===")
    for strategy in ("dfs_pre", "dfs_post", "bfs"):
        ids = [node.id for node in traverse_tree(bike, strategy=strategy)]
        print(f"{strategy:>8}: {' '.join(ids)}")

    shallow = [node.id for node in traverse_tree(bike, max_depth=1)]
    print(f" depth<=1: {' '.join(shallow)}")

    stats = get_tree_stats(bike)
    print(f"\n{stats['total_nodes']} nodes, {stats['leaf_nodes']} parts, "
          f"max depth {stats['max_depth']}")


def demo_errors(bike: Composite):
    print("\n=== Errors ===")
    frame = bike.children[0]
    try:
        frame.add_child(bike)
    except CycleDetectedError as e:
        print(f"Rejected: {e}")

    iterator = bike.create_iterator()
    iterator.next()
    bike.add_child(Leaf(10, node_id="bell"))
    try:
        iterator.next()
    except ConcurrentModificationError as e:
        print(f"Rejected: {e}")


def main():
    logging.basicConfig(level=logging.INFO,
                        format="%(levelname)s %(name)s: %(message)s")
    bike = build_bike()
    demo_visitors(bike)
    demo_traversal(bike)
    demo_errors(bike)


if __name__ == "__main__":
    main()
