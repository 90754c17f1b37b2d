"""Unit tests for Leaf and Composite basics.

Covers construction, measure, describe, navigation helpers and disposal.
Mutation rules are tested in test_mutation.py.
"""

import gc
import unittest
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from composetreelib import Composite, DescribeConfig, Leaf, NodeKind
from composetreelib.testing import build_tree, index_tree


def sample_tree():
    """Build the reference tree.

    Structure:
    root
    ├── A
    │   ├── A1 (1)
    │   └── A2 (2)
    └── B (3)
    """
    return build_tree(("root", [
        ("A", [("A1", 1), ("A2", 2)]),
        ("B", 3),
    ]))


class TestConstruction(unittest.TestCase):
    """Test node creation and identity."""

    def test_generated_ids_are_unique(self):
        first, second = Leaf(1), Leaf(1)
        self.assertNotEqual(first.id, second.id)
        self.assertTrue(first.id.startswith("leaf-"))
        self.assertTrue(Composite().id.startswith("composite-"))

    def test_explicit_id(self):
        self.assertEqual(Composite("root").id, "root")
        self.assertEqual(Leaf("payload", node_id="x").id, "x")

    def test_kinds(self):
        self.assertEqual(Leaf(1).kind, NodeKind.LEAF.value)
        self.assertEqual(Composite().kind, NodeKind.COMPOSITE.value)

    def test_new_nodes_are_parentless_roots(self):
        leaf = Leaf(1)
        self.assertIsNone(leaf.parent)
        self.assertIs(leaf.root, leaf)
        self.assertEqual(leaf.depth, 0)

    def test_nodes_compare_by_identity(self):
        self.assertNotEqual(Leaf(1, node_id="same"), Leaf(1, node_id="same"))

    def test_constructor_children(self):
        a, b = Leaf(1, node_id="a"), Leaf(2, node_id="b")
        root = Composite("root", children=[a, b])
        self.assertEqual(root.children, (a, b))
        self.assertIs(a.parent, root)
        self.assertEqual(root.child_count, 2)

    def test_repr(self):
        self.assertEqual(repr(Leaf(3, node_id="x")), "Leaf(id='x', payload=3)")
        self.assertEqual(repr(Composite("c")), "Composite(id='c', children=0)")


class TestMeasure(unittest.TestCase):
    """Test measure() on leaves and composites."""

    def test_numeric_payload(self):
        self.assertEqual(Leaf(5).measure(), 5)
        self.assertEqual(Leaf(2.5).measure(), 2.5)

    def test_explicit_weight(self):
        self.assertEqual(Leaf("readme", weight=7).measure(), 7)

    def test_callable_weight(self):
        self.assertEqual(Leaf("abc", weight=len).measure(), 3)

    def test_unmeasurable_leaf(self):
        with self.assertRaises(TypeError):
            Leaf("text").measure()
        with self.assertRaises(TypeError):
            Leaf(True).measure()

    def test_empty_composite(self):
        self.assertEqual(Composite().measure(), 0)

    def test_composite_sums_children(self):
        root = sample_tree()
        nodes = index_tree(root)
        self.assertEqual(root.measure(), 6)
        self.assertEqual(nodes["A"].measure(), 3)

    def test_measure_is_not_cached(self):
        root = sample_tree()
        nodes = index_tree(root)
        self.assertEqual(root.measure(), 6)
        nodes["B"].payload = 10
        self.assertEqual(root.measure(), 13)


class TestDescribe(unittest.TestCase):
    """Test the indented description."""

    def test_leaf_line(self):
        self.assertEqual(Leaf(3, node_id="B").describe(), "- B: 3")
        self.assertEqual(Leaf(3, node_id="B").describe(depth=2), "    - B: 3")

    def test_tree_description(self):
        expected = "\n".join([
            "+ root [2]",
            "  + A [2]",
            "    - A1: 1",
            "    - A2: 2",
            "  - B: 3",
        ])
        self.assertEqual(sample_tree().describe(), expected)

    def test_depth_offsets_whole_subtree(self):
        lines = sample_tree().describe(depth=1).splitlines()
        self.assertEqual(lines[0], "  + root [2]")
        self.assertEqual(lines[2], "      - A1: 1")

    def test_custom_config(self):
        config = DescribeConfig(indent="..", show_measure=True)
        lines = sample_tree().describe(config=config).splitlines()
        self.assertEqual(lines[0], "+ root [2] = 6")
        self.assertEqual(lines[1], "..+ A [2] = 3")


class TestNavigation(unittest.TestCase):
    """Test parent/ancestor helpers."""

    def setUp(self):
        self.root = sample_tree()
        self.nodes = index_tree(self.root)

    def test_parent_and_root(self):
        a1 = self.nodes["A1"]
        self.assertIs(a1.parent, self.nodes["A"])
        self.assertIs(a1.root, self.root)

    def test_depth_and_path(self):
        self.assertEqual(self.nodes["A1"].depth, 2)
        self.assertEqual(self.nodes["A1"].path(), ["root", "A", "A1"])
        self.assertEqual(self.root.path(), ["root"])

    def test_ancestors(self):
        ancestors = list(self.nodes["A2"].ancestors())
        self.assertEqual(len(ancestors), 2)
        self.assertIs(ancestors[0], self.nodes["A"])
        self.assertIs(ancestors[1], self.root)

    def test_is_ancestor_of(self):
        self.assertTrue(self.root.is_ancestor_of(self.nodes["A1"]))
        self.assertFalse(self.nodes["A1"].is_ancestor_of(self.root))
        self.assertFalse(self.nodes["B"].is_ancestor_of(self.nodes["A1"]))

    def test_siblings(self):
        self.assertEqual([n.id for n in self.nodes["A1"].siblings()], ["A2"])
        self.assertEqual(list(self.root.siblings()), [])

    def test_find(self):
        self.assertIs(self.root.find("A2"), self.nodes["A2"])
        self.assertIsNone(self.root.find("missing"))
        self.assertIs(self.nodes["B"].find("B"), self.nodes["B"])

    def test_index_of_and_contains(self):
        self.assertEqual(self.root.index_of(self.nodes["B"]), 1)
        self.assertIn(self.nodes["A"], self.root)
        self.assertNotIn(self.nodes["A1"], self.root)

    def test_contains_is_direct_while_iteration_is_subtree(self):
        a1 = self.nodes["A1"]
        self.assertNotIn(a1, self.root)
        self.assertTrue(any(node is a1 for node in self.root))
        self.assertTrue(self.root.is_ancestor_of(a1))

    def test_is_leaf(self):
        self.assertTrue(self.nodes["B"].is_leaf())
        self.assertFalse(self.nodes["A"].is_leaf())
        self.assertFalse(Composite().is_leaf())

    def test_children_is_a_snapshot(self):
        children = self.root.children
        self.root.remove_child(self.nodes["B"])
        self.assertEqual(len(children), 2)
        self.assertEqual(self.root.child_count, 1)


class TestDisposal(unittest.TestCase):
    """Test detach() and dispose()."""

    def test_detach(self):
        root = sample_tree()
        b = root.find("B")
        self.assertIs(b.detach(), b)
        self.assertIsNone(b.parent)
        self.assertNotIn(b, root)

    def test_children_lose_parent_when_root_is_collected(self):
        child = Leaf(1)
        holder = Composite("holder", children=[child])
        self.assertIs(child.parent, holder)
        del holder
        gc.collect()
        self.assertIsNone(child.parent)

    def test_detach_root_is_noop(self):
        root = sample_tree()
        root.detach()
        self.assertEqual(root.child_count, 2)

    def test_dispose_cascades(self):
        root = sample_tree()
        nodes = index_tree(root)
        root.dispose()
        self.assertEqual(root.children, ())
        self.assertEqual(nodes["A"].children, ())
        for node_id in ("A", "A1", "A2", "B"):
            self.assertIsNone(nodes[node_id].parent, node_id)

    def test_dispose_subtree_detaches_it(self):
        root = sample_tree()
        nodes = index_tree(root)
        version = root.structure_version
        nodes["A"].dispose()
        self.assertEqual([c.id for c in root.children], ["B"])
        self.assertIsNone(nodes["A1"].parent)
        self.assertGreater(root.structure_version, version)


if __name__ == "__main__":
    unittest.main()
