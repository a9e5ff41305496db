"""Tests for the paired tree aligner.

Covers:
- Identical documents produce placeholder-free, all-unchanged pairs
- Placeholders on the old side for additions and on the new side for removals
- Lexicographic ordering of merged children
- pick_best_diff priority lists per side
- Null roots
- build_diff_tree / count_nodes_by_type / changed_paths helpers
- Nesting deeper than the interpreter recursion limit
"""

from __future__ import annotations

from xml_tree_diff.algorithm.aligner import (
    PLACEHOLDER_ADDED_LABEL,
    PLACEHOLDER_REMOVED_LABEL,
    Side,
    TreeNode,
    align_trees,
    build_diff_tree,
    changed_paths,
    count_nodes_by_type,
    pick_best_diff,
)
from xml_tree_diff.algorithm.entries import DiffEntry, DiffType
from xml_tree_diff.algorithm.tree_diff import diff_tree
from xml_tree_diff.tree.nodes import Node
from xml_tree_diff.tree.parser import parse_xml

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _root(text: str) -> Node:
    root = parse_xml(text).root
    assert root is not None
    return root


def _align(old: str, new: str) -> tuple[TreeNode, TreeNode]:
    root_a, root_b = _root(old), _root(new)
    tree_a, tree_b = align_trees(root_a, root_b, diff_tree(root_a, root_b))
    assert tree_a is not None and tree_b is not None
    return tree_a, tree_b


def _walk(tree: TreeNode) -> list[TreeNode]:
    out = [tree]
    for child in tree.children:
        out.extend(_walk(child))
    return out


# ---------------------------------------------------------------------------
# Paired trees
# ---------------------------------------------------------------------------


class TestAlignTrees:
    def test_identical_documents(self) -> None:
        text = '<a><b id="1">x</b><c/><c/></a>'
        tree_a, tree_b = _align(text, text)
        for tree in (tree_a, tree_b):
            nodes = _walk(tree)
            assert len(nodes) == 4
            assert not any(node.is_placeholder for node in nodes)
            assert all(node.diff_type == DiffType.UNCHANGED for node in nodes)

    def test_ids_and_depths(self) -> None:
        tree_a, tree_b = _align("<a><b/></a>", "<a><b/></a>")
        assert tree_a.id == "old-/a"
        assert tree_b.id == "new-/a"
        assert tree_a.depth == 0
        assert tree_a.children[0].depth == 1
        assert tree_a.children[0].id == "old-/a/b"

    def test_added_child_gets_old_side_placeholder(self) -> None:
        tree_a, tree_b = _align('<a><b id="1"/></a>', '<a><b id="1"/><b id="2"/></a>')

        assert [child.stable_key for child in tree_a.children] == ["b[id=1]", "b[id=2]"]
        placeholder = tree_a.children[1]
        assert placeholder.is_placeholder
        assert placeholder.diff_type == DiffType.ADDED
        assert placeholder.placeholder_label == PLACEHOLDER_ADDED_LABEL
        assert placeholder.is_expanded is False
        assert placeholder.id == "old-placeholder-/a/b[1]"
        assert placeholder.node.attributes == {"id": "2"}
        assert placeholder.children == []

        assert [child.diff_type for child in tree_b.children] == [DiffType.UNCHANGED, DiffType.ADDED]
        assert not any(child.is_placeholder for child in tree_b.children)

    def test_removed_child_gets_new_side_placeholder(self) -> None:
        tree_a, tree_b = _align('<a><b id="1"/><b id="2"/></a>', '<a><b id="2"/></a>')

        assert [child.diff_type for child in tree_a.children] == [DiffType.REMOVED, DiffType.UNCHANGED]
        placeholder, kept = tree_b.children
        assert placeholder.is_placeholder
        assert placeholder.diff_type == DiffType.REMOVED
        assert placeholder.placeholder_label == PLACEHOLDER_REMOVED_LABEL
        assert kept.diff_type == DiffType.UNCHANGED
        assert not kept.is_placeholder

    def test_trees_stay_parallel(self) -> None:
        old = '<a><t name="A"><f name="x"/></t><t name="B"/></a>'
        new = '<a><t name="B"/><t name="C"><f name="y"/></t></a>'
        tree_a, tree_b = _align(old, new)
        assert [c.stable_key for c in tree_a.children] == [c.stable_key for c in tree_b.children]

    def test_modified_shown_on_both_sides(self) -> None:
        tree_a, tree_b = _align('<a><b id="1">x</b></a>', '<a><b id="1">y</b></a>')
        assert tree_a.children[0].diff_type == DiffType.MODIFIED
        assert tree_b.children[0].diff_type == DiffType.MODIFIED
        assert tree_a.children[0].diff_entry is tree_b.children[0].diff_entry

    def test_children_sorted_lexicographically(self) -> None:
        tree_a, _ = _align("<a><z/><m/></a>", "<a><z/><m/></a>")
        assert [child.node.name for child in tree_a.children] == ["m", "z"]

    def test_placeholder_subtree_not_expanded(self) -> None:
        tree_a, _ = _align("<a/>", "<a><b><c/></b></a>")
        (placeholder,) = tree_a.children
        assert placeholder.is_placeholder
        assert placeholder.children == []

    def test_null_old_root(self) -> None:
        root_b = _root("<a><b/></a>")
        tree_a, tree_b = align_trees(None, root_b, diff_tree(None, root_b))
        assert tree_a is None
        assert tree_b is not None
        assert [node.diff_type for node in _walk(tree_b)] == [DiffType.ADDED, DiffType.ADDED]

    def test_both_null(self) -> None:
        assert align_trees(None, None, []) == (None, None)

    def test_old_side_hides_additions(self) -> None:
        # An added entry sharing a path with an old node is not shown as added
        tree_a, _ = _align("<a><i>1</i></a>", "<a><i>1</i><i>2</i></a>")
        assert all(node.diff_type != DiffType.ADDED or node.is_placeholder for node in _walk(tree_a))


# ---------------------------------------------------------------------------
# pick_best_diff
# ---------------------------------------------------------------------------


class TestPickBestDiff:
    def _buckets(self, *entries: DiffEntry) -> tuple[dict[str, list[DiffEntry]], dict[str, list[DiffEntry]]]:
        by_path: dict[str, list[DiffEntry]] = {}
        for entry in entries:
            by_path.setdefault(entry.path, []).append(entry)
        return {}, by_path

    def test_old_side_prefers_removed(self) -> None:
        node = Node(name="i", path="/a/i[1]")
        added = DiffEntry(type=DiffType.ADDED, path=node.path, node_name="i")
        removed = DiffEntry(type=DiffType.REMOVED, path=node.path, node_name="i")
        by_key, by_path = self._buckets(added, removed)
        assert pick_best_diff(node, Side.OLD, by_key, by_path) is removed
        assert pick_best_diff(node, Side.NEW, by_key, by_path) is added

    def test_modified_beats_opposite_type(self) -> None:
        node = Node(name="i", path="/a/i")
        added = DiffEntry(type=DiffType.ADDED, path=node.path, node_name="i")
        modified = DiffEntry(type=DiffType.MODIFIED, path=node.path, node_name="i")
        by_key, by_path = self._buckets(added, modified)
        assert pick_best_diff(node, Side.OLD, by_key, by_path) is modified

    def test_unchanged_only_falls_back_to_first(self) -> None:
        node = Node(name="i", path="/a/i")
        unchanged = DiffEntry(type=DiffType.UNCHANGED, path=node.path, node_name="i")
        by_key, by_path = self._buckets(unchanged)
        assert pick_best_diff(node, Side.NEW, by_key, by_path) is unchanged

    def test_no_match(self) -> None:
        node = Node(name="i", path="/a/i")
        assert pick_best_diff(node, Side.OLD, {}, {}) is None

    def test_key_bucket_consulted(self) -> None:
        node = Node(name="i", path="/a/i[3]", attributes={"id": "7"})
        entry = DiffEntry(type=DiffType.MODIFIED, path="/a/i", node_name="i", old_attributes={"id": "7"})
        assert pick_best_diff(node, Side.OLD, {"i[id=7]": [entry]}, {}) is entry

    def test_side_other(self) -> None:
        assert Side.OLD.other is Side.NEW
        assert Side.NEW.other is Side.OLD


# ---------------------------------------------------------------------------
# Single-side tree and statistics
# ---------------------------------------------------------------------------


class TestHelpers:
    def test_build_diff_tree(self) -> None:
        root_a, root_b = _root("<a><b>1</b><c/></a>"), _root("<a><b>2</b></a>")
        entries = diff_tree(root_a, root_b)
        tree = build_diff_tree(root_a, entries, Side.OLD)
        assert tree is not None
        assert [child.diff_type for child in tree.children] == [DiffType.MODIFIED, DiffType.REMOVED]
        assert not any(node.is_placeholder for node in _walk(tree))

    def test_build_diff_tree_none(self) -> None:
        assert build_diff_tree(None, [], Side.NEW) is None

    def test_count_nodes_by_type(self) -> None:
        tree_a, _ = _align('<a><b id="1"/></a>', '<a><b id="1"/><b id="2"/></a>')
        counts = count_nodes_by_type(tree_a)
        assert counts[DiffType.UNCHANGED] == 2
        assert counts[DiffType.ADDED] == 1
        assert counts[DiffType.REMOVED] == 0

    def test_count_nodes_by_type_none(self) -> None:
        assert sum(count_nodes_by_type(None).values()) == 0

    def test_changed_paths_include_ancestors(self) -> None:
        entries = [
            DiffEntry(type=DiffType.MODIFIED, path="/a/b[1]/c", node_name="c"),
            DiffEntry(type=DiffType.UNCHANGED, path="/a/z", node_name="z"),
        ]
        assert changed_paths(entries) == {"/a/b[1]/c", "/a", "/a/b", "/a/b/c"}


# ---------------------------------------------------------------------------
# Deep nesting
# ---------------------------------------------------------------------------

DEEP = 1500


def _nested(inner: str) -> str:
    return "<n>" * DEEP + inner + "</n>" * DEEP


def _deepest(tree: TreeNode) -> TreeNode:
    node = tree
    while node.children:
        node = node.children[-1]
    return node


class TestDeepNesting:
    def test_paired_trees(self) -> None:
        tree_a, tree_b = _align(_nested("x"), _nested("y"))
        counts = count_nodes_by_type(tree_b)
        assert counts[DiffType.MODIFIED] == 1
        assert counts[DiffType.UNCHANGED] == DEEP - 1
        leaf = _deepest(tree_a)
        assert leaf.depth == DEEP - 1
        assert leaf.diff_type == DiffType.MODIFIED

    def test_placeholder_at_depth(self) -> None:
        _, tree_b = _align(_nested('<b id="1"/>'), _nested(""))
        placeholder = _deepest(tree_b)
        assert placeholder.is_placeholder
        assert placeholder.depth == DEEP
        assert placeholder.placeholder_label == PLACEHOLDER_REMOVED_LABEL
        assert count_nodes_by_type(tree_b)[DiffType.REMOVED] == 1

    def test_build_diff_tree(self) -> None:
        root_a, root_b = _root(_nested("x")), _root(_nested("y"))
        tree = build_diff_tree(root_b, diff_tree(root_a, root_b), Side.NEW)
        assert tree is not None
        assert sum(count_nodes_by_type(tree).values()) == DEEP
        assert _deepest(tree).diff_type == DiffType.MODIFIED
