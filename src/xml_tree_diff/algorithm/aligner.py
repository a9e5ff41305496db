"""Paired tree aligner: two isomorphic visualization trees for dual-pane display.

Given both parsed trees and the structural differ's entries, builds one
``TreeNode`` tree per side.  At each level the children of a node and of
its counterpart on the other side are merged by stable key; a key present
on one side only yields a collapsed placeholder on the other side when the
diff classifies it as an addition (placeholder on the old side) or a
removal (placeholder on the new side).

Merged children are ordered by sorting their stable keys lexicographically.
This keeps both panes in lockstep but does not reproduce document order.

Several diff entries can claim the same node: unkeyed duplicates reuse the
same synthesized ``[k]`` path across an edit, so a path may be both
"removed" (old meaning) and "added" (new meaning).  ``pick_best_diff``
resolves this with a per-side priority list.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto

from xml_tree_diff.algorithm.entries import DiffEntry, DiffType
from xml_tree_diff.tree.keys import entry_key, stable_key
from xml_tree_diff.tree.nodes import Node
from xml_tree_diff.tree.parser import flatten
from xml_tree_diff.tree.paths import strip_index

__all__ = [
    "Side",
    "TreeNode",
    "align_trees",
    "build_diff_tree",
    "changed_paths",
    "count_nodes_by_type",
    "pick_best_diff",
]

DiffBucket = dict[str, list[DiffEntry]]

PLACEHOLDER_ADDED_LABEL = "Added on the other side"
PLACEHOLDER_REMOVED_LABEL = "Removed from this side"


class Side(StrEnum):
    OLD = auto()
    NEW = auto()

    @property
    def other(self) -> Side:
        return Side.NEW if self == Side.OLD else Side.OLD


_PRIORITY: dict[Side, tuple[DiffType, ...]] = {
    Side.OLD: (DiffType.REMOVED, DiffType.MODIFIED, DiffType.ADDED),
    Side.NEW: (DiffType.ADDED, DiffType.MODIFIED, DiffType.REMOVED),
}


@dataclass(slots=True)
class TreeNode:
    """A node of a visualization tree.

    Attributes:
        id:                ``"<side>-<path>"`` (``"<side>-placeholder-<path>"``
                           for placeholders).
        node:              The wrapped Node.  For a placeholder this is the
                           other side's node.
        stable_key:        Alignment key of ``node``.
        diff_type:         Classification shown on this side.
        diff_entry:        The DiffEntry chosen for this node, if any.
        children:          Child TreeNodes.  Placeholders never have children.
        is_expanded:       Initial expansion state.
        depth:             Nesting depth (root = 0).
        is_placeholder:    True when the node only exists on the other side.
        placeholder_label: Display label for placeholders.
    """

    id: str
    node: Node
    stable_key: str
    diff_type: DiffType = DiffType.UNCHANGED
    diff_entry: DiffEntry | None = None
    children: list[TreeNode] = field(default_factory=list)
    is_expanded: bool = True
    depth: int = 0
    is_placeholder: bool = False
    placeholder_label: str | None = None


# ------------------------------------------------------------------
# Entry lookup
# ------------------------------------------------------------------


def _bucket_entries(entries: Iterable[DiffEntry]) -> tuple[DiffBucket, DiffBucket]:
    by_key: DiffBucket = defaultdict(list)
    by_path: DiffBucket = defaultdict(list)
    for entry in entries:
        by_key[entry_key(entry)].append(entry)
        by_path[entry.path].append(entry)
    return by_key, by_path


def pick_best_diff(
    node: Node,
    side: Side,
    by_key: DiffBucket,
    by_path: DiffBucket,
) -> DiffEntry | None:
    """Pick the entry describing ``node`` as seen from ``side``.

    Candidates are all entries sharing the node's stable key, followed by
    all entries sharing its path.  The old side prefers
    removed > modified > added; the new side prefers
    added > modified > removed.  The first candidate of the best type wins.

    Returns:
        The chosen entry, or None when nothing matches.
    """
    candidates = [*by_key.get(stable_key(node), ()), *by_path.get(node.path, ())]
    if not candidates:
        return None

    for diff_type in _PRIORITY[side]:
        for candidate in candidates:
            if candidate.type == diff_type:
                return candidate
    return candidates[0]


def _side_diff_type(entry: DiffEntry | None, side: Side) -> DiffType:
    """Hide additions on the old side and removals on the new side."""
    if entry is None:
        return DiffType.UNCHANGED
    if entry.type == DiffType.ADDED and side == Side.OLD:
        return DiffType.UNCHANGED
    if entry.type == DiffType.REMOVED and side == Side.NEW:
        return DiffType.UNCHANGED
    return entry.type


# ------------------------------------------------------------------
# Paired trees
# ------------------------------------------------------------------


class _PairedTreeBuilder:
    """Builds one side of the paired trees against a counterpart index."""

    def __init__(
        self,
        side: Side,
        other_root: Node | None,
        by_key: DiffBucket,
        by_path: DiffBucket,
    ) -> None:
        self._side = side
        self._by_key = by_key
        self._by_path = by_path
        # First pre-order node per (tag, stable key) in the other tree
        self._counterparts: dict[tuple[str, str], Node] = {}
        for other in flatten(other_root):
            self._counterparts.setdefault((other.name, stable_key(other)), other)

    def build(self, root: Node) -> TreeNode:
        """Wrap ``root`` and its subtree, merging in the counterpart's children.

        Levels are expanded from an explicit stack; each TreeNode's children
        are appended in final order before any of them is expanded.
        """
        tree_root = self._wrap(root, 0)
        stack = [(root, tree_root)]
        while stack:
            node, tree_node = stack.pop()
            depth = tree_node.depth + 1
            counterpart = self._counterparts.get((node.name, tree_node.stable_key))

            # Later duplicates of a key replace earlier ones
            own_children = {stable_key(child): child for child in node.children}
            other_children: dict[str, Node] = {}
            if counterpart is not None:
                other_children = {stable_key(child): child for child in counterpart.children}

            for child_key in sorted(own_children.keys() | other_children.keys()):
                own = own_children.get(child_key)
                if own is not None:
                    child_tree = self._wrap(own, depth)
                    tree_node.children.append(child_tree)
                    stack.append((own, child_tree))
                    continue

                placeholder = self._placeholder_for(other_children[child_key], depth)
                if placeholder is not None:
                    tree_node.children.append(placeholder)

        return tree_root

    def _wrap(self, node: Node, depth: int) -> TreeNode:
        side = self._side
        entry = pick_best_diff(node, side, self._by_key, self._by_path)
        return TreeNode(
            id=f"{side}-{node.path}",
            node=node,
            stable_key=stable_key(node),
            diff_type=_side_diff_type(entry, side),
            diff_entry=entry,
            depth=depth,
        )

    def _placeholder_for(self, other: Node, depth: int) -> TreeNode | None:
        other_entry = pick_best_diff(other, self._side.other, self._by_key, self._by_path)
        if other_entry is None:
            return None

        if self._side == Side.OLD and other_entry.type == DiffType.ADDED:
            diff_type, label = DiffType.ADDED, PLACEHOLDER_ADDED_LABEL
        elif self._side == Side.NEW and other_entry.type == DiffType.REMOVED:
            diff_type, label = DiffType.REMOVED, PLACEHOLDER_REMOVED_LABEL
        else:
            return None

        return TreeNode(
            id=f"{self._side}-placeholder-{other.path}",
            node=other,
            stable_key=stable_key(other),
            diff_type=diff_type,
            diff_entry=None,
            is_expanded=False,
            depth=depth,
            is_placeholder=True,
            placeholder_label=label,
        )


def align_trees(
    root_a: Node | None,
    root_b: Node | None,
    entries: Iterable[DiffEntry],
) -> tuple[TreeNode | None, TreeNode | None]:
    """Build the paired visualization trees.

    Args:
        root_a:  Old tree root (None when the old document failed to parse).
        root_b:  New tree root.
        entries: Output of ``diff_tree(root_a, root_b)``.

    Returns:
        ``(tree_a, tree_b)``; a side is None when its root is None.
    """
    by_key, by_path = _bucket_entries(entries)

    tree_a = None
    if root_a is not None:
        tree_a = _PairedTreeBuilder(Side.OLD, root_b, by_key, by_path).build(root_a)

    tree_b = None
    if root_b is not None:
        tree_b = _PairedTreeBuilder(Side.NEW, root_a, by_key, by_path).build(root_b)

    return tree_a, tree_b


# ------------------------------------------------------------------
# Single-side tree and tree statistics
# ------------------------------------------------------------------


def build_diff_tree(
    root: Node | None,
    entries: Iterable[DiffEntry],
    side: Side,
) -> TreeNode | None:
    """Wrap one tree with diff information, without placeholders.

    Entries are looked up by path only (the last entry per path wins).
    """
    if root is None:
        return None

    by_path = {entry.path: entry for entry in entries}

    def wrap(node: Node, depth: int) -> TreeNode:
        entry = by_path.get(node.path)
        return TreeNode(
            id=f"{side}-{node.path}",
            node=node,
            stable_key=stable_key(node),
            diff_type=_side_diff_type(entry, side),
            diff_entry=entry,
            depth=depth,
        )

    tree_root = wrap(root, 0)
    stack = [(root, tree_root)]
    while stack:
        node, tree_node = stack.pop()
        for child in node.children:
            child_tree = wrap(child, tree_node.depth + 1)
            tree_node.children.append(child_tree)
            stack.append((child, child_tree))
    return tree_root


def count_nodes_by_type(tree: TreeNode | None) -> dict[DiffType, int]:
    """Count TreeNodes per displayed DiffType, placeholders included."""
    counts = dict.fromkeys(DiffType, 0)
    if tree is None:
        return counts

    stack = [tree]
    while stack:
        current = stack.pop()
        counts[current.diff_type] += 1
        stack.extend(current.children)
    return counts


def changed_paths(entries: Iterable[DiffEntry]) -> set[str]:
    """Paths of changed entries plus every (index-free) ancestor path.

    Useful to pre-expand a tree view down to each change.
    """
    paths: set[str] = set()
    for entry in entries:
        if entry.type == DiffType.UNCHANGED:
            continue
        paths.add(entry.path)
        current = ""
        for part in (segment for segment in entry.path.split("/") if segment):
            current += "/" + strip_index(part)
            paths.add(current)
    return paths
