"""StructuralDiffer: key-aligned structural diff of two Node trees.

Traverses both trees simultaneously and emits a flat, pre-ordered list of
``DiffEntry`` values.

Architecture:
- Matched pair:   exactly one entry (modified when an attribute or the
                  direct text differs, unchanged otherwise), then children.
- Renamed root:   no partial matching; whole old subtree removed, whole new
                  subtree added.
- Children:       grouped by tag name.  Inside a group, keyed children
                  (``id``/``key``/``name``/``code``/``uuid``) pair up by key
                  regardless of position; unkeyed children pair up by
                  position.  Anything left over is an added/removed subtree.
- Comments/CDATA: not diffed; they only matter for serialization.

The walk runs off an explicit task stack, so document depth is not limited
by the interpreter's recursion limit.  A task is ``(old, new, depth)``;
a missing side means the present node's whole subtree is added or removed.

Not a minimum-edit-distance algorithm: each child
list is scanned a constant number of times, and reordering keyed siblings
never produces spurious changes.
"""

from __future__ import annotations

from collections import defaultdict, deque

from xml_tree_diff.algorithm.entries import AttributeChange, DiffEntry, DiffType
from xml_tree_diff.tree.keys import key_attribute
from xml_tree_diff.tree.nodes import Node
from xml_tree_diff.tree.paths import path_depth

__all__ = ["StructuralDiffer", "are_trees_identical", "compare_attributes", "diff_tree"]

_Task = tuple[Node | None, Node | None, int]


class StructuralDiffer:
    """Structural XML differ.

    Holds no state between calls; one instance may be reused freely.

    Example::

        from xml_tree_diff.algorithm.tree_diff import StructuralDiffer
        from xml_tree_diff.tree.parser import parse_xml

        old = parse_xml('<a><b id="1">x</b></a>').root
        new = parse_xml('<a><b id="1">y</b></a>').root
        entries = StructuralDiffer().diff(old, new)
        # [unchanged /a, modified /a/b (old_value="x", new_value="y")]
    """

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def diff(self, old_root: Node | None, new_root: Node | None) -> list[DiffEntry]:
        """Compare two trees.

        Args:
            old_root: Root of the old tree, or None.
            new_root: Root of the new tree, or None.

        Returns:
            Entries in deterministic pre-order.  Empty when both roots are
            None; all-added / all-removed when only one side exists.
        """
        results: list[DiffEntry] = []
        stack: list[_Task] = [(old_root, new_root, 0)]
        while stack:
            old_node, new_node, depth = stack.pop()
            if old_node is not None and new_node is not None:
                if old_node.name != new_node.name:
                    # Whole old subtree first, then the whole new one
                    stack.append((None, new_node, 0))
                    stack.append((old_node, None, 0))
                    continue
                results.append(_pair_entry(old_node, new_node, depth))
                tasks = self._child_tasks(
                    old_node.element_children(), new_node.element_children(), depth + 1
                )
                stack.extend(reversed(tasks))
            elif old_node is not None:
                results.append(_subtree_entry(old_node, DiffType.REMOVED))
                stack.extend((child, None, 0) for child in reversed(old_node.element_children()))
            elif new_node is not None:
                results.append(_subtree_entry(new_node, DiffType.ADDED))
                stack.extend((None, child, 0) for child in reversed(new_node.element_children()))

        return results

    # ------------------------------------------------------------------
    # Child alignment
    # ------------------------------------------------------------------

    def _child_tasks(
        self,
        old_children: tuple[Node, ...],
        new_children: tuple[Node, ...],
        depth: int,
    ) -> list[_Task]:
        old_by_name = _group_by_name(old_children)
        new_by_name = _group_by_name(new_children)

        tasks: list[_Task] = []
        for name, old_group in old_by_name.items():
            tasks.extend(self._align_group(old_group, new_by_name.get(name, []), depth))

        # Tag names that only exist on the new side
        for name, new_group in new_by_name.items():
            if name not in old_by_name:
                tasks.extend((None, child, depth) for child in new_group)
        return tasks

    def _align_group(
        self,
        old_group: list[Node],
        new_group: list[Node],
        depth: int,
    ) -> list[_Task]:
        """Align children sharing one tag name: keys first, then position."""
        old_keyed: dict[tuple[str, str], deque[Node]] = defaultdict(deque)
        new_keyed: dict[tuple[str, str], deque[Node]] = defaultdict(deque)
        old_unkeyed: list[Node] = []
        new_unkeyed: list[Node] = []

        for child in old_group:
            key = key_attribute(child)
            if key is None:
                old_unkeyed.append(child)
            else:
                old_keyed[key].append(child)

        for child in new_group:
            key = key_attribute(child)
            if key is None:
                new_unkeyed.append(child)
            else:
                new_keyed[key].append(child)

        tasks: list[_Task] = []

        # First pass: keyed children, matched by identical key
        for key, old_nodes in old_keyed.items():
            new_nodes = new_keyed.pop(key, deque())
            while old_nodes:
                old_child = old_nodes.popleft()
                if new_nodes:
                    tasks.append((old_child, new_nodes.popleft(), depth))
                else:
                    tasks.append((old_child, None, depth))
            # Duplicate keys present more often on the new side
            tasks.extend((None, new_child, depth) for new_child in new_nodes)

        for new_nodes in new_keyed.values():
            tasks.extend((None, new_child, depth) for new_child in new_nodes)

        # Second pass: unkeyed children, matched by position
        match_count = min(len(old_unkeyed), len(new_unkeyed))
        tasks.extend(
            (old_child, new_child, depth)
            for old_child, new_child in zip(old_unkeyed[:match_count], new_unkeyed[:match_count])
        )
        tasks.extend((old_child, None, depth) for old_child in old_unkeyed[match_count:])
        tasks.extend((None, new_child, depth) for new_child in new_unkeyed[match_count:])
        return tasks


# ------------------------------------------------------------------
# Entry construction
# ------------------------------------------------------------------


def _pair_entry(old_node: Node, new_node: Node, depth: int) -> DiffEntry:
    attr_changes = compare_attributes(old_node.attributes, new_node.attributes)
    value_changed = old_node.value != new_node.value
    diff_type = DiffType.MODIFIED if attr_changes or value_changed else DiffType.UNCHANGED
    return DiffEntry(
        type=diff_type,
        path=new_node.path,
        node_name=new_node.name,
        old_value=old_node.value,
        new_value=new_node.value,
        old_attributes=old_node.attributes,
        new_attributes=new_node.attributes,
        attribute_changes=attr_changes,
        old_node=old_node,
        new_node=new_node,
        depth=depth,
    )


def _subtree_entry(node: Node, diff_type: DiffType) -> DiffEntry:
    """Entry for one node of a wholly added or removed subtree."""
    added = diff_type == DiffType.ADDED
    changes = tuple(
        AttributeChange(
            name=name,
            type=diff_type,
            old_value=None if added else value,
            new_value=value if added else None,
        )
        for name, value in node.attributes.items()
    )
    return DiffEntry(
        type=diff_type,
        path=node.path,
        node_name=node.name,
        old_value=None if added else node.value,
        new_value=node.value if added else None,
        old_attributes={} if added else node.attributes,
        new_attributes=node.attributes if added else {},
        attribute_changes=changes,
        old_node=None if added else node,
        new_node=node if added else None,
        depth=path_depth(node.path) - 1,
    )


def compare_attributes(
    old_attrs: dict[str, str],
    new_attrs: dict[str, str],
) -> tuple[AttributeChange, ...]:
    """Diff two attribute maps over the sorted union of their names."""
    changes: list[AttributeChange] = []
    for name in sorted(old_attrs.keys() | new_attrs.keys()):
        old_value = old_attrs.get(name)
        new_value = new_attrs.get(name)
        if old_value is None:
            changes.append(AttributeChange(name, DiffType.ADDED, None, new_value))
        elif new_value is None:
            changes.append(AttributeChange(name, DiffType.REMOVED, old_value, None))
        elif old_value != new_value:
            changes.append(AttributeChange(name, DiffType.MODIFIED, old_value, new_value))
    return tuple(changes)


def _group_by_name(children: tuple[Node, ...]) -> dict[str, list[Node]]:
    """Group element children by tag, in order of first appearance."""
    groups: dict[str, list[Node]] = {}
    for child in children:
        if child.is_element:
            groups.setdefault(child.name, []).append(child)
    return groups


def diff_tree(old_root: Node | None, new_root: Node | None) -> list[DiffEntry]:
    """Module-level shortcut for ``StructuralDiffer().diff``."""
    return StructuralDiffer().diff(old_root, new_root)


def are_trees_identical(old_root: Node | None, new_root: Node | None) -> bool:
    """True when every entry of the structural diff is unchanged."""
    return all(entry.type == DiffType.UNCHANGED for entry in diff_tree(old_root, new_root))
