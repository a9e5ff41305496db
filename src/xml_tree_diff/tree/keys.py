"""Stable keys: position-independent identities for XML nodes.

A node's stable key is its tag name plus the first present attribute from
a fixed priority list::

    <item id="7">          -> "item[id=7]"
    <column name="price">  -> "column[name=price]"
    <row>                  -> "/table/row[2]"   (falls back to the path)

Keys are purely structural: they never encode sibling position unless the
node has none of the key attributes, in which case the path is the only
identity available.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from xml_tree_diff.algorithm.entries import DiffEntry
    from xml_tree_diff.tree.nodes import Node

__all__ = ["KEY_ATTRIBUTES", "entry_key", "format_key", "key_attribute", "stable_key"]

# Priority order matters: the first attribute present wins.
KEY_ATTRIBUTES: tuple[str, ...] = ("id", "key", "name", "code", "uuid")


def key_attribute(node: Node) -> tuple[str, str] | None:
    """Return the ``(attribute, value)`` pair that identifies ``node``.

    Empty attribute values do not count as keys.

    Args:
        node: Any parsed node.

    Returns:
        The first priority attribute with a non-empty value, or None when
        the node is unkeyed.
    """
    for attr in KEY_ATTRIBUTES:
        value = node.attributes.get(attr)
        if value:
            return attr, value
    return None


def format_key(name: str, attr: str, value: str) -> str:
    return f"{name}[{attr}={value}]"


def stable_key(node: Node) -> str:
    """Return the alignment key of ``node`` (see module docstring)."""
    found = key_attribute(node)
    if found is None:
        return node.path
    return format_key(node.name, *found)


def entry_key(entry: DiffEntry) -> str:
    """Return the stable key for a diff entry, aligned with ``stable_key``.

    Old attributes take precedence over new ones for each priority
    attribute, so a modified entry whose key attribute itself changed is
    still found under its old identity.
    """
    for attr in KEY_ATTRIBUTES:
        value = entry.old_attributes.get(attr) or entry.new_attributes.get(attr)
        if value:
            return format_key(entry.node_name, attr, value)
    return entry.path
