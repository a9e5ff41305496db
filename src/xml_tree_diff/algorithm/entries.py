"""DiffEntry and related value types produced by the structural differ."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto

from xml_tree_diff.tree.nodes import Node

__all__ = [
    "AttributeChange",
    "DiffEntry",
    "DiffSummary",
    "DiffType",
    "changed_entries",
    "filter_by_type",
    "summarize",
]


class DiffType(StrEnum):
    """Classification of one compared (or unmatched) node."""

    ADDED = auto()
    REMOVED = auto()
    MODIFIED = auto()
    UNCHANGED = auto()


@dataclass(frozen=True, slots=True)
class AttributeChange:
    """One attribute-level difference.  ``type`` is never UNCHANGED."""

    name: str
    type: DiffType
    old_value: str | None
    new_value: str | None


@dataclass(frozen=True, slots=True)
class DiffEntry:
    """One classified comparison outcome.

    Attributes:
        type:              Added, removed, modified or unchanged.
        path:              Path of the new node for matched pairs, otherwise
                           the path of the single node.
        node_name:         Tag name.
        old_value:         Direct text on the old side (None when absent).
        new_value:         Direct text on the new side (None when absent).
        old_attributes:    Attributes on the old side ({} when absent).
        new_attributes:    Attributes on the new side ({} when absent).
        attribute_changes: Per-attribute changes; for added/removed subtrees
                           every attribute is listed as added/removed.
        old_node:          Old-side Node, or None for added entries.
        new_node:          New-side Node, or None for removed entries.
        depth:             Nesting depth (root = 0).
    """

    type: DiffType
    path: str
    node_name: str
    old_value: str | None = None
    new_value: str | None = None
    old_attributes: dict[str, str] = field(default_factory=dict)
    new_attributes: dict[str, str] = field(default_factory=dict)
    attribute_changes: tuple[AttributeChange, ...] = ()
    old_node: Node | None = None
    new_node: Node | None = None
    depth: int = 0


@dataclass(frozen=True, slots=True)
class DiffSummary:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0
    total: int = 0


def summarize(entries: Iterable[DiffEntry]) -> DiffSummary:
    """Count entries per DiffType."""
    counts = dict.fromkeys(DiffType, 0)
    total = 0
    for entry in entries:
        counts[entry.type] += 1
        total += 1
    return DiffSummary(
        added=counts[DiffType.ADDED],
        removed=counts[DiffType.REMOVED],
        modified=counts[DiffType.MODIFIED],
        unchanged=counts[DiffType.UNCHANGED],
        total=total,
    )


def filter_by_type(entries: Iterable[DiffEntry], types: Iterable[DiffType]) -> list[DiffEntry]:
    wanted = set(types)
    return [entry for entry in entries if entry.type in wanted]


def changed_entries(entries: Iterable[DiffEntry]) -> list[DiffEntry]:
    """All entries except the unchanged ones, order preserved."""
    return [entry for entry in entries if entry.type != DiffType.UNCHANGED]
