"""Statistics and display rows derived from a line edit script.

Two counting views exist because the side-by-side and inline panes present
the same script differently:

- Side-by-side pairs a run of deletions with the insertions that follow it.
  ``min(deleted, inserted)`` lines of each run count as modified, the rest
  as plain removals or additions, and a run offers ``max(deleted, inserted)``
  navigable rows.
- Inline lists every changed line on its own, so each insert and delete
  counts once.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import StrEnum, auto

from xml_tree_diff.algorithm.config import DEFAULT_MAX_CELLS
from xml_tree_diff.algorithm.line_diff import LineOp, LineOpType, diff_lines, split_lines

__all__ = [
    "InlineLineStats",
    "LineLevelStats",
    "UnifiedDiffLine",
    "UnifiedLineType",
    "build_unified_lines",
    "change_ratio",
    "compute_inline_stats",
    "compute_line_level_stats",
    "count_inline_diffs",
    "count_side_by_side_diffs",
]


@dataclass(frozen=True, slots=True)
class LineLevelStats:
    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0
    total: int = 0
    navigable_count: int = 0


@dataclass(frozen=True, slots=True)
class InlineLineStats:
    added: int = 0
    removed: int = 0
    unchanged: int = 0
    total: int = 0


class UnifiedLineType(StrEnum):
    CONTEXT = auto()
    ADDED = auto()
    REMOVED = auto()


@dataclass(frozen=True, slots=True)
class UnifiedDiffLine:
    """One row of the inline view.

    Attributes:
        type:            context, added or removed.
        old_line_number: 1-based line number in the old text (None for added).
        new_line_number: 1-based line number in the new text (None for removed).
        content:         The line itself.
    """

    type: UnifiedLineType
    old_line_number: int | None
    new_line_number: int | None
    content: str


def compute_line_level_stats(ops: Sequence[LineOp]) -> LineLevelStats:
    """Side-by-side counts: each non-equal run is one block."""
    added = removed = modified = unchanged = navigable = 0

    idx = 0
    while idx < len(ops):
        if ops[idx].type == LineOpType.EQUAL:
            unchanged += 1
            idx += 1
            continue

        deleted = inserted = 0
        while idx < len(ops) and ops[idx].type != LineOpType.EQUAL:
            if ops[idx].type == LineOpType.DELETE:
                deleted += 1
            else:
                inserted += 1
            idx += 1

        paired = min(deleted, inserted)
        modified += paired
        removed += deleted - paired
        added += inserted - paired
        navigable += max(deleted, inserted)

    return LineLevelStats(
        added=added,
        removed=removed,
        modified=modified,
        unchanged=unchanged,
        total=added + removed + modified + unchanged,
        navigable_count=navigable,
    )


def compute_inline_stats(ops: Iterable[LineOp]) -> InlineLineStats:
    """Inline counts: every line of the script stands alone."""
    counts = dict.fromkeys(LineOpType, 0)
    for op in ops:
        counts[op.type] += 1
    added = counts[LineOpType.INSERT]
    removed = counts[LineOpType.DELETE]
    unchanged = counts[LineOpType.EQUAL]
    return InlineLineStats(
        added=added,
        removed=removed,
        unchanged=unchanged,
        total=added + removed + unchanged,
    )


def build_unified_lines(ops: Iterable[LineOp]) -> list[UnifiedDiffLine]:
    """Number the script for an inline (unified) display."""
    lines: list[UnifiedDiffLine] = []
    old_number = 0
    new_number = 0
    for op in ops:
        match op.type:
            case LineOpType.EQUAL:
                old_number += 1
                new_number += 1
                lines.append(UnifiedDiffLine(UnifiedLineType.CONTEXT, old_number, new_number, op.line))
            case LineOpType.DELETE:
                old_number += 1
                lines.append(UnifiedDiffLine(UnifiedLineType.REMOVED, old_number, None, op.line))
            case LineOpType.INSERT:
                new_number += 1
                lines.append(UnifiedDiffLine(UnifiedLineType.ADDED, None, new_number, op.line))
    return lines


def count_side_by_side_diffs(text_a: str, text_b: str, max_cells: int = DEFAULT_MAX_CELLS) -> int:
    """Navigable change rows between two formatted texts."""
    result = diff_lines(split_lines(text_a), split_lines(text_b), max_cells)
    return compute_line_level_stats(result.ops).navigable_count


def count_inline_diffs(text_a: str, text_b: str, max_cells: int = DEFAULT_MAX_CELLS) -> int:
    """Changed rows (inserted plus deleted) between two formatted texts."""
    result = diff_lines(split_lines(text_a), split_lines(text_b), max_cells)
    stats = compute_inline_stats(result.ops)
    return stats.added + stats.removed


def change_ratio(stats: LineLevelStats | InlineLineStats) -> float:
    """Share of rows that are not unchanged, in ``[0.0, 1.0]``."""
    if stats.total == 0:
        return 0.0
    return (stats.total - stats.unchanged) / stats.total
