"""Result dataclasses for XML comparison output.

This module provides the rich result type returned by compare() calls and
the line-diff report embedded in it.
"""

from __future__ import annotations

from dataclasses import dataclass

from xml_tree_diff.algorithm.entries import DiffEntry, DiffSummary
from xml_tree_diff.algorithm.line_diff import LineOp
from xml_tree_diff.algorithm.line_stats import InlineLineStats, LineLevelStats, UnifiedDiffLine
from xml_tree_diff.algorithm.schema import SchemaDiffResult
from xml_tree_diff.tree.nodes import ParseResult

__all__ = ["ComparisonResult", "LineDiffReport"]


@dataclass(frozen=True, slots=True)
class LineDiffReport:
    """Line-level view of a comparison.

    Attributes:
        ops: Edit script over the formatted texts.
        unified_lines: The script numbered for an inline display.
        inline_stats: Counts as shown by the inline view.
        side_by_side_stats: Counts as shown by the side-by-side view.
        formatted_a: Pretty-printed old document (raw input if it did not parse).
        formatted_b: Pretty-printed new document (raw input if it did not parse).
        is_coarse: True when the line diff fell back to a whole-block
            replacement and is only approximate.
    """

    ops: tuple[LineOp, ...]
    unified_lines: tuple[UnifiedDiffLine, ...]
    inline_stats: InlineLineStats
    side_by_side_stats: LineLevelStats
    formatted_a: str
    formatted_b: str
    is_coarse: bool = False

    @property
    def inline_diff_count(self) -> int:
        """Changed rows of the inline view (inserted plus deleted)."""
        return self.inline_stats.added + self.inline_stats.removed


@dataclass(frozen=True, slots=True)
class ComparisonResult:
    """Rich result of a compare() call.

    Attributes:
        parse_a: Parse outcome of the old document.
        parse_b: Parse outcome of the new document.
        entries: Structural diff entries in pre-order.
        summary: Entry counts per DiffType.
        line_diff: Line-level report.  Its script is empty unless both
            documents parsed.
        schema_diff: Table/field diff of the two documents.
        computation_time_ms: Wall-clock duration of the comparison in milliseconds.
    """

    parse_a: ParseResult
    parse_b: ParseResult
    entries: tuple[DiffEntry, ...]
    summary: DiffSummary
    line_diff: LineDiffReport
    schema_diff: SchemaDiffResult
    computation_time_ms: float

    @property
    def has_changes(self) -> bool:
        """True when any structural entry is not unchanged or a side failed to parse."""
        if not (self.parse_a.success and self.parse_b.success):
            return True
        return self.summary.total != self.summary.unchanged
