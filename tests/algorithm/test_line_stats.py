"""Tests for line-diff statistics and unified display rows."""

from __future__ import annotations

import pytest

from xml_tree_diff.algorithm.line_diff import LineOp, LineOpType, diff_lines
from xml_tree_diff.algorithm.line_stats import (
    InlineLineStats,
    LineLevelStats,
    UnifiedDiffLine,
    UnifiedLineType,
    build_unified_lines,
    change_ratio,
    compute_inline_stats,
    compute_line_level_stats,
    count_inline_diffs,
    count_side_by_side_diffs,
)


def _ops(script: str) -> list[LineOp]:
    """Build a script from a compact string: ``=`` equal, ``-`` delete, ``+`` insert."""
    kinds = {"=": LineOpType.EQUAL, "-": LineOpType.DELETE, "+": LineOpType.INSERT}
    return [LineOp(kinds[ch], f"line{i}") for i, ch in enumerate(script)]


# ---------------------------------------------------------------------------
# Side-by-side statistics
# ---------------------------------------------------------------------------


class TestLineLevelStats:
    def test_single_replacement(self) -> None:
        stats = compute_line_level_stats(diff_lines(["1", "2", "3"], ["1", "X", "3"]).ops)
        assert stats == LineLevelStats(
            added=0, removed=0, modified=1, unchanged=2, total=3, navigable_count=1
        )

    def test_uneven_block(self) -> None:
        stats = compute_line_level_stats(_ops("=--+="))
        assert stats.modified == 1
        assert stats.removed == 1
        assert stats.added == 0
        assert stats.navigable_count == 2
        assert stats.total == 4

    def test_separate_blocks(self) -> None:
        stats = compute_line_level_stats(_ops("+=-=-+"))
        assert stats.added == 1
        assert stats.removed == 1
        assert stats.modified == 1
        assert stats.navigable_count == 3

    def test_insert_then_delete_pairs_too(self) -> None:
        stats = compute_line_level_stats(_ops("+-"))
        assert stats.modified == 1
        assert stats.navigable_count == 1

    def test_empty(self) -> None:
        assert compute_line_level_stats([]) == LineLevelStats()


# ---------------------------------------------------------------------------
# Inline statistics
# ---------------------------------------------------------------------------


class TestInlineStats:
    def test_counts_every_line(self) -> None:
        stats = compute_inline_stats(_ops("=--+="))
        assert stats == InlineLineStats(added=1, removed=2, unchanged=2, total=5)

    def test_empty(self) -> None:
        assert compute_inline_stats([]) == InlineLineStats()


# ---------------------------------------------------------------------------
# Unified rows
# ---------------------------------------------------------------------------


class TestUnifiedLines:
    def test_numbering(self) -> None:
        ops = diff_lines(["1", "2", "3"], ["1", "X", "3"]).ops
        assert build_unified_lines(ops) == [
            UnifiedDiffLine(UnifiedLineType.CONTEXT, 1, 1, "1"),
            UnifiedDiffLine(UnifiedLineType.REMOVED, 2, None, "2"),
            UnifiedDiffLine(UnifiedLineType.ADDED, None, 2, "X"),
            UnifiedDiffLine(UnifiedLineType.CONTEXT, 3, 3, "3"),
        ]

    def test_numbers_drift_after_insertions(self) -> None:
        ops = diff_lines(["a"], ["n1", "n2", "a"]).ops
        last = build_unified_lines(ops)[-1]
        assert (last.old_line_number, last.new_line_number) == (1, 3)


# ---------------------------------------------------------------------------
# Text-level counters and ratio
# ---------------------------------------------------------------------------


class TestCounters:
    def test_side_by_side_count(self) -> None:
        assert count_side_by_side_diffs("1\n2\n3", "1\nX\n3") == 1

    def test_inline_count(self) -> None:
        assert count_inline_diffs("1\n2\n3", "1\nX\n3") == 2

    def test_identical_texts(self) -> None:
        assert count_side_by_side_diffs("a\nb", "a\nb") == 0
        assert count_inline_diffs("a\nb", "a\nb") == 0

    def test_change_ratio(self) -> None:
        stats = LineLevelStats(added=0, removed=0, modified=1, unchanged=2, total=3, navigable_count=1)
        assert change_ratio(stats) == pytest.approx(1 / 3)

    def test_change_ratio_empty(self) -> None:
        assert change_ratio(InlineLineStats()) == 0.0
