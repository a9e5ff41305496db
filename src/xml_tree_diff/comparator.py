"""XMLComparator: orchestrator that wires parser + differs into one compare() call.

This is the central wiring layer between the raw algorithms and the public
API.  It turns two XML strings into a rich ComparisonResult with parse
outcomes, structural entries, a line-level report, a schema diff and
timing data.

Architecture:
- compare() starts a wall-clock timer and parses both documents.
- Line diff: when both documents parse, each tree is pretty-printed and the
  formatted texts are diffed line by line.  Otherwise the raw inputs are
  kept as the formatted texts and the line report is empty.
- Structural diff: always runs; a side that failed to parse contributes a
  None root, which turns the other side into an all-added/all-removed diff.
- Schema diff: always runs with the comparator's SchemaExtractConfig.
- No state is kept between calls.  The same instance may be reused.
"""

from __future__ import annotations

import logging
import time

from xml_tree_diff.algorithm.config import DEFAULT_MAX_CELLS, SchemaExtractConfig
from xml_tree_diff.algorithm.entries import summarize
from xml_tree_diff.algorithm.line_diff import diff_lines, split_lines
from xml_tree_diff.algorithm.line_stats import (
    InlineLineStats,
    LineLevelStats,
    build_unified_lines,
    compute_inline_stats,
    compute_line_level_stats,
)
from xml_tree_diff.algorithm.schema import SchemaExtractor, diff_schemas
from xml_tree_diff.algorithm.tree_diff import StructuralDiffer
from xml_tree_diff.result import ComparisonResult, LineDiffReport
from xml_tree_diff.tree.nodes import ParseResult
from xml_tree_diff.tree.parser import parse_xml
from xml_tree_diff.tree.serializer import pretty_print

__all__ = ["XMLComparator"]

logger = logging.getLogger(__name__)


class XMLComparator:
    """Orchestrator for XML document comparison.

    Example::

        from xml_tree_diff.comparator import XMLComparator

        cmp = XMLComparator()
        result = cmp.compare('<a><b id="1">x</b></a>', '<a><b id="1">y</b></a>')
        print(result.summary.modified)             # 1
        print(result.line_diff.side_by_side_stats) # modified=1, navigable_count=1
    """

    def __init__(
        self,
        strict_mode: bool = False,
        schema_config: SchemaExtractConfig | None = None,
        max_cells: int = DEFAULT_MAX_CELLS,
    ) -> None:
        """Initialise the comparator.

        Args:
            strict_mode: Reject documents containing mixed content instead
                of reporting a warning.
            schema_config: Table/field extraction rules.  Defaults to the
                ``struct`` preset when None.
            max_cells: LCS cell budget for the line diff.  Must be >= 0.

        Raises:
            ValueError: If ``max_cells`` is negative.
        """
        if max_cells < 0:
            msg = f"max_cells must be >= 0, got {max_cells}"
            raise ValueError(msg)
        self._strict_mode = strict_mode
        self._max_cells = max_cells
        self._differ = StructuralDiffer()
        self._extractor = SchemaExtractor(schema_config)

    @property
    def schema_config(self) -> SchemaExtractConfig:
        return self._extractor.config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compare(self, xml_a: str, xml_b: str) -> ComparisonResult:
        """Compare two XML documents and return a rich ComparisonResult.

        Parse failures are reported through ``parse_a``/``parse_b``; this
        method does not raise for malformed input.

        Args:
            xml_a: Old document text.
            xml_b: New document text.

        Returns:
            A ``ComparisonResult`` with every field populated.
        """
        t0 = time.perf_counter()

        parse_a = parse_xml(xml_a, strict_mode=self._strict_mode)
        parse_b = parse_xml(xml_b, strict_mode=self._strict_mode)
        logger.debug(
            "Parsed documents (a: success=%s, b: success=%s) in %.2f ms",
            parse_a.success,
            parse_b.success,
            (time.perf_counter() - t0) * 1000.0,
        )

        stage = time.perf_counter()
        schema_diff = diff_schemas(
            self._extractor.extract(parse_a.root),
            self._extractor.extract(parse_b.root),
        )
        logger.debug("Schema diff: %d items in %.2f ms", len(schema_diff.items), _since(stage))

        stage = time.perf_counter()
        line_diff = self._line_report(parse_a, parse_b, xml_a, xml_b)
        logger.debug("Line diff: %d ops in %.2f ms", len(line_diff.ops), _since(stage))

        stage = time.perf_counter()
        entries = tuple(self._differ.diff(parse_a.root, parse_b.root))
        logger.debug("Structural diff: %d entries in %.2f ms", len(entries), _since(stage))

        elapsed_ms = (time.perf_counter() - t0) * 1000.0

        return ComparisonResult(
            parse_a=parse_a,
            parse_b=parse_b,
            entries=entries,
            summary=summarize(entries),
            line_diff=line_diff,
            schema_diff=schema_diff,
            computation_time_ms=elapsed_ms,
        )

    # ------------------------------------------------------------------
    # Line report
    # ------------------------------------------------------------------

    def _line_report(
        self,
        parse_a: ParseResult,
        parse_b: ParseResult,
        xml_a: str,
        xml_b: str,
    ) -> LineDiffReport:
        if not (parse_a.success and parse_b.success and parse_a.root and parse_b.root):
            return LineDiffReport(
                ops=(),
                unified_lines=(),
                inline_stats=InlineLineStats(),
                side_by_side_stats=LineLevelStats(),
                formatted_a=xml_a,
                formatted_b=xml_b,
            )

        formatted_a = pretty_print(parse_a.root)
        formatted_b = pretty_print(parse_b.root)
        result = diff_lines(split_lines(formatted_a), split_lines(formatted_b), self._max_cells)

        return LineDiffReport(
            ops=result.ops,
            unified_lines=tuple(build_unified_lines(result.ops)),
            inline_stats=compute_inline_stats(result.ops),
            side_by_side_stats=compute_line_level_stats(result.ops),
            formatted_a=formatted_a,
            formatted_b=formatted_b,
            is_coarse=result.is_coarse,
        )


def _since(start: float) -> float:
    return (time.perf_counter() - start) * 1000.0
