"""Public API functions for xml-tree-diff.

This module provides the user-facing functions: parse, diff, align, compare
and is_identical.  Each call creates fresh differ/comparator objects to
guarantee zero global state mutation between calls.
"""

from __future__ import annotations

from xml_tree_diff.algorithm.aligner import TreeNode, align_trees
from xml_tree_diff.algorithm.config import DEFAULT_MAX_CELLS, SchemaExtractConfig
from xml_tree_diff.algorithm.entries import DiffEntry, DiffType
from xml_tree_diff.algorithm.tree_diff import StructuralDiffer
from xml_tree_diff.comparator import XMLComparator
from xml_tree_diff.result import ComparisonResult
from xml_tree_diff.tree.nodes import ParseResult
from xml_tree_diff.tree.parser import parse_xml

__all__ = ["align", "compare", "diff", "is_identical", "parse"]


def parse(xml_text: str, strict_mode: bool = False) -> ParseResult:
    """Parse an XML document.

    Args:
        xml_text:    Raw XML text.
        strict_mode: Reject mixed content instead of warning about it.

    Returns:
        A ``ParseResult``; malformed input yields ``success=False``.
    """
    return parse_xml(xml_text, strict_mode=strict_mode)


def diff(xml_a: str, xml_b: str, strict_mode: bool = False) -> list[DiffEntry]:
    """Structural diff of two XML documents.

    A document that fails to parse is treated as absent, so the other
    document shows up entirely as added or removed.

    Returns:
        DiffEntry values in deterministic pre-order.
    """
    root_a = parse_xml(xml_a, strict_mode=strict_mode).root
    root_b = parse_xml(xml_b, strict_mode=strict_mode).root
    return StructuralDiffer().diff(root_a, root_b)


def align(
    xml_a: str,
    xml_b: str,
    strict_mode: bool = False,
) -> tuple[TreeNode | None, TreeNode | None]:
    """Build the paired visualization trees of two XML documents.

    Returns:
        ``(tree_a, tree_b)``; a side is None when its document did not parse.
    """
    root_a = parse_xml(xml_a, strict_mode=strict_mode).root
    root_b = parse_xml(xml_b, strict_mode=strict_mode).root
    entries = StructuralDiffer().diff(root_a, root_b)
    return align_trees(root_a, root_b, entries)


def compare(
    xml_a: str,
    xml_b: str,
    strict_mode: bool = False,
    schema_config: SchemaExtractConfig | None = None,
    max_cells: int = DEFAULT_MAX_CELLS,
) -> ComparisonResult:
    """Run every diff over two XML documents.

    Creates a fresh ``XMLComparator`` per call.

    Args:
        xml_a:         Old document text.
        xml_b:         New document text.
        strict_mode:   Reject mixed content instead of warning about it.
        schema_config: Table/field extraction rules.  Defaults to the
                       ``struct`` preset when None.
        max_cells:     LCS cell budget for the line diff.

    Returns:
        A ``ComparisonResult`` with parse outcomes, structural entries,
        line report, schema diff and computation_time_ms populated.
    """
    comparator = XMLComparator(
        strict_mode=strict_mode,
        schema_config=schema_config,
        max_cells=max_cells,
    )
    return comparator.compare(xml_a, xml_b)


def is_identical(xml_a: str, xml_b: str, strict_mode: bool = False) -> bool:
    """Return True if both documents parse and are structurally identical.

    Formatting, attribute order and the order of keyed siblings do not
    matter; comments and CDATA sections are ignored.
    """
    parse_a = parse_xml(xml_a, strict_mode=strict_mode)
    parse_b = parse_xml(xml_b, strict_mode=strict_mode)
    if not (parse_a.success and parse_b.success):
        return False
    entries = StructuralDiffer().diff(parse_a.root, parse_b.root)
    return all(entry.type == DiffType.UNCHANGED for entry in entries)
