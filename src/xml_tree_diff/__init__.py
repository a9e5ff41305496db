"""XML tree diff - structural, line and schema diffs for XML documents."""

from __future__ import annotations

from xml_tree_diff.algorithm.config import SchemaExtractConfig, SchemaPreset
from xml_tree_diff.algorithm.entries import DiffEntry, DiffType
from xml_tree_diff.api import align, compare, diff, is_identical, parse
from xml_tree_diff.comparator import XMLComparator
from xml_tree_diff.result import ComparisonResult, LineDiffReport

__version__: str = "0.1.0"
__all__: list[str] = [
    "ComparisonResult",
    "DiffEntry",
    "DiffType",
    "LineDiffReport",
    "SchemaExtractConfig",
    "SchemaPreset",
    "XMLComparator",
    "align",
    "compare",
    "diff",
    "is_identical",
    "parse",
]
