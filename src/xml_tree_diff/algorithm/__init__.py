"""algorithm subpackage: public API for the diff algorithms.

Provides the structural differ, the paired tree aligner, the line differ
with its statistics, and the schema extractor/differ together with their
configuration.  Import from this module (not from sub-modules directly) to
stay on the stable public interface.

Example::

    from xml_tree_diff.algorithm import StructuralDiffer, align_trees
    from xml_tree_diff.tree import parse_xml

    old = parse_xml('<a><b id="1">x</b></a>').root
    new = parse_xml('<a><b id="1">y</b></a>').root
    entries = StructuralDiffer().diff(old, new)
    tree_a, tree_b = align_trees(old, new, entries)
"""

from __future__ import annotations

from xml_tree_diff.algorithm.aligner import (
    Side,
    TreeNode,
    align_trees,
    build_diff_tree,
    changed_paths,
    count_nodes_by_type,
    pick_best_diff,
)
from xml_tree_diff.algorithm.config import (
    DEFAULT_MAX_CELLS,
    DEFAULT_SCHEMA_PRESET,
    SCHEMA_PRESETS,
    FieldSearchMode,
    SchemaExtractConfig,
    SchemaPreset,
    get_schema_preset_config,
)
from xml_tree_diff.algorithm.entries import (
    AttributeChange,
    DiffEntry,
    DiffSummary,
    DiffType,
    changed_entries,
    filter_by_type,
    summarize,
)
from xml_tree_diff.algorithm.line_diff import (
    LineDiffResult,
    LineOp,
    LineOpType,
    diff_lines,
    split_lines,
)
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
from xml_tree_diff.algorithm.schema import (
    SchemaDiffChange,
    SchemaDiffItem,
    SchemaDiffResult,
    SchemaDiffStats,
    SchemaExtractor,
    SchemaFieldDef,
    SchemaItemKind,
    SchemaTableDef,
    build_schema_diff,
    diff_schemas,
    extract_tables,
)
from xml_tree_diff.algorithm.tree_diff import (
    StructuralDiffer,
    are_trees_identical,
    compare_attributes,
    diff_tree,
)

__all__ = [
    "DEFAULT_MAX_CELLS",
    "DEFAULT_SCHEMA_PRESET",
    "SCHEMA_PRESETS",
    "AttributeChange",
    "DiffEntry",
    "DiffSummary",
    "DiffType",
    "FieldSearchMode",
    "InlineLineStats",
    "LineDiffResult",
    "LineLevelStats",
    "LineOp",
    "LineOpType",
    "SchemaDiffChange",
    "SchemaDiffItem",
    "SchemaDiffResult",
    "SchemaDiffStats",
    "SchemaExtractConfig",
    "SchemaExtractor",
    "SchemaFieldDef",
    "SchemaItemKind",
    "SchemaPreset",
    "SchemaTableDef",
    "Side",
    "StructuralDiffer",
    "TreeNode",
    "UnifiedDiffLine",
    "UnifiedLineType",
    "align_trees",
    "are_trees_identical",
    "build_diff_tree",
    "build_schema_diff",
    "build_unified_lines",
    "change_ratio",
    "changed_entries",
    "changed_paths",
    "compare_attributes",
    "compute_inline_stats",
    "compute_line_level_stats",
    "count_inline_diffs",
    "count_nodes_by_type",
    "count_side_by_side_diffs",
    "diff_lines",
    "diff_schemas",
    "diff_tree",
    "extract_tables",
    "filter_by_type",
    "get_schema_preset_config",
    "pick_best_diff",
    "split_lines",
    "summarize",
]
