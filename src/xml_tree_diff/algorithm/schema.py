"""Schema extraction and diff: a table/field view of an XML document.

A SchemaExtractConfig names the tags that act as tables and fields and the
attributes holding their names.  ``extract_tables`` walks a Node tree and
returns the logical tables it finds; ``diff_schemas`` compares two such
extractions and classifies each table and field as added, removed,
modified or unchanged.

Matching rules:
- Tag names are compared case-insensitively, and with the namespace prefix
  stripped when ``ignore_namespaces`` is set.
- Table and field names are trimmed; with ``case_sensitive_names=False``
  they are also lowercased before being used as keys.
- Within a table the first occurrence of a field key wins.  A table name
  that appears again later in the document contributes only the fields not
  seen yet.
- A table or field without a resolvable name is skipped.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import StrEnum, auto

from xml_tree_diff.algorithm.config import (
    DEFAULT_SCHEMA_PRESET,
    FieldSearchMode,
    SchemaExtractConfig,
    get_schema_preset_config,
)
from xml_tree_diff.algorithm.entries import DiffType
from xml_tree_diff.tree.nodes import Node

__all__ = [
    "FIELD_ATTRS",
    "SchemaDiffChange",
    "SchemaDiffItem",
    "SchemaDiffResult",
    "SchemaDiffStats",
    "SchemaExtractor",
    "SchemaFieldDef",
    "SchemaItemKind",
    "SchemaTableDef",
    "build_schema_diff",
    "diff_schemas",
    "extract_tables",
]

# Field attributes compared between two versions of the same field
FIELD_ATTRS: tuple[str, ...] = ("type", "size", "defaultvalue")


class SchemaItemKind(StrEnum):
    TABLE = auto()
    FIELD = auto()


@dataclass(frozen=True, slots=True)
class SchemaFieldDef:
    name: str
    type: str | None = None
    size: str | None = None
    defaultvalue: str | None = None


@dataclass(frozen=True, slots=True)
class SchemaTableDef:
    """A logical table.  ``fields`` maps normalized field key to definition."""

    name: str
    fields: dict[str, SchemaFieldDef] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class SchemaDiffChange:
    """One differing field attribute.  Missing values are reported as ``""``."""

    key: str
    old_value: str
    new_value: str


@dataclass(frozen=True, slots=True)
class SchemaDiffItem:
    """One table- or field-level schema change.

    Attributes:
        id:          ``"table:<type>:<table key>"`` or
                     ``"field:<type>:<table key>:<field key>"``.
        kind:        Table or field.
        type:        Added, removed or modified (never unchanged).
        table:       Display name of the table.
        field:       Display name of the field (field items only).
        field_count: Number of fields of an added/removed table.
        changes:     Attribute changes of a modified field.
        field_def:   The field definition (new side for modified fields).
    """

    id: str
    kind: SchemaItemKind
    type: DiffType
    table: str
    field: str | None = None
    field_count: int | None = None
    changes: tuple[SchemaDiffChange, ...] = ()
    field_def: SchemaFieldDef | None = None


@dataclass(frozen=True, slots=True)
class SchemaDiffStats:
    """Aggregate counts.

    ``added``/``removed`` count table and field items together; the
    ``table_*`` and ``field_*`` counters split them.  ``unchanged`` counts
    fields present and identical on both sides.
    """

    added: int = 0
    removed: int = 0
    modified: int = 0
    unchanged: int = 0
    total: int = 0
    table_added: int = 0
    table_removed: int = 0
    field_added: int = 0
    field_removed: int = 0
    field_modified: int = 0
    field_unchanged: int = 0


@dataclass(frozen=True, slots=True)
class SchemaDiffResult:
    items: tuple[SchemaDiffItem, ...] = ()
    stats: SchemaDiffStats = field(default_factory=SchemaDiffStats)


# ------------------------------------------------------------------
# Normalization helpers
# ------------------------------------------------------------------


def _normalize_tag(name: str, ignore_namespaces: bool) -> str:
    base = name.strip()
    if ignore_namespaces:
        base = base.rsplit(":", 1)[-1] or base
    return base.lower()


def _normalize_name(name: str, case_sensitive: bool) -> str:
    trimmed = name.strip()
    return trimmed if case_sensitive else trimmed.lower()


def _pick_attribute(attributes: dict[str, str], names: Iterable[str]) -> str | None:
    """First non-empty attribute among ``names``; exact match before case-insensitive."""
    names = tuple(names)
    for name in names:
        value = attributes.get(name)
        if value:
            return value

    lowered = {key.lower(): value for key, value in attributes.items()}
    for name in names:
        value = lowered.get(name.lower())
        if value:
            return value
    return None


# ------------------------------------------------------------------
# Extraction
# ------------------------------------------------------------------


class SchemaExtractor:
    """Extracts SchemaTableDefs from a Node tree according to a config."""

    def __init__(self, config: SchemaExtractConfig | None = None) -> None:
        self._config = config if config is not None else get_schema_preset_config(DEFAULT_SCHEMA_PRESET)
        ignore_ns = self._config.ignore_namespaces
        self._table_tags = {_normalize_tag(tag, ignore_ns) for tag in self._config.table_tags}
        self._field_tags = {_normalize_tag(tag, ignore_ns) for tag in self._config.field_tags}
        self._ignored = {_normalize_tag(tag, ignore_ns) for tag in self._config.ignore_nodes}

    @property
    def config(self) -> SchemaExtractConfig:
        return self._config

    def extract(self, root: Node | None) -> dict[str, SchemaTableDef]:
        """Walk ``root`` in pre-order and collect its tables.

        Args:
            root: Tree root, or None (yields no tables).

        Returns:
            Mapping of normalized table key to SchemaTableDef, in order of
            first appearance.
        """
        tables: dict[str, SchemaTableDef] = {}
        if root is None:
            return tables

        stack = [root]
        while stack:
            node = stack.pop()
            if not node.is_element:
                continue
            tag = self._tag_key(node)
            if tag in self._ignored:
                continue

            if tag in self._table_tags:
                self._add_table(node, tables)

            stack.extend(reversed(node.children))

        return tables

    def _tag_key(self, node: Node) -> str:
        return _normalize_tag(node.name, self._config.ignore_namespaces)

    def _add_table(self, node: Node, tables: dict[str, SchemaTableDef]) -> None:
        raw_name = _pick_attribute(node.attributes, self._config.table_name_attrs)
        display_name = raw_name.strip() if raw_name else ""
        if not display_name:
            return

        table_key = _normalize_name(display_name, self._config.case_sensitive_names)
        fields = self._collect_fields(node)
        existing = tables.get(table_key)
        if existing is None:
            tables[table_key] = SchemaTableDef(name=display_name, fields=fields)
            return

        for field_key, field_def in fields.items():
            existing.fields.setdefault(field_key, field_def)

    def _collect_fields(self, table_node: Node) -> dict[str, SchemaFieldDef]:
        fields: dict[str, SchemaFieldDef] = {}

        if self._config.field_search_mode == FieldSearchMode.CHILDREN:
            for child in table_node.children:
                if not child.is_element:
                    continue
                tag = self._tag_key(child)
                if tag in self._ignored or tag not in self._field_tags:
                    continue
                self._add_field(child, fields)
            return fields

        # Descendants: stop at ignored subtrees and nested tables
        stack = list(reversed(table_node.children))
        while stack:
            node = stack.pop()
            if not node.is_element:
                continue
            tag = self._tag_key(node)
            if tag in self._ignored or tag in self._table_tags:
                continue
            if tag in self._field_tags:
                self._add_field(node, fields)
            stack.extend(reversed(node.children))
        return fields

    def _add_field(self, node: Node, fields: dict[str, SchemaFieldDef]) -> None:
        raw_name = _pick_attribute(node.attributes, self._config.field_name_attrs)
        display_name = raw_name.strip() if raw_name else ""
        if not display_name:
            return

        field_key = _normalize_name(display_name, self._config.case_sensitive_names)
        if field_key in fields:
            return
        fields[field_key] = SchemaFieldDef(
            name=display_name,
            type=node.attributes.get("type"),
            size=node.attributes.get("size"),
            defaultvalue=node.attributes.get("defaultvalue"),
        )


def extract_tables(root: Node | None, config: SchemaExtractConfig | None = None) -> dict[str, SchemaTableDef]:
    return SchemaExtractor(config).extract(root)


# ------------------------------------------------------------------
# Diff
# ------------------------------------------------------------------


def _diff_field(old: SchemaFieldDef, new: SchemaFieldDef) -> tuple[SchemaDiffChange, ...]:
    changes: list[SchemaDiffChange] = []
    for key in FIELD_ATTRS:
        old_value = getattr(old, key) or ""
        new_value = getattr(new, key) or ""
        if old_value != new_value:
            changes.append(SchemaDiffChange(key=key, old_value=old_value, new_value=new_value))
    return tuple(changes)


class _StatsCounter:
    """Mutable tally turned into a frozen SchemaDiffStats at the end."""

    def __init__(self) -> None:
        self.counts = dict.fromkeys(SchemaDiffStats.__dataclass_fields__, 0)

    def bump(self, *names: str) -> None:
        for name in names:
            self.counts[name] += 1

    def freeze(self) -> SchemaDiffStats:
        counts = self.counts
        counts["total"] = counts["added"] + counts["removed"] + counts["modified"] + counts["unchanged"]
        return SchemaDiffStats(**counts)


def _one_sided_table(
    table_key: str,
    table: SchemaTableDef,
    diff_type: DiffType,
    items: list[SchemaDiffItem],
    stats: _StatsCounter,
) -> None:
    """Emit a table item plus one item per field for a table on one side only."""
    total_name, table_name, field_name = (
        ("added", "table_added", "field_added")
        if diff_type == DiffType.ADDED
        else ("removed", "table_removed", "field_removed")
    )

    stats.bump(total_name, table_name)
    items.append(
        SchemaDiffItem(
            id=f"table:{diff_type}:{table_key}",
            kind=SchemaItemKind.TABLE,
            type=diff_type,
            table=table.name,
            field_count=len(table.fields),
        )
    )
    for field_key, field_def in table.fields.items():
        stats.bump(total_name, field_name)
        items.append(
            SchemaDiffItem(
                id=f"field:{diff_type}:{table_key}:{field_key}",
                kind=SchemaItemKind.FIELD,
                type=diff_type,
                table=table.name,
                field=field_def.name,
                field_def=field_def,
            )
        )


def diff_schemas(
    tables_a: dict[str, SchemaTableDef],
    tables_b: dict[str, SchemaTableDef],
) -> SchemaDiffResult:
    """Compare two table extractions.

    Tables are visited in sorted key order and, inside a table present on
    both sides, fields in sorted key order.  Fields of a one-sided table
    follow the table's own field order.

    Returns:
        A SchemaDiffResult whose items never include unchanged fields;
        those only appear in the stats.
    """
    items: list[SchemaDiffItem] = []
    stats = _StatsCounter()

    for table_key in sorted(tables_a.keys() | tables_b.keys()):
        table_a = tables_a.get(table_key)
        table_b = tables_b.get(table_key)

        if table_a is None:
            _one_sided_table(table_key, table_b, DiffType.ADDED, items, stats)
            continue
        if table_b is None:
            _one_sided_table(table_key, table_a, DiffType.REMOVED, items, stats)
            continue

        table_name = table_a.name
        for field_key in sorted(table_a.fields.keys() | table_b.fields.keys()):
            field_a = table_a.fields.get(field_key)
            field_b = table_b.fields.get(field_key)

            if field_a is None:
                stats.bump("added", "field_added")
                items.append(
                    SchemaDiffItem(
                        id=f"field:added:{table_key}:{field_key}",
                        kind=SchemaItemKind.FIELD,
                        type=DiffType.ADDED,
                        table=table_name,
                        field=field_b.name,
                        field_def=field_b,
                    )
                )
                continue

            if field_b is None:
                stats.bump("removed", "field_removed")
                items.append(
                    SchemaDiffItem(
                        id=f"field:removed:{table_key}:{field_key}",
                        kind=SchemaItemKind.FIELD,
                        type=DiffType.REMOVED,
                        table=table_name,
                        field=field_a.name,
                        field_def=field_a,
                    )
                )
                continue

            changes = _diff_field(field_a, field_b)
            if not changes:
                stats.bump("unchanged", "field_unchanged")
                continue

            stats.bump("modified", "field_modified")
            items.append(
                SchemaDiffItem(
                    id=f"field:modified:{table_key}:{field_key}",
                    kind=SchemaItemKind.FIELD,
                    type=DiffType.MODIFIED,
                    table=table_name,
                    field=field_a.name,
                    changes=changes,
                    field_def=field_b,
                )
            )

    return SchemaDiffResult(items=tuple(items), stats=stats.freeze())


def build_schema_diff(
    root_a: Node | None,
    root_b: Node | None,
    config: SchemaExtractConfig | None = None,
) -> SchemaDiffResult:
    """Extract both schemas with one config and diff them."""
    extractor = SchemaExtractor(config)
    return diff_schemas(extractor.extract(root_a), extractor.extract(root_b))
