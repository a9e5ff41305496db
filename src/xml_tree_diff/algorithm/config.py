"""SchemaExtractConfig, FieldSearchMode and the built-in schema presets.

SchemaExtractConfig is a frozen (immutable) dataclass describing how logical
tables and fields are recognised in an XML tree.  FieldSearchMode selects
how far below a table element fields are looked for.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum, auto

__all__ = [
    "DEFAULT_MAX_CELLS",
    "DEFAULT_SCHEMA_PRESET",
    "SCHEMA_PRESETS",
    "FieldSearchMode",
    "SchemaExtractConfig",
    "SchemaPreset",
    "get_schema_preset_config",
]

# Largest middle-slice LCS table (old lines x new lines) the line differ
# computes before falling back to a coarse diff.
DEFAULT_MAX_CELLS = 2_000_000


class FieldSearchMode(StrEnum):
    """Where fields of a table element are searched.

    - CHILDREN:    Direct children only.
    - DESCENDANTS: The whole subtree, stopping at nested table elements.
    """

    CHILDREN = auto()
    DESCENDANTS = auto()


def _as_tuple(name: str, value: Sequence[str]) -> tuple[str, ...]:
    if isinstance(value, str):
        msg = f"{name} must be a sequence of strings, got the string {value!r}"
        raise ValueError(msg)
    return tuple(value)


@dataclass(frozen=True, slots=True)
class SchemaExtractConfig:
    """Immutable configuration for schema extraction.

    Attributes:
        table_tags: Tag names recognised as tables.
        field_tags: Tag names recognised as fields.
        table_name_attrs: Attributes holding a table's name, by preference.
        field_name_attrs: Attributes holding a field's name, by preference.
        ignore_nodes: Tag names skipped together with their subtrees.
        ignore_namespaces: When True, ``xs:element`` matches ``element``.
        case_sensitive_names: When False, table/field names that differ only
            in case are treated as the same entity.
        field_search_mode: See FieldSearchMode.

    Tag matching is always case-insensitive.
    """

    table_tags: tuple[str, ...] = ("struct",)
    field_tags: tuple[str, ...] = ("entry",)
    table_name_attrs: tuple[str, ...] = ("name",)
    field_name_attrs: tuple[str, ...] = ("name",)
    ignore_nodes: tuple[str, ...] = ("macrosgroup",)
    ignore_namespaces: bool = False
    case_sensitive_names: bool = True
    field_search_mode: FieldSearchMode = FieldSearchMode.CHILDREN

    def __post_init__(self) -> None:
        # Lists are accepted and stored as tuples.
        for name in ("table_tags", "field_tags", "table_name_attrs", "field_name_attrs", "ignore_nodes"):
            object.__setattr__(self, name, _as_tuple(name, getattr(self, name)))

        for name in ("table_tags", "field_tags", "table_name_attrs", "field_name_attrs"):
            if not getattr(self, name):
                msg = f"{name} must not be empty"
                raise ValueError(msg)

        object.__setattr__(self, "field_search_mode", FieldSearchMode(self.field_search_mode))


class SchemaPreset(StrEnum):
    STRUCT = auto()
    XSD = auto()
    TABLE = auto()
    CUSTOM = auto()


DEFAULT_SCHEMA_PRESET = SchemaPreset.STRUCT

SCHEMA_PRESETS: dict[SchemaPreset, SchemaExtractConfig] = {
    SchemaPreset.STRUCT: SchemaExtractConfig(),
    SchemaPreset.XSD: SchemaExtractConfig(
        table_tags=("complexType",),
        field_tags=("element", "attribute"),
        table_name_attrs=("name",),
        field_name_attrs=("name",),
        ignore_nodes=("annotation", "documentation"),
        ignore_namespaces=True,
        field_search_mode=FieldSearchMode.DESCENDANTS,
    ),
    SchemaPreset.TABLE: SchemaExtractConfig(
        table_tags=("table", "entity"),
        field_tags=("column", "field"),
        table_name_attrs=("name", "id", "table"),
        field_name_attrs=("name", "column", "field"),
        ignore_nodes=(),
    ),
    SchemaPreset.CUSTOM: SchemaExtractConfig(),
}


def get_schema_preset_config(preset: SchemaPreset | str) -> SchemaExtractConfig:
    """Return the config of a preset; unknown names fall back to the default.

    Configs are immutable, so the shared preset instance is returned as is.
    """
    try:
        return SCHEMA_PRESETS[SchemaPreset(preset)]
    except ValueError:
        return SCHEMA_PRESETS[DEFAULT_SCHEMA_PRESET]
