"""Deterministic XML document generators for performance benchmarks.

All generators produce fixed, reproducible documents. No random values.
Three tiers by table count: 10 tables, 100 tables, 500 tables, each with
eight fields per table.  Each tier provides a "similar" pair (a handful of
edits) and a "dissimilar" pair (every value changed).
"""

from __future__ import annotations

import pytest

FIELDS_PER_TABLE = 8


def generate_schema_document(num_tables: int, value_prefix: str = "v", drop_every: int = 0) -> str:
    """Generate a ``struct``/``entry`` document.

    Args:
        num_tables:   Number of ``struct`` elements.
        value_prefix: Prefix of every ``defaultvalue`` attribute.
        drop_every:   When > 0, every n-th table loses its last field.
    """
    parts = ["<root>"]
    for i in range(num_tables):
        parts.append(f'<struct name="table_{i}">')
        field_count = FIELDS_PER_TABLE
        if drop_every and i % drop_every == 0:
            field_count -= 1
        for j in range(field_count):
            parts.append(
                f'<entry name="field_{j}" type="int" size="{j + 1}" defaultvalue="{value_prefix}_{i}_{j}"/>'
            )
        parts.append("</struct>")
    parts.append("</root>")
    return "".join(parts)


def _make_similar(num_tables: int) -> tuple[str, str]:
    """Same documents except every 10th table lost one field."""
    return generate_schema_document(num_tables), generate_schema_document(num_tables, drop_every=10)


def _make_dissimilar(num_tables: int) -> tuple[str, str]:
    """Every field's default value differs."""
    return (
        generate_schema_document(num_tables, value_prefix="old"),
        generate_schema_document(num_tables, value_prefix="new"),
    )


# --- Fixtures for each size tier ---


@pytest.fixture
def pair_10table_similar() -> tuple[str, str]:
    return _make_similar(10)


@pytest.fixture
def pair_10table_dissimilar() -> tuple[str, str]:
    return _make_dissimilar(10)


@pytest.fixture
def pair_100table_similar() -> tuple[str, str]:
    return _make_similar(100)


@pytest.fixture
def pair_100table_dissimilar() -> tuple[str, str]:
    return _make_dissimilar(100)


@pytest.fixture
def pair_500table_similar() -> tuple[str, str]:
    """500 tables x 8 fields: about 4500 pretty-printed lines per side."""
    return _make_similar(500)


@pytest.fixture
def pair_500table_dissimilar() -> tuple[str, str]:
    return _make_dissimilar(500)
