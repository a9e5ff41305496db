"""pytest plugin for xml-tree-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from xml_tree_diff import compare
from xml_tree_diff.algorithm.entries import changed_entries

# Changed paths listed in a failure message before it is truncated
MAX_REPORTED_PATHS = 20


@pytest.fixture(scope="session")
def assert_xml_equivalent() -> Any:
    """Fixture that returns a callable XML equivalence asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to compare() which creates a fresh XMLComparator per call).

    Usage in tests::

        def test_reordered(assert_xml_equivalent):
            assert_xml_equivalent('<a><b id="1"/><b id="2"/></a>',
                                  '<a><b id="2"/><b id="1"/></a>')

        def test_value_change(assert_xml_equivalent):
            with pytest.raises(AssertionError, match=r"modified /a/b"):
                assert_xml_equivalent("<a><b>1</b></a>", "<a><b>2</b></a>")

    Returns:
        A callable ``_assert(actual, expected, strict_mode=False) -> None``
        that raises ``AssertionError`` when the documents differ structurally
        or either fails to parse.
    """

    def _assert(actual: str, expected: str, strict_mode: bool = False) -> None:
        """Assert that two XML documents are structurally equivalent.

        Args:
            actual:      The XML produced by the code under test.
            expected:    The expected/reference XML.
            strict_mode: Reject mixed content in either document.

        Raises:
            AssertionError: With the parse error, or with the summary counts
                and one ``<type> <path>`` line per changed node.
        """
        result = compare(actual, expected, strict_mode=strict_mode)

        for label, parsed in (("actual", result.parse_a), ("expected", result.parse_b)):
            if not parsed.success:
                raise AssertionError(f"{label} XML failed to parse: {parsed.error}")

        changes = changed_entries(result.entries)
        if not changes:
            return

        lines = [f"  {entry.type} {entry.path}" for entry in changes[:MAX_REPORTED_PATHS]]
        if len(changes) > MAX_REPORTED_PATHS:
            lines.append(f"  ... and {len(changes) - MAX_REPORTED_PATHS} more")
        summary = result.summary
        raise AssertionError(
            f"XML documents not equivalent: "
            f"added={summary.added} removed={summary.removed} modified={summary.modified}\n"
            + "\n".join(lines)
        )

    return _assert
