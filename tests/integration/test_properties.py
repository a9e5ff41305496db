"""Property checks over a corpus of documents and seeded random line lists.

Covers:
- Idempotence: a document diffed against itself is all unchanged
- Role symmetry: added in diff(A, B) is removed in diff(B, A) at the same path
- Path uniqueness within one parsed tree
- Line diff round-trip: applying the script to the old lines yields the new lines
- Coarse completeness: a coarse script classifies every line exactly once
"""

from __future__ import annotations

import random
from itertools import permutations

import pytest

from xml_tree_diff.algorithm.entries import DiffType
from xml_tree_diff.algorithm.line_diff import LineOpType, diff_lines
from xml_tree_diff.algorithm.tree_diff import diff_tree
from xml_tree_diff.tree.keys import entry_key
from xml_tree_diff.tree.nodes import Node
from xml_tree_diff.tree.parser import flatten, parse_xml

DOCUMENTS = [
    "<a/>",
    '<a x="1" y="2">text</a>',
    '<a><b id="1">x</b><b id="2">y</b></a>',
    '<a><b id="2">y</b><b id="3">z</b><c/></a>',
    "<a><i>1</i><i>2</i><i>3</i></a>",
    "<a><i>1</i><j/><i>4</i></a>",
    '<a><!-- note --><b name="k"><![CDATA[raw]]><c/><c/></b></a>',
    '<root><struct name="T"><entry name="e" type="int"/><entry name="f"/></struct></root>',
    '<root><struct name="T"><entry name="e" type="long"/><entry name="g"/></struct><struct name="U"/></root>',
    "<z><y><x><w>deep</w></x></y></z>",
    "<a>mixed<b/>content</a>",
]


def _root(text: str) -> Node:
    root = parse_xml(text).root
    assert root is not None
    return root


def _apply(old: list[str], ops: tuple) -> list[str]:
    out: list[str] = []
    cursor = 0
    for op in ops:
        if op.type == LineOpType.INSERT:
            out.append(op.line)
            continue
        assert old[cursor] == op.line
        cursor += 1
        if op.type == LineOpType.EQUAL:
            out.append(op.line)
    assert cursor == len(old)
    return out


def _random_lines(rng: random.Random, alphabet: str) -> list[str]:
    return [rng.choice(alphabet) for _ in range(rng.randint(0, 12))]


# ---------------------------------------------------------------------------
# Structural properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", DOCUMENTS)
def test_idempotence(text: str) -> None:
    entries = diff_tree(_root(text), _root(text))
    assert entries
    assert all(entry.type == DiffType.UNCHANGED for entry in entries)


@pytest.mark.parametrize(("text_a", "text_b"), list(permutations(DOCUMENTS, 2)))
def test_role_symmetry(text_a: str, text_b: str) -> None:
    forward = diff_tree(_root(text_a), _root(text_b))
    backward = diff_tree(_root(text_b), _root(text_a))

    added = sorted(entry.path for entry in forward if entry.type == DiffType.ADDED)
    removed = sorted(entry.path for entry in backward if entry.type == DiffType.REMOVED)
    assert added == removed

    added_keys = sorted(entry_key(entry) for entry in forward if entry.type == DiffType.ADDED)
    removed_keys = sorted(entry_key(entry) for entry in backward if entry.type == DiffType.REMOVED)
    assert added_keys == removed_keys

    modified_forward = sum(1 for entry in forward if entry.type == DiffType.MODIFIED)
    modified_backward = sum(1 for entry in backward if entry.type == DiffType.MODIFIED)
    assert modified_forward == modified_backward


@pytest.mark.parametrize("text", DOCUMENTS)
def test_path_uniqueness(text: str) -> None:
    paths = [node.path for node in flatten(_root(text))]
    assert len(paths) == len(set(paths))


# ---------------------------------------------------------------------------
# Line diff properties
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("seed", range(40))
def test_line_diff_round_trip(seed: int) -> None:
    rng = random.Random(seed)
    old = _random_lines(rng, "abcd")
    new = _random_lines(rng, "abcd")
    result = diff_lines(old, new)
    assert not result.is_coarse
    assert _apply(old, result.ops) == new


@pytest.mark.parametrize("seed", range(20))
def test_coarse_completeness(seed: int) -> None:
    rng = random.Random(seed)
    old = _random_lines(rng, "abc")
    new = _random_lines(rng, "abc")
    result = diff_lines(old, new, max_cells=0)
    if not result.is_coarse:
        return
    assert len(result.ops) == len(old) + len(new) - sum(
        1 for op in result.ops if op.type == LineOpType.EQUAL
    )
    deleted = sum(1 for op in result.ops if op.type != LineOpType.INSERT)
    inserted = sum(1 for op in result.ops if op.type != LineOpType.DELETE)
    assert deleted == len(old)
    assert inserted == len(new)
