"""Line differ: LCS edit script over two line sequences, with a complexity guard.

Pipeline:
1. Anchor trimming: a common prefix and a common suffix of equal lines are
   emitted as ``equal`` without entering the DP.
2. Middle slice: if ``len(middle_old) * len(middle_new)`` exceeds
   ``max_cells`` the slice is emitted coarsely (every old line deleted,
   then every new line inserted) and ``is_coarse`` is set.  Otherwise a
   classic LCS table is filled and backtracked into an ordered script.

The LCS table is a numpy ``int32`` array filled one row at a time.  For row
``i`` the candidate value of each cell is ``max(up, diag + 1 if lines
match)``; a running maximum along the row then folds in the ``left``
neighbour, which gives exactly the textbook recurrence.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from enum import StrEnum, auto

import numpy as np

from xml_tree_diff.algorithm.config import DEFAULT_MAX_CELLS

__all__ = ["LineDiffResult", "LineOp", "LineOpType", "diff_lines", "split_lines"]

logger = logging.getLogger(__name__)


class LineOpType(StrEnum):
    EQUAL = auto()
    INSERT = auto()
    DELETE = auto()


@dataclass(frozen=True, slots=True)
class LineOp:
    """One line of the edit script."""

    type: LineOpType
    line: str


@dataclass(frozen=True, slots=True)
class LineDiffResult:
    """Edit script plus the precision flag.

    Attributes:
        ops:       Operations in line order.  Applying the ``equal`` and
                   ``insert`` lines in order reproduces the new text.
        is_coarse: True when the middle slice exceeded the cell budget and
                   was emitted as whole-block delete + insert.  Callers must
                   present such a diff as approximate.
    """

    ops: tuple[LineOp, ...]
    is_coarse: bool = False


def split_lines(text: str) -> list[str]:
    """Split text the way the diff views do (on ``"\\n"`` only)."""
    return text.split("\n")


def diff_lines(
    old_lines: Sequence[str],
    new_lines: Sequence[str],
    max_cells: int = DEFAULT_MAX_CELLS,
) -> LineDiffResult:
    """Diff two line sequences.

    Args:
        old_lines: Lines of the old text.
        new_lines: Lines of the new text.
        max_cells: Largest LCS table allowed for the middle slice.  Must be
            >= 0; ``0`` makes any non-trivial middle slice coarse.

    Returns:
        A ``LineDiffResult``.

    Raises:
        ValueError: If ``max_cells`` is negative.
    """
    if max_cells < 0:
        msg = f"max_cells must be >= 0, got {max_cells}"
        raise ValueError(msg)

    old = list(old_lines)
    new = list(new_lines)

    start = 0
    while start < len(old) and start < len(new) and old[start] == new[start]:
        start += 1

    end_old = len(old)
    end_new = len(new)
    while end_old > start and end_new > start and old[end_old - 1] == new[end_new - 1]:
        end_old -= 1
        end_new -= 1

    ops = [LineOp(LineOpType.EQUAL, line) for line in old[:start]]
    middle_old = old[start:end_old]
    middle_new = new[start:end_new]
    is_coarse = False

    if middle_old or middle_new:
        cells = len(middle_old) * len(middle_new)
        if cells > max_cells:
            is_coarse = True
            logger.warning(
                "Line diff middle slice %dx%d exceeds %d cells; emitting coarse diff",
                len(middle_old),
                len(middle_new),
                max_cells,
            )
            ops.extend(LineOp(LineOpType.DELETE, line) for line in middle_old)
            ops.extend(LineOp(LineOpType.INSERT, line) for line in middle_new)
        else:
            ops.extend(_diff_by_lcs(middle_old, middle_new))

    ops.extend(LineOp(LineOpType.EQUAL, line) for line in old[end_old:])
    return LineDiffResult(ops=tuple(ops), is_coarse=is_coarse)


# ------------------------------------------------------------------
# LCS
# ------------------------------------------------------------------


def _intern(lines: list[str], ids: dict[str, int]) -> np.ndarray:
    return np.fromiter(
        (ids.setdefault(line, len(ids)) for line in lines),
        dtype=np.int64,
        count=len(lines),
    )


def _lcs_table(old: list[str], new: list[str]) -> np.ndarray:
    """Fill the (m+1) x (n+1) LCS length table."""
    ids: dict[str, int] = {}
    old_ids = _intern(old, ids)
    new_ids = _intern(new, ids)

    m, n = len(old), len(new)
    table = np.zeros((m + 1, n + 1), dtype=np.int32)
    for i in range(1, m + 1):
        prev = table[i - 1]
        diagonal = np.where(new_ids == old_ids[i - 1], prev[:-1] + 1, 0)
        candidate = np.maximum(prev[1:], diagonal)
        np.maximum.accumulate(candidate, out=table[i, 1:])
    return table


def _diff_by_lcs(old: list[str], new: list[str]) -> list[LineOp]:
    """Backtrack the LCS table into an edit script.

    On ties the walk steps over the new line first, so within a changed run
    deletions come before insertions once the script is reversed.
    """
    if not old:
        return [LineOp(LineOpType.INSERT, line) for line in new]
    if not new:
        return [LineOp(LineOpType.DELETE, line) for line in old]

    table = _lcs_table(old, new)
    reversed_ops: list[LineOp] = []
    i, j = len(old), len(new)

    while i > 0 and j > 0:
        if old[i - 1] == new[j - 1]:
            reversed_ops.append(LineOp(LineOpType.EQUAL, old[i - 1]))
            i -= 1
            j -= 1
        elif table[i - 1, j] > table[i, j - 1]:
            reversed_ops.append(LineOp(LineOpType.DELETE, old[i - 1]))
            i -= 1
        else:
            reversed_ops.append(LineOp(LineOpType.INSERT, new[j - 1]))
            j -= 1

    while j > 0:
        reversed_ops.append(LineOp(LineOpType.INSERT, new[j - 1]))
        j -= 1
    while i > 0:
        reversed_ops.append(LineOp(LineOpType.DELETE, old[i - 1]))
        i -= 1

    reversed_ops.reverse()
    return reversed_ops
