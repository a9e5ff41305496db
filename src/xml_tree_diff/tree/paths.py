"""Helpers for the slash-separated node paths assigned by the parser."""

from __future__ import annotations

import re

__all__ = ["common_ancestor", "is_ancestor", "path_depth", "strip_index"]

_INDEX_SUFFIX = re.compile(r"\[\d+\]$")


def path_depth(path: str) -> int:
    """Number of segments in ``path``; the root element has depth 1."""
    return len([part for part in path.split("/") if part])


def strip_index(segment: str) -> str:
    """Drop a trailing ``[k]`` sibling index from a path segment."""
    return _INDEX_SUFFIX.sub("", segment)


def is_ancestor(ancestor: str, descendant: str) -> bool:
    """True when ``descendant`` equals or lies below ``ancestor``."""
    return descendant == ancestor or descendant.startswith(ancestor + "/")


def common_ancestor(path_a: str, path_b: str) -> str:
    """Longest shared leading path of two paths (``"/"`` when none)."""
    parts_a = [part for part in path_a.split("/") if part]
    parts_b = [part for part in path_b.split("/") if part]

    common: list[str] = []
    for seg_a, seg_b in zip(parts_a, parts_b):
        if seg_a != seg_b:
            break
        common.append(seg_a)
    return "/" + "/".join(common)
