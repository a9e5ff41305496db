"""parse_xml: converts raw XML text into an immutable, canonically addressed Node tree.

Parsing is delegated to ``defusedxml.minidom`` (expat underneath, with
entity-expansion and external-reference attacks rejected).  The DOM is then
walked once, top-down, to build ``Node`` values.

Path assignment:
- Root is ``/<tag>``.
- Each level appends ``/<tag>``; when more than one sibling shares the tag
  a ``[k]`` suffix is added to every occurrence after the first
  (``item``, ``item[1]``, ``item[2]``).  Sibling counts are computed before
  indices are handed out, so a lone child never receives an index.
- Comments and CDATA sections are addressed ``<parent>/#comment`` and
  ``<parent>/#cdata`` under the same counting rule.

All counters are locals of the call; concurrent parses share nothing.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import TYPE_CHECKING
from xml.dom import Node as DomNode
from xml.parsers.expat import ExpatError

from defusedxml import DefusedXmlException
from defusedxml import minidom as safe_minidom

from xml_tree_diff.tree.nodes import (
    CDATA_NAME,
    COMMENT_NAME,
    Node,
    NodeKind,
    ParseResult,
    ParseWarning,
    ParseWarningSample,
)

if TYPE_CHECKING:
    from collections.abc import Iterator
    from xml.dom.minidom import Element

__all__ = [
    "MAX_WARNING_SAMPLES",
    "collect_parse_warnings",
    "find_node_by_path",
    "flatten",
    "parse_xml",
]

logger = logging.getLogger(__name__)

MAX_WARNING_SAMPLES = 8

EMPTY_INPUT_ERROR = "XML content is empty"
NO_ROOT_ERROR = "No root element found"
STRICT_MIXED_CONTENT_ERROR = "Strict mode: mixed content detected"


def parse_xml(xml_text: str | None, strict_mode: bool = False) -> ParseResult:
    """Parse ``xml_text`` into a ``ParseResult``.

    Args:
        xml_text:    Raw XML document text.
        strict_mode: When True, any mixed-content warning turns into a parse
            failure instead of a soft warning.

    Returns:
        A ``ParseResult``.  Failures (empty input, malformed XML, forbidden
        entity usage, strict-mode rejection) are reported through
        ``success=False`` and ``error``; nothing is raised.
    """
    raw = xml_text or ""
    if not raw.strip():
        return ParseResult(success=False, root=None, error=EMPTY_INPUT_ERROR, raw_xml=raw)

    try:
        document = safe_minidom.parseString(raw)
    except ExpatError as exc:
        logger.debug("XML grammar violation: %s", exc)
        return ParseResult(success=False, root=None, error=str(exc), raw_xml=raw)
    except DefusedXmlException as exc:
        logger.debug("Rejected unsafe XML construct: %r", exc)
        return ParseResult(success=False, root=None, error=str(exc), raw_xml=raw)

    element = document.documentElement
    if element is None:
        return ParseResult(success=False, root=None, error=NO_ROOT_ERROR, raw_xml=raw)
    root = _convert_tree(element)

    warnings = collect_parse_warnings(root)
    if strict_mode and warnings:
        return ParseResult(
            success=False,
            root=None,
            error=STRICT_MIXED_CONTENT_ERROR,
            warnings=warnings,
            raw_xml=raw,
        )

    return ParseResult(success=True, root=root, error=None, warnings=warnings, raw_xml=raw)


# ------------------------------------------------------------------
# DOM -> Node conversion
# ------------------------------------------------------------------


def _child_path(parent_path: str, name: str, index: int | None) -> str:
    suffix = f"[{index}]" if index else ""
    if not parent_path:
        return f"/{name}{suffix}"
    return f"{parent_path}/{name}{suffix}"


class _OpenElement:
    """An element whose children are still being converted.

    Holds everything needed to build the frozen Node once the last child
    is done: the element's own path, attributes and value, the kept DOM
    children paired with their paths, and the converted children so far.
    """

    __slots__ = ("attributes", "children", "name", "path", "pending", "value")

    def __init__(self, element: Element, path: str) -> None:
        self.name = element.tagName
        self.path = path
        self.attributes = {attr_name: attr_value for attr_name, attr_value in element.attributes.items()}

        self.value: str | None = None
        for child in element.childNodes:
            if child.nodeType == DomNode.TEXT_NODE:
                text = child.data.strip()
                if text:
                    self.value = text
                    break

        # First pass: how many siblings share each synthetic name.
        name_counts: Counter[str] = Counter()
        for child in element.childNodes:
            child_name = _synthetic_name(child)
            if child_name is not None:
                name_counts[child_name] += 1

        # Second pass: hand out paths, indexing only repeated names.
        name_indices: Counter[str] = Counter()
        kept: list[tuple[DomNode, str]] = []
        for child in element.childNodes:
            child_name = _synthetic_name(child)
            if child_name is None:
                continue
            current = name_indices[child_name]
            name_indices[child_name] += 1
            child_index = current if name_counts[child_name] > 1 else None
            kept.append((child, _child_path(path, child_name, child_index)))

        self.pending: Iterator[tuple[DomNode, str]] = iter(kept)
        self.children: list[Node] = []

    def close(self) -> Node:
        return Node(
            name=self.name,
            path=self.path,
            kind=NodeKind.ELEMENT,
            attributes=self.attributes,
            value=self.value,
            children=tuple(self.children),
        )


def _convert_tree(root_element: Element) -> Node:
    """Build the Node tree for ``root_element`` with an explicit stack.

    Nesting depth is bounded only by memory, not by the interpreter's
    recursion limit.
    """
    stack = [_OpenElement(root_element, _child_path("", root_element.tagName, None))]
    while True:
        frame = stack[-1]
        pending = next(frame.pending, None)

        if pending is None:
            stack.pop()
            node = frame.close()
            if not stack:
                return node
            stack[-1].children.append(node)
            continue

        child, child_path = pending
        if child.nodeType == DomNode.ELEMENT_NODE:
            stack.append(_OpenElement(child, child_path))
        elif child.nodeType == DomNode.COMMENT_NODE:
            frame.children.append(
                Node(name=COMMENT_NAME, path=child_path, kind=NodeKind.COMMENT, value=child.data)
            )
        else:
            frame.children.append(
                Node(name=CDATA_NAME, path=child_path, kind=NodeKind.CDATA, value=child.data)
            )


def _synthetic_name(dom_node: DomNode) -> str | None:
    """Name used for sibling counting, or None for nodes that are not kept."""
    if dom_node.nodeType == DomNode.ELEMENT_NODE:
        return dom_node.tagName
    if dom_node.nodeType == DomNode.COMMENT_NODE:
        return COMMENT_NAME
    if dom_node.nodeType == DomNode.CDATA_SECTION_NODE:
        return CDATA_NAME
    return None


# ------------------------------------------------------------------
# Warnings
# ------------------------------------------------------------------


def _has_direct_text(node: Node) -> bool:
    if node.value and node.value.strip():
        return True
    return any(
        child.kind == NodeKind.TEXT and bool(child.value and child.value.strip())
        for child in node.children
    )


def collect_parse_warnings(root: Node) -> tuple[ParseWarning, ...]:
    """Detect mixed content (element children plus non-blank direct text).

    Returns:
        An empty tuple, or a single ``mixed-content`` warning carrying the
        total count and up to ``MAX_WARNING_SAMPLES`` samples in document
        order.
    """
    count = 0
    samples: list[ParseWarningSample] = []

    for node in flatten(root):
        if not node.is_element:
            continue
        has_element = any(child.is_element for child in node.children)
        if has_element and _has_direct_text(node):
            count += 1
            if len(samples) < MAX_WARNING_SAMPLES:
                samples.append(
                    ParseWarningSample(name=node.name, path=node.path, attributes=node.attributes)
                )

    if count == 0:
        return ()
    return (ParseWarning(code="mixed-content", count=count, samples=tuple(samples)),)


# ------------------------------------------------------------------
# Traversal helpers
# ------------------------------------------------------------------


def _iter_preorder(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def flatten(node: Node | None) -> list[Node]:
    """Return every node of the subtree in pre-order (empty for None)."""
    if node is None:
        return []
    return list(_iter_preorder(node))


def find_node_by_path(root: Node | None, path: str) -> Node | None:
    """Return the node whose path is ``path``, or None."""
    if root is None:
        return None
    for node in _iter_preorder(root):
        if node.path == path:
            return node
    return None
