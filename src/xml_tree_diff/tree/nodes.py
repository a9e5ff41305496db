"""Node dataclass and NodeKind StrEnum for the canonical XML tree.

Provides the foundational data types produced by the parser and consumed
by every differ.  A parsed tree is a value: built once per ``parse_xml``
call and never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto


class NodeKind(StrEnum):
    """Enumeration of the four XML constructs kept in the tree.

    StrEnum values are the lowercased member names (Python 3.11+):
    - ELEMENT -> "element" : a tagged element
    - TEXT    -> "text"    : a standalone text node
    - COMMENT -> "comment" : ``<!-- ... -->``
    - CDATA   -> "cdata"   : ``<![CDATA[ ... ]]>``
    """

    ELEMENT = auto()
    TEXT = auto()
    COMMENT = auto()
    CDATA = auto()


COMMENT_NAME = "#comment"
CDATA_NAME = "#cdata"


@dataclass(frozen=True, slots=True)
class Node:
    """One parsed XML construct.

    Attributes:
        name:       Tag name for elements; ``#comment`` or ``#cdata`` for
                    comments and CDATA sections.
        path:       Address unique within the tree, e.g. ``/root/item[1]``.
        kind:       Which construct this is (see NodeKind).
        attributes: Attribute name -> value.  Read-only by convention.
        value:      Direct text of an element (first non-blank text node,
                    stripped), or the content of a comment/CDATA node.
        children:   Child nodes in document order.
    """

    name: str
    path: str
    kind: NodeKind = NodeKind.ELEMENT
    attributes: dict[str, str] = field(default_factory=dict)
    value: str | None = None
    children: tuple[Node, ...] = ()

    @property
    def is_element(self) -> bool:
        return self.kind == NodeKind.ELEMENT

    def element_children(self) -> tuple[Node, ...]:
        """Return only the ELEMENT children, in document order."""
        return tuple(child for child in self.children if child.is_element)


@dataclass(frozen=True, slots=True)
class ParseWarningSample:
    """A representative element that triggered a parse warning."""

    name: str
    path: str
    attributes: dict[str, str]


@dataclass(frozen=True, slots=True)
class ParseWarning:
    """Aggregated warning of one kind.

    Attributes:
        code:    Warning identifier.  Only ``"mixed-content"`` is produced.
        count:   Total number of offending elements in the document.
        samples: Up to ``MAX_WARNING_SAMPLES`` offending elements.
    """

    code: str
    count: int
    samples: tuple[ParseWarningSample, ...] = ()


@dataclass(frozen=True, slots=True)
class ParseResult:
    """Outcome of a ``parse_xml`` call.  The parser never raises.

    Attributes:
        success:  True when ``root`` holds a usable tree.
        root:     Root element, or None on failure.
        error:    Human-readable failure reason, or None on success.
        warnings: Soft warnings collected while parsing.
        raw_xml:  The input text, unchanged.
    """

    success: bool
    root: Node | None
    error: str | None
    warnings: tuple[ParseWarning, ...] = ()
    raw_xml: str = ""
