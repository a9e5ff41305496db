"""Tree subpackage: the canonical XML tree and its primitives.

Re-exports the public API for the tree module:
- Node / NodeKind: immutable parsed XML construct and its tagged kind
- ParseResult / ParseWarning / ParseWarningSample: parser output types
- parse_xml: raw XML text -> ParseResult
- stable_key / key_attribute: position-independent node identity
- serialize_node / pretty_print: canonical indented XML text
"""

from xml_tree_diff.tree.keys import KEY_ATTRIBUTES, key_attribute, stable_key
from xml_tree_diff.tree.nodes import (
    Node,
    NodeKind,
    ParseResult,
    ParseWarning,
    ParseWarningSample,
)
from xml_tree_diff.tree.parser import find_node_by_path, flatten, parse_xml
from xml_tree_diff.tree.serializer import pretty_print, serialize_node

__all__ = [
    "KEY_ATTRIBUTES",
    "Node",
    "NodeKind",
    "ParseResult",
    "ParseWarning",
    "ParseWarningSample",
    "find_node_by_path",
    "flatten",
    "key_attribute",
    "parse_xml",
    "pretty_print",
    "serialize_node",
    "stable_key",
]
