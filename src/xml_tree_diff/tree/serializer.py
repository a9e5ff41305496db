"""Canonical serializer: Node tree -> two-space indented XML text.

The line differ only ever sees text produced here, so the output must be a
deterministic, pure function of the tree:

- Comments render as ``<!-- text -->`` with the content trimmed.
- CDATA renders verbatim as ``<![CDATA[text]]>``.
- Elements without value or children self-close: ``<a x="1" />``.
- Elements with only a value stay on one line: ``<a>text</a>``.
- Elements with children put each child on its own line; a value on such
  an element (mixed content) goes on its own line before the children.
"""

from __future__ import annotations

from xml_tree_diff.tree.nodes import Node, NodeKind

__all__ = ["INDENT", "escape_attribute", "escape_text", "pretty_print", "serialize_node"]

INDENT = "  "


def escape_text(text: str) -> str:
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def escape_attribute(text: str) -> str:
    return escape_text(text).replace('"', "&quot;").replace("'", "&apos;")


def serialize_node(node: Node, indent: int = 0) -> str:
    """Serialize ``node`` and its subtree.

    Args:
        node:   Node to render.
        indent: Nesting level of ``node``; each level is two spaces.

    Returns:
        The rendered XML, lines joined with ``"\\n"``, no trailing newline.
    """
    lines: list[str] = []
    # Pending work: a node to open at a level, or a closing line to emit.
    stack: list[tuple[Node, int] | str] = [(node, indent)]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            lines.append(item)
            continue

        current, level = item
        spaces = INDENT * level
        match current.kind:
            case NodeKind.COMMENT:
                lines.append(f"{spaces}<!-- {(current.value or '').strip()} -->")
            case NodeKind.CDATA:
                lines.append(f"{spaces}<![CDATA[{current.value or ''}]]>")
            case NodeKind.TEXT:
                lines.append(f"{spaces}{escape_text(current.value or '')}")
            case NodeKind.ELEMENT:
                lines.append(_open_element(current, spaces))
                if current.children:
                    if current.value:
                        lines.append(f"{spaces}{INDENT}{escape_text(current.value)}")
                    stack.append(f"{spaces}</{current.name}>")
                    stack.extend((child, level + 1) for child in reversed(current.children))
    return "\n".join(lines)


def _open_element(node: Node, spaces: str) -> str:
    """First line of an element; the whole element when it has no children."""
    attrs = " ".join(f'{key}="{escape_attribute(value)}"' for key, value in node.attributes.items())
    head = f"<{node.name} {attrs}" if attrs else f"<{node.name}"

    if not node.children and not node.value:
        return f"{spaces}{head} />"
    if not node.children:
        return f"{spaces}{head}>{escape_text(node.value or '')}</{node.name}>"
    return f"{spaces}{head}>"


def pretty_print(node: Node | None) -> str:
    """Render a whole tree; ``""`` for a missing root."""
    if node is None:
        return ""
    return serialize_node(node, 0)
