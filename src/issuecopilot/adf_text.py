"""Utilities to convert Atlassian Document Format (ADF) to plain text."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Mapping

from .nodes import DocumentNode, parse_node

PANEL_TYPES = {"info", "note", "warning", "error", "success", "tip", "custom"}
DEFAULT_PANEL_TYPE = "info"
BULLET = "• "


def to_plain_text(document: Any) -> str:
    """Render an ADF document to plain text.

    Strings pass through unchanged. Anything that is not a mapping renders
    to ``""``. A ``doc`` node, or an untyped mapping with a ``content``
    list, renders its children as blocks separated by a blank line; any
    other node renders on its own.
    """

    if isinstance(document, str):
        return document
    if not isinstance(document, Mapping):
        return ""

    node = parse_node(document)
    if node is None:
        return ""
    if node.type in {"", "doc"}:
        return _render_blocks(node.content)
    return _render_node(node)


def _render_node(node: DocumentNode) -> str:
    handler = _HANDLERS.get(node.type)
    if handler is None:
        return ""
    return handler(node)


def _render_blocks(nodes: Iterable[DocumentNode]) -> str:
    rendered = (_render_node(node) for node in nodes)
    return "\n\n".join(text for text in rendered if text)


def _render_inline(nodes: Iterable[DocumentNode]) -> str:
    return "".join(_render_node(node) for node in nodes)


def _join_children(node: DocumentNode, separator: str) -> str:
    rendered = (_render_node(child) for child in node.content)
    return separator.join(text for text in rendered if text)


def _render_paragraph(node: DocumentNode) -> str:
    return _render_inline(node.content)


def _render_heading(node: DocumentNode) -> str:
    text = _render_inline(node.content)
    if not text:
        return ""
    level = node.attr("level", 1)
    try:
        level = int(level)
    except (TypeError, ValueError, OverflowError):
        level = 1
    level = max(1, min(6, level))
    return f"{'#' * level} {text}"


def _render_text(node: DocumentNode) -> str:
    return node.text


def _render_mention(node: DocumentNode) -> str:
    name = node.attr_text("text") or node.attr_text("id")
    if not name:
        return ""
    return f"@{name}"


def _render_list(node: DocumentNode, marker: Callable[[int], str]) -> str:
    lines: List[str] = []
    for position, item in enumerate(node.content, start=1):
        text = _render_node(item)
        if not text:
            continue
        prefix = marker(position)
        item_lines = text.split("\n")
        lines.append(f"{prefix}{item_lines[0]}")
        # Continuation lines and nested lists line up under the item text.
        indent = " " * len(prefix)
        lines.extend(f"{indent}{line}" if line else "" for line in item_lines[1:])
    return "\n".join(lines)


def _render_bullet_list(node: DocumentNode) -> str:
    if not node.content:
        return ""
    return _render_list(node, lambda _: BULLET)


def _render_ordered_list(node: DocumentNode) -> str:
    if not node.content:
        return ""
    return _render_list(node, lambda position: f"{position}. ")


def _render_list_item(node: DocumentNode) -> str:
    return _join_children(node, "\n")


def _render_code_block(node: DocumentNode) -> str:
    if not node.content:
        return ""
    code = "".join(child.text for child in node.content if child.type == "text")
    language = node.attr_text("language")
    return f"```{language}\n{code}\n```"


def _render_blockquote(node: DocumentNode) -> str:
    quoted: List[str] = []
    for child in node.content:
        text = _render_node(child)
        if not text:
            continue
        quoted.append("\n".join(f"> {line}" for line in text.split("\n")))
    return "\n".join(quoted)


def _render_panel(node: DocumentNode) -> str:
    body = _join_children(node, "\n")
    if not body:
        return ""
    panel_type = node.attr_text("panelType").lower()
    if panel_type not in PANEL_TYPES:
        panel_type = DEFAULT_PANEL_TYPE
    return f"[{panel_type.upper()}]\n{body}"


def _render_table(node: DocumentNode) -> str:
    rows: List[str] = []
    for row in node.content:
        if row.type != "tableRow":
            continue
        cells = [_render_node(cell) for cell in row.content if cell.type in {"tableHeader", "tableCell"}]
        if any(cells):
            rows.append(" | ".join(cells))
    return "\n".join(rows)


def _render_table_cell(node: DocumentNode) -> str:
    return _join_children(node, " ")


def _render_emoji(node: DocumentNode) -> str:
    return node.attr_text("shortName") or node.attr_text("text")


def _render_card(node: DocumentNode) -> str:
    url = node.attr_text("url")
    title = node.attr_text("title")
    if title and url and title != url:
        return f"{title} ({url})"
    return title or url


def _render_expand(node: DocumentNode) -> str:
    body = _join_children(node, "\n")
    if not body:
        return ""
    title = node.attr_text("title") or "Expand"
    return f"▼ {title}\n{body}"


_HANDLERS: Dict[str, Callable[[DocumentNode], str]] = {
    "doc": lambda node: _render_blocks(node.content),
    "paragraph": _render_paragraph,
    "heading": _render_heading,
    "text": _render_text,
    "mention": _render_mention,
    "bulletList": _render_bullet_list,
    "orderedList": _render_ordered_list,
    "listItem": _render_list_item,
    "codeBlock": _render_code_block,
    "blockquote": _render_blockquote,
    "panel": _render_panel,
    "table": _render_table,
    "tableHeader": _render_table_cell,
    "tableCell": _render_table_cell,
    "rule": lambda _: "---",
    "hardBreak": lambda _: "\n",
    "emoji": _render_emoji,
    "inlineCard": _render_card,
    "blockCard": _render_card,
    "mediaGroup": lambda _: "[Media]",
    "mediaSingle": lambda _: "[Media]",
    "expand": _render_expand,
    "nestedExpand": _render_expand,
}


__all__ = ["to_plain_text"]
