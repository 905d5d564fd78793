"""Plain-text derivative of a document tree, for the text/plain MIME part."""
from __future__ import annotations

import html
import re

from mailblocks.nodes.nodes import ComponentType, DocumentNode

RULE = "-" * 40

_BREAK_RE = re.compile(r"<br\s*/?>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]+>")


def strip_markup(content: str) -> str:
    """Return ``content`` with line breaks kept and every other tag removed."""
    text = _BREAK_RE.sub("\n", content)
    return html.unescape(_TAG_RE.sub("", text))


def _leaf_text(node: DocumentNode) -> str | None:
    content = node.content or ""
    if node.inline_markup:
        content = strip_markup(content)
    kind = node.component_type
    if kind == ComponentType.HEADING.value:
        return content.strip().upper()
    if kind in (ComponentType.BUTTON.value, ComponentType.LINK.value):
        href = node.properties.get("href")
        label = content.strip()
        if href and href != "#":
            return f"{label} ({href})" if label else str(href)
        return label
    if kind == ComponentType.DIVIDER.value:
        return RULE
    if kind == ComponentType.CODE_BLOCK.value:
        return content
    if kind in (ComponentType.IMAGE.value, ComponentType.PREVIEW.value):
        return None
    return content.strip()


def _collect(node: DocumentNode, out: list[str]) -> None:
    if node.is_container:
        for child in node.child_list():
            _collect(child, out)
        return
    text = _leaf_text(node)
    if text:
        out.append(text)


def to_plain_text(tree: DocumentNode) -> str:
    """Return a plain-text rendering of ``tree``.

    Headings are upper-cased, links and buttons become ``text (href)``,
    dividers become a horizontal rule, and inline markup is stripped.
    Images and preview text are omitted.
    """
    paragraphs: list[str] = []
    _collect(tree, paragraphs)
    if not paragraphs:
        return ""
    return "\n\n".join(paragraphs) + "\n"
