"""Node factories used by the block builders.

Thin constructors that put properties into the shape the renderer and
parser agree on: presentation under ``style``, element attributes at the
top level of ``properties``.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from mailblocks.compiler.helpers import format_inline, has_inline_formatting
from mailblocks.nodes.nodes import ComponentType, DocumentNode


def _props(style: dict[str, Any] | None, **attrs: Any) -> dict[str, Any]:
    props: dict[str, Any] = {k: v for k, v in attrs.items() if v is not None}
    if style:
        props["style"] = {k: v for k, v in style.items() if v is not None}
    return props


def section(
    node_id: str, children: Iterable[DocumentNode], style: dict[str, Any] | None = None
) -> DocumentNode:
    return DocumentNode(node_id, ComponentType.SECTION, _props(style), children=tuple(children))


def row(
    node_id: str, children: Iterable[DocumentNode], style: dict[str, Any] | None = None
) -> DocumentNode:
    return DocumentNode(node_id, ComponentType.ROW, _props(style), children=tuple(children))


def column(
    node_id: str, children: Iterable[DocumentNode], style: dict[str, Any] | None = None
) -> DocumentNode:
    return DocumentNode(node_id, ComponentType.COLUMN, _props(style), children=tuple(children))


def text(
    node_id: str,
    content: str,
    style: dict[str, Any] | None = None,
    formatted: bool = False,
) -> DocumentNode:
    """Return a Text leaf; ``formatted`` expands inline emphasis into markup."""
    content = str(content)
    if formatted and has_inline_formatting(content):
        return DocumentNode(
            node_id,
            ComponentType.TEXT,
            _props(style),
            content=format_inline(content),
            inline_markup=True,
        )
    return DocumentNode(node_id, ComponentType.TEXT, _props(style), content=content)


def heading(
    node_id: str, content: str, level: int = 2, style: dict[str, Any] | None = None
) -> DocumentNode:
    level = max(1, min(6, int(level)))
    return DocumentNode(
        node_id, ComponentType.HEADING, _props(style, **{"as": f"h{level}"}), content=str(content)
    )


def button(
    node_id: str, content: str, href: str | None, style: dict[str, Any] | None = None
) -> DocumentNode:
    return DocumentNode(
        node_id, ComponentType.BUTTON, _props(style, href=href or "#"), content=str(content)
    )


def link(
    node_id: str, content: str, href: str | None, style: dict[str, Any] | None = None
) -> DocumentNode:
    return DocumentNode(
        node_id, ComponentType.LINK, _props(style, href=href or "#"), content=str(content)
    )


def image(
    node_id: str,
    src: str,
    alt: str = "",
    width: int | None = None,
    height: int | None = None,
    style: dict[str, Any] | None = None,
) -> DocumentNode:
    return DocumentNode(
        node_id,
        ComponentType.IMAGE,
        _props(style, src=src, alt=alt or "", width=width, height=height),
    )


def divider(node_id: str, style: dict[str, Any] | None = None) -> DocumentNode:
    return DocumentNode(node_id, ComponentType.DIVIDER, _props(style))


def code_block(node_id: str, code: str, style: dict[str, Any] | None = None) -> DocumentNode:
    return DocumentNode(node_id, ComponentType.CODE_BLOCK, _props(style), content=str(code))


def markdown(node_id: str, content: str, style: dict[str, Any] | None = None) -> DocumentNode:
    """Return a Markdown leaf with inline emphasis expanded."""
    return DocumentNode(
        node_id,
        ComponentType.MARKDOWN,
        _props(style),
        content=format_inline(str(content)),
        inline_markup=True,
    )
