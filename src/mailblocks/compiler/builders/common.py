"""Pieces shared by several builders."""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, TypeVar

from mailblocks.colors.contrast import DEFAULT_COLORS
from mailblocks.compiler import elements as el
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.context import BuildContext
from mailblocks.nodes.nodes import DocumentNode

T = TypeVar("T")

SECTION_STYLE: dict[str, Any] = {"padding": "48px 24px", "backgroundColor": DEFAULT_COLORS["white"]}


def intro(
    block: SemanticBlock,
    ctx: BuildContext,
    align: str = "center",
    size: str = "32px",
) -> list[DocumentNode]:
    """Return the optional ``heading`` / ``subheading`` nodes of a block."""
    nodes: list[DocumentNode] = []
    heading = block.get("heading")
    if heading:
        nodes.append(el.heading(ctx.ids("heading"), heading, 2, {
            "color": ctx.headline_color(),
            "fontSize": size,
            "fontWeight": 700,
            "margin": "0 0 16px 0",
            "textAlign": align,
            "fontFamily": ctx.font,
        }))
    subheading = block.get("subheading")
    if subheading:
        nodes.append(el.text(ctx.ids("subheading"), subheading, {
            "color": ctx.body_color(fallback=DEFAULT_COLORS["content_subtext"]),
            "fontSize": "16px",
            "margin": "0 0 40px 0",
            "textAlign": align,
            "fontFamily": ctx.font,
        }))
    return nodes


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """Split ``items`` into consecutive lists of at most ``size`` entries."""
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def title_text(ctx: BuildContext, name: str, value: str, align: str = "center") -> DocumentNode:
    return el.heading(ctx.ids(name), value, 3, {
        "color": DEFAULT_COLORS["content_headline"],
        "fontSize": "20px",
        "fontWeight": 600,
        "margin": "0 0 8px 0",
        "textAlign": align,
        "fontFamily": ctx.font,
    })


def body_text(ctx: BuildContext, name: str, value: str, align: str = "center") -> DocumentNode:
    return el.text(ctx.ids(name), value, {
        "color": DEFAULT_COLORS["content_subtext"],
        "fontSize": "14px",
        "lineHeight": "1.5",
        "margin": "0",
        "textAlign": align,
        "fontFamily": ctx.font,
    })


def number_badge(ctx: BuildContext, name: str, number: int) -> DocumentNode:
    return el.text(ctx.ids(name), str(number), {
        "width": "24px",
        "height": "24px",
        "borderRadius": "50%",
        "backgroundColor": ctx.primary,
        "color": DEFAULT_COLORS["white"],
        "fontSize": "12px",
        "fontWeight": 600,
        "lineHeight": "24px",
        "textAlign": "center",
        "display": "inline-block",
    })


def primary_button(ctx: BuildContext, name: str, label: str, href: str | None) -> DocumentNode:
    return el.button(ctx.ids(name), label, href, {
        "backgroundColor": ctx.primary,
        "color": DEFAULT_COLORS["white"],
        "padding": "12px 24px",
        "borderRadius": "8px",
        "fontSize": "14px",
        "fontWeight": 600,
        "textDecoration": "none",
        "display": "inline-block",
        "fontFamily": ctx.font,
    })
