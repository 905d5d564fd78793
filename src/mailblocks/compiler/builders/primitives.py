"""Single-purpose blocks: heading, text, link, buttons, image, avatars, code, markdown."""
from __future__ import annotations

from mailblocks.colors.contrast import DEFAULT_COLORS
from mailblocks.compiler import elements as el
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.builders.common import SECTION_STYLE
from mailblocks.compiler.context import BuildContext
from mailblocks.compiler.registry import BlockBuilder, builders
from mailblocks.errors import MissingFieldError
from mailblocks.nodes.nodes import DocumentNode

_COMPACT_STYLE = {"padding": "24px", "backgroundColor": DEFAULT_COLORS["white"]}
_HEADING_SIZES = {1: "32px", 2: "28px", 3: "24px"}


def _heading_style(ctx: BuildContext, level: int, margin: str) -> dict[str, object]:
    return {
        "fontWeight": 700,
        "color": ctx.headline_color(),
        "fontSize": _HEADING_SIZES.get(level, "20px"),
        "lineHeight": "1.3",
        "margin": margin,
        "textAlign": "center",
        "fontFamily": ctx.font,
    }


@builders.register("heading", "simple-heading")
class SimpleHeadingBuilder(BlockBuilder):
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        value = block.get("heading") or block.get("text")
        if not value:
            raise MissingFieldError(
                "Block 'heading' requires field 'heading' or 'text'",
                path="heading",
                kind=block.kind,
                field_name="heading",
            )
        node = el.heading(ctx.ids("main"), value, 1, _heading_style(ctx, 1, "0"))
        return el.section(ctx.ids("section"), [node], SECTION_STYLE)


@builders.register("heading", "multiple-headings")
class MultipleHeadingsBuilder(BlockBuilder):
    """A stack of headings, each ``{"text": ..., "level": 1-3}``."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        headings = [h for h in block.require("headings") if isinstance(h, dict)]
        nodes = []
        for i, entry in enumerate(headings):
            level = entry.get("level") if entry.get("level") in (1, 2, 3) else 1
            nodes.append(el.heading(
                ctx.ids(f"heading-{i}"),
                str(entry.get("text", "")),
                level,
                _heading_style(ctx, level, "0 0 16px 0"),
            ))
        return el.section(ctx.ids("section"), nodes, SECTION_STYLE)


@builders.register("text", "default")
class TextBuilder(BlockBuilder):
    """Optional accented lead line followed by formatted body text."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        nodes: list[DocumentNode] = []
        accented = block.get("accentedText")
        if accented:
            nodes.append(el.text(ctx.ids("accented"), accented, {
                "fontSize": "24px",
                "fontWeight": 600,
                "color": ctx.primary,
                "margin": "0 0 16px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }))
        nodes.append(el.text(ctx.ids("content"), block.require("content"), {
            "fontSize": "16px",
            "lineHeight": "1.6",
            "color": ctx.body_color(),
            "margin": "0",
            "fontFamily": ctx.font,
        }, formatted=ctx.formatted(block, "content")))
        return el.section(ctx.ids("section"), nodes, SECTION_STYLE)


@builders.register("link", "default")
class LinkBuilder(BlockBuilder):
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        label = block.get("text") or block.get("label") or "Link"
        node = el.link(ctx.ids("main"), label, block.require("url"), {
            "color": ctx.primary,
            "textDecoration": "underline",
            "fontSize": "16px",
            "fontFamily": ctx.font,
        })
        return el.section(ctx.ids("section"), [node], _COMPACT_STYLE)


@builders.register("buttons", "default")
class ButtonsBuilder(BlockBuilder):
    """A centered row of primary-colored buttons."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("buttons")
        nodes = [
            el.button(
                ctx.ids(f"button-{i}"),
                str(entry.get("text") or entry.get("label") or "Button"),
                entry.get("url"),
                {
                    "backgroundColor": ctx.primary,
                    "color": DEFAULT_COLORS["white"],
                    "padding": "12px 24px",
                    "borderRadius": "8px",
                    "fontSize": "16px",
                    "fontWeight": 600,
                    "textDecoration": "none",
                    "display": "inline-block",
                    "margin": "0 0 0 12px" if i else "0",
                    "fontFamily": ctx.font,
                },
            )
            for i, entry in enumerate(ctx.items(block, "buttons", 4))
        ]
        return el.section(ctx.ids("section"), nodes, {**SECTION_STYLE, "textAlign": "center"})


@builders.register("image", "default")
class ImageBuilder(BlockBuilder):
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        width = int(block.get("width", 600))
        height = int(block.get("height", 400))
        alt = block.get("alt", "")
        node = el.image(
            ctx.ids("main"),
            ctx.image_src(block.get("imageUrl"), width, height, alt or "Image"),
            alt=alt,
            width=width,
            height=height,
            style={
                "width": "100%",
                "maxWidth": f"{width}px",
                "height": "auto",
                "borderRadius": "8px",
                "display": "block",
                "margin": "0 auto",
            },
        )
        return el.section(ctx.ids("section"), [node], {**_COMPACT_STYLE, "textAlign": "center"})


@builders.register("avatars", "default")
class AvatarsBuilder(BlockBuilder):
    """A centered strip of round avatars."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("avatars")
        nodes = []
        for i, avatar in enumerate(ctx.items(block, "avatars", 8)):
            name = str(avatar.get("name") or "")
            nodes.append(el.image(
                ctx.ids(f"avatar-{i}"),
                ctx.image_src(avatar.get("imageUrl"), 48, 48, name or f"avatar-{i}"),
                alt=name,
                width=48,
                height=48,
                style={
                    "width": "48px",
                    "height": "48px",
                    "borderRadius": "50%",
                    "margin": "0 4px",
                    "display": "inline-block",
                },
            ))
        return el.section(ctx.ids("section"), nodes, {**_COMPACT_STYLE, "textAlign": "center"})


@builders.register("code", "default")
class CodeBuilder(BlockBuilder):
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        node = el.code_block(ctx.ids("content"), block.require("code"), {
            "color": "#e5e7eb",
            "fontSize": "14px",
            "fontFamily": "monospace",
        })
        return el.section(ctx.ids("section"), [node], {"padding": "24px", "backgroundColor": "#1f2937"})


@builders.register("markdown", "default")
class MarkdownBuilder(BlockBuilder):
    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        node = el.markdown(ctx.ids("content"), block.require("content"), {
            "color": ctx.body_color(),
            "fontSize": "16px",
            "lineHeight": "1.6",
            "fontFamily": ctx.font,
        })
        return el.section(ctx.ids("section"), [node], SECTION_STYLE)
