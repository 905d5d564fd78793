"""Framing sections: hero, call to action, header and footer."""
from __future__ import annotations

from typing import Any

from mailblocks.colors.contrast import DEFAULT_COLORS, validate_hex_color
from mailblocks.compiler import elements as el
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.context import BuildContext
from mailblocks.compiler.helpers import bullet_join, is_valid_image_url
from mailblocks.compiler.registry import BlockBuilder, builders
from mailblocks.nodes.nodes import DocumentNode

_BUTTON_BASE: dict[str, Any] = {
    "padding": "16px 40px",
    "borderRadius": "8px",
    "fontSize": "16px",
    "fontWeight": 600,
    "textDecoration": "none",
    "display": "inline-block",
}


# ---------------------------------------------------------------------------
# Hero
# ---------------------------------------------------------------------------


@builders.register("hero", "centered")
class CenteredHeroBuilder(BlockBuilder):
    """Headline, optional subheadline, image and button stacked on the brand color."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        headline = block.require("headline")
        headline_color, sub_color = ctx.hero_colors()
        children = [
            el.heading(ctx.ids("heading"), headline, 1, {
                "color": headline_color,
                "fontSize": "42px",
                "fontWeight": 700,
                "lineHeight": "1.2",
                "margin": "0 0 16px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }),
        ]
        subheadline = block.get("subheadline")
        if subheadline:
            children.append(el.text(ctx.ids("subheading"), subheadline, {
                "color": sub_color,
                "fontSize": "18px",
                "lineHeight": "1.5",
                "margin": "0 0 32px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }))
        children.append(el.image(
            ctx.ids("image"),
            ctx.image_src(block.get("imageUrl"), 600, 400, headline),
            alt=block.get("imageAlt", headline),
            width=600,
            style={
                "width": "100%",
                "maxWidth": "600px",
                "height": "auto",
                "margin": "0 auto 32px",
                "borderRadius": "8px",
                "display": "block",
            },
        ))
        children.append(self._cta(block, ctx))
        return el.section(ctx.ids("section"), children, {
            "backgroundColor": ctx.primary,
            "padding": "60px 24px",
            "textAlign": "center",
        })

    def _cta(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        return el.button(ctx.ids("cta"), block.require("ctaText"), block.require("ctaUrl"), {
            **_BUTTON_BASE,
            "backgroundColor": DEFAULT_COLORS["white"],
            "color": ctx.primary,
            "fontFamily": ctx.font,
        })


@builders.register("hero", "split")
class SplitHeroBuilder(CenteredHeroBuilder):
    """Copy and button on the left, image on the right."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        headline = block.require("headline")
        headline_color, sub_color = ctx.hero_colors()
        copy = [
            el.heading(ctx.ids("heading"), headline, 1, {
                "color": headline_color,
                "fontSize": "36px",
                "fontWeight": 700,
                "lineHeight": "1.2",
                "margin": "0 0 16px 0",
                "textAlign": "left",
                "fontFamily": ctx.font,
            }),
        ]
        subheadline = block.get("subheadline")
        if subheadline:
            copy.append(el.text(ctx.ids("subheading"), subheadline, {
                "color": sub_color,
                "fontSize": "16px",
                "lineHeight": "1.5",
                "margin": "0 0 24px 0",
                "textAlign": "left",
                "fontFamily": ctx.font,
            }))
        copy.append(self._cta(block, ctx))
        picture = el.image(
            ctx.ids("image"),
            ctx.image_src(block.get("imageUrl"), 300, 300, headline),
            alt=block.get("imageAlt", headline),
            width=300,
            height=300,
            style={"width": "100%", "height": "auto", "borderRadius": "8px", "display": "block"},
        )
        columns = [
            el.column(ctx.ids("copy-col"), copy, {
                "width": "50%",
                "verticalAlign": "middle",
                "paddingRight": "16px",
            }),
            el.column(ctx.ids("image-col"), [picture], {"width": "50%", "verticalAlign": "middle"}),
        ]
        return el.section(ctx.ids("section"), [el.row(ctx.ids("row"), columns)], {
            "backgroundColor": ctx.primary,
            "padding": "48px 24px",
        })


# ---------------------------------------------------------------------------
# Call to action
# ---------------------------------------------------------------------------


@builders.register("cta", "primary", "secondary", "outline")
class CtaBuilder(BlockBuilder):
    """Centered headline and a single button in one of three styles."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        background = validate_hex_color(block.get("backgroundColor")) or DEFAULT_COLORS["light_gray"]
        children = [
            el.heading(ctx.ids("heading"), block.require("headline"), 2, {
                "color": ctx.headline_color(background),
                "fontSize": "32px",
                "fontWeight": 700,
                "margin": "0 0 16px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }),
        ]
        subheadline = block.get("subheadline")
        if subheadline:
            children.append(el.text(ctx.ids("subheading"), subheadline, {
                "color": DEFAULT_COLORS["content_subtext"],
                "fontSize": "16px",
                "margin": "0 0 32px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }))

        style: dict[str, Any] = {
            **_BUTTON_BASE,
            "backgroundColor": ctx.primary,
            "color": DEFAULT_COLORS["white"],
            "fontFamily": ctx.font,
        }
        if ctx.variant == "secondary":
            style["backgroundColor"] = ctx.settings.secondary_color or "#374151"
        elif ctx.variant == "outline":
            style["backgroundColor"] = "transparent"
            style["color"] = ctx.primary
            style["border"] = f"2px solid {ctx.primary}"
        children.append(el.button(
            ctx.ids("button"), block.require("buttonText"), block.require("buttonUrl"), style
        ))
        return el.section(ctx.ids("section"), children, {
            "backgroundColor": background,
            "padding": "60px 24px",
            "textAlign": "center",
        })


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------


class _HeaderBuilder(BlockBuilder):
    logo_width = 140

    def _brand(self, block: SemanticBlock, ctx: BuildContext, style: dict[str, Any]) -> list[DocumentNode]:
        logo_url = block.get("logoUrl")
        company = block.get("companyName")
        if is_valid_image_url(logo_url):
            return [el.image(
                ctx.ids("logo"),
                logo_url,
                alt=block.get("logoAlt") or company or "Logo",
                width=self.logo_width,
                style={"maxWidth": f"{self.logo_width}px", "height": "auto", **style},
            )]
        if company:
            return [el.text(ctx.ids("company-name"), company, {
                "fontSize": "24px",
                "fontWeight": 700,
                "color": ctx.primary,
                "margin": "0 0 20px 0",
                "fontFamily": ctx.font,
            })]
        return []

    def _menu(self, block: SemanticBlock, ctx: BuildContext, padding: str) -> list[DocumentNode]:
        links = []
        for i, item in enumerate(ctx.items(block, "menuItems", 6)):
            links.append(el.link(ctx.ids(f"menu-{i}"), item.get("label", ""), item.get("url"), {
                "color": "#666666",
                "textDecoration": "none",
                "fontSize": "14px",
                "fontWeight": 500,
                "padding": padding,
                "fontFamily": ctx.font,
            }))
        return links


@builders.register("header", "centered-menu")
class CenteredMenuHeaderBuilder(_HeaderBuilder):
    """Logo centered above a row of menu links."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        children = self._brand(block, ctx, {"margin": "0 auto 20px", "display": "block"})
        links = self._menu(block, ctx, "0 12px")
        if links:
            children.append(el.row(ctx.ids("menu-row"), [
                el.column(ctx.ids("menu-col"), links, {"textAlign": "center"}),
            ]))
        return el.section(ctx.ids("section"), children, {
            "padding": "40px 24px 32px",
            "textAlign": "center",
        })


@builders.register("header", "side-menu")
class SideMenuHeaderBuilder(_HeaderBuilder):
    """Logo on the left, menu links on the right."""

    logo_width = 120

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        columns = [
            el.column(ctx.ids("logo-col"), self._brand(block, ctx, {}), {
                "width": "40%",
                "verticalAlign": "middle",
            }),
        ]
        links = self._menu(block, ctx, "0 8px")
        if links:
            columns.append(el.column(ctx.ids("menu-col"), links, {
                "width": "60%",
                "verticalAlign": "middle",
                "textAlign": "right",
            }))
        return el.section(ctx.ids("section"), [el.row(ctx.ids("row"), columns)], {
            "padding": "32px 24px",
        })


@builders.register("header", "social-icons")
class SocialIconsHeaderBuilder(_HeaderBuilder):
    """Logo centered above social profile links."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        children = self._brand(block, ctx, {"margin": "0 auto 16px", "display": "block"})
        socials = [
            el.link(
                ctx.ids(f"social-{i}"),
                str(item.get("platform", "")).title(),
                item.get("url"),
                {
                    "color": ctx.primary,
                    "textDecoration": "none",
                    "fontSize": "14px",
                    "padding": "0 8px",
                    "fontFamily": ctx.font,
                },
            )
            for i, item in enumerate(ctx.items(block, "socialLinks", 5))
        ]
        if socials:
            children.append(el.row(ctx.ids("social-row"), [
                el.column(ctx.ids("social-col"), socials, {"textAlign": "center"}),
            ]))
        menu = self._menu(block, ctx, "0 12px")
        if menu:
            children.append(el.row(ctx.ids("menu-row"), [
                el.column(ctx.ids("menu-col"), menu, {"textAlign": "center", "paddingTop": "12px"}),
            ]))
        return el.section(ctx.ids("section"), children, {
            "padding": "32px 24px",
            "textAlign": "center",
        })


# ---------------------------------------------------------------------------
# Footer
# ---------------------------------------------------------------------------


@builders.register("footer", "one-column", "two-column")
class FooterBuilder(BlockBuilder):
    """Copyright line, address, preference/unsubscribe links and credits."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        align = "left" if ctx.variant == "two-column" else "center"
        owner = block.require("companyName")
        notice = f"© {ctx.year} {owner}" if ctx.year is not None else f"© {owner}"
        info = [
            el.text(ctx.ids("company"), f"{notice}. All rights reserved.", {
                "color": DEFAULT_COLORS["footer_text"],
                "fontSize": "14px",
                "margin": "0 0 8px 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }),
        ]
        address = block.get("address")
        if address:
            info.append(el.text(ctx.ids("address"), address, {
                "color": DEFAULT_COLORS["footer_subtext"],
                "fontSize": "12px",
                "margin": "0 0 16px 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }))
        credits = block.items("photoCredits")
        if credits:
            info.append(el.text(ctx.ids("credits"), "Photos: " + bullet_join(credits), {
                "color": DEFAULT_COLORS["footer_subtext"],
                "fontSize": "11px",
                "margin": "0 0 8px 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }))

        link_align = "right" if ctx.variant == "two-column" else "center"
        links = el.column(ctx.ids("links-col"), self._links(block, ctx), {
            "textAlign": link_align,
            "fontSize": "12px",
            "color": DEFAULT_COLORS["footer_subtext"],
        })
        if ctx.variant == "two-column":
            body = [el.row(ctx.ids("row"), [
                el.column(ctx.ids("info-col"), info, {"width": "50%", "verticalAlign": "top"}),
                el.column(ctx.ids("nav-col"), [el.row(ctx.ids("links"), [links])], {
                    "width": "50%",
                    "verticalAlign": "top",
                }),
            ])]
        else:
            body = [*info, el.row(ctx.ids("links"), [links])]
        return el.section(ctx.ids("section"), body, {
            "backgroundColor": DEFAULT_COLORS["light_gray"],
            "padding": "32px 24px",
            "borderTop": "1px solid #e5e7eb",
        })

    def _links(self, block: SemanticBlock, ctx: BuildContext) -> list[DocumentNode]:
        entries: list[tuple[str, str, Any]] = []
        if block.get("preferenceUrl"):
            entries.append(("preferences", "Preferences", block.get("preferenceUrl")))
        entries.append(("unsubscribe", "Unsubscribe", block.require("unsubscribeUrl")))
        for i, extra in enumerate(ctx.items(block, "additionalLinks", 5)):
            entries.append((f"link-{i}", extra.get("text", ""), extra.get("url")))
        for social in block.items("socialLinks")[:5]:
            platform = str(social.get("platform", ""))
            entries.append((f"social-{platform}", platform.title(), social.get("url")))

        nodes: list[DocumentNode] = []
        link_style = {
            "color": DEFAULT_COLORS["footer_text"],
            "textDecoration": "underline",
            "margin": "0 4px",
        }
        for i, (name, label, href) in enumerate(entries):
            if i:
                nodes.append(el.text(ctx.ids("separator"), " • ", {
                    "color": DEFAULT_COLORS["footer_subtext"],
                    "fontSize": "12px",
                    "margin": "0 4px",
                    "display": "inline",
                }))
            nodes.append(el.link(ctx.ids(name), label, href, link_style))
        return nodes
