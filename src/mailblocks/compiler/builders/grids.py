"""Multi-item layouts: features, gallery, stats, pricing, ecommerce and marketing."""
from __future__ import annotations

from typing import Any

from mailblocks.colors.contrast import DEFAULT_COLORS, get_safe_text_color
from mailblocks.compiler import elements as el
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.builders.common import (
    SECTION_STYLE,
    body_text,
    chunk,
    intro,
    number_badge,
    primary_button,
    title_text,
)
from mailblocks.compiler.context import BuildContext
from mailblocks.compiler.helpers import bullet_join, fan_out_width, is_valid_image_url
from mailblocks.compiler.registry import BlockBuilder, builders
from mailblocks.nodes.nodes import DocumentNode


def _card_image(
    ctx: BuildContext, name: str, item: dict[str, Any], width: int, height: int, seed_key: str
) -> DocumentNode:
    seed = str(item.get(seed_key) or item.get("alt") or name)
    return el.image(
        ctx.ids(name),
        ctx.image_src(item.get("imageUrl") or item.get("url"), width, height, seed),
        alt=str(item.get("imageAlt") or item.get("alt") or item.get(seed_key) or ""),
        width=width,
        height=height,
        style={
            "width": "100%",
            "height": "auto",
            "borderRadius": "8px",
            "display": "block",
            "margin": "0 0 12px 0",
        },
    )


# ---------------------------------------------------------------------------
# Features
# ---------------------------------------------------------------------------


class _FeaturesBuilder(BlockBuilder):
    def features(self, block: SemanticBlock, ctx: BuildContext) -> list[dict[str, Any]]:
        block.require("features")
        return ctx.items(block, "features", 4)

    def icon(self, ctx: BuildContext, i: int, feature: dict[str, Any], always: bool) -> list[DocumentNode]:
        url = feature.get("imageUrl")
        if not always and not is_valid_image_url(url):
            return []
        return [el.image(
            ctx.ids(f"feature-{i}-icon"),
            ctx.image_src(url, 48, 48, str(feature.get("title", f"feature-{i}"))),
            alt=str(feature.get("title", "")),
            width=48,
            height=48,
            style={"width": "48px", "height": "48px", "margin": "0 auto 16px", "display": "block"},
        )]

    def wrap(self, block: SemanticBlock, ctx: BuildContext, body: list[DocumentNode]) -> DocumentNode:
        return el.section(ctx.ids("section"), [*intro(block, ctx), *body], SECTION_STYLE)


@builders.register("features", "grid", "icons-centered")
class FeatureGridBuilder(_FeaturesBuilder):
    """Features side by side in one row, widths fanned out by count."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        features = self.features(block, ctx)
        width = fan_out_width(len(features))
        always_icon = ctx.variant == "icons-centered"
        columns = [
            el.column(
                ctx.ids(f"feature-{i}-col"),
                [
                    *self.icon(ctx, i, feature, always_icon),
                    title_text(ctx, f"feature-{i}-title", feature.get("title", "")),
                    body_text(ctx, f"feature-{i}-desc", feature.get("description", "")),
                ],
                {"width": width, "padding": "16px", "verticalAlign": "top"},
            )
            for i, feature in enumerate(features)
        ]
        return self.wrap(block, ctx, [el.row(ctx.ids("row"), columns)])


@builders.register("features", "icons-2col")
class FeatureTwoColumnBuilder(_FeaturesBuilder):
    """Features with icons, two per row."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        features = self.features(block, ctx)
        rows = []
        for r, pair in enumerate(chunk(list(enumerate(features)), 2)):
            columns = [
                el.column(
                    ctx.ids(f"feature-{i}-col"),
                    [
                        *self.icon(ctx, i, feature, True),
                        title_text(ctx, f"feature-{i}-title", feature.get("title", ""), "left"),
                        body_text(ctx, f"feature-{i}-desc", feature.get("description", ""), "left"),
                    ],
                    {"width": "50%", "padding": "16px", "verticalAlign": "top"},
                )
                for i, feature in pair
            ]
            rows.append(el.row(ctx.ids(f"row-{r}"), columns))
        return self.wrap(block, ctx, rows)


@builders.register("features", "list")
class FeatureListBuilder(_FeaturesBuilder):
    """Features stacked vertically, separated by dividers."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        body: list[DocumentNode] = []
        for i, feature in enumerate(self.features(block, ctx)):
            if i:
                body.append(el.divider(ctx.ids(f"feature-{i}-divider"), {
                    "borderColor": "#e5e7eb",
                    "margin": "16px 0",
                }))
            body.append(el.row(ctx.ids(f"feature-{i}-row"), [
                el.column(ctx.ids(f"feature-{i}-col"), [
                    title_text(ctx, f"feature-{i}-title", feature.get("title", ""), "left"),
                    body_text(ctx, f"feature-{i}-desc", feature.get("description", ""), "left"),
                ]),
            ]))
        return self.wrap(block, ctx, body)


@builders.register("features", "numbered")
class FeatureNumberedBuilder(_FeaturesBuilder):
    """Features stacked with a numbered badge beside each one."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        rows = [
            el.row(ctx.ids(f"feature-{i}-row"), [
                el.column(ctx.ids(f"feature-{i}-number-col"), [
                    number_badge(ctx, f"feature-{i}-number", i + 1),
                ], {"width": "24px", "paddingRight": "18px", "verticalAlign": "top"}),
                el.column(ctx.ids(f"feature-{i}-col"), [
                    title_text(ctx, f"feature-{i}-title", feature.get("title", ""), "left"),
                    body_text(ctx, f"feature-{i}-desc", feature.get("description", ""), "left"),
                ], {"verticalAlign": "top", "paddingBottom": "24px"}),
            ])
            for i, feature in enumerate(self.features(block, ctx))
        ]
        return self.wrap(block, ctx, rows)


# ---------------------------------------------------------------------------
# Gallery
# ---------------------------------------------------------------------------


@builders.register("gallery", "grid-2x2", "3-column")
class GalleryGridBuilder(BlockBuilder):
    """Images in rows of two (grid-2x2) or three (3-column)."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("images")
        per_row = 3 if ctx.variant == "3-column" else 2
        limit = 6 if per_row == 3 else 4
        images = ctx.items(block, "images", limit)
        width = fan_out_width(per_row)
        rows = [
            el.row(ctx.ids(f"row-{r}"), [
                el.column(ctx.ids(f"image-{r * per_row + c}-col"), [
                    _card_image(ctx, f"image-{r * per_row + c}", item, 300 if per_row == 2 else 200, 200, "alt"),
                ], {"width": width, "padding": "8px"})
                for c, item in enumerate(group)
            ])
            for r, group in enumerate(chunk(images, per_row))
        ]
        return el.section(ctx.ids("section"), [*intro(block, ctx), *rows], SECTION_STYLE)


@builders.register("gallery", "horizontal-split")
class GalleryHorizontalSplitBuilder(BlockBuilder):
    """One wide image above two side-by-side images."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        images = ctx.required_items(block, "images", 3)
        body: list[DocumentNode] = [
            el.row(ctx.ids("row-0"), [
                el.column(ctx.ids("image-0-col"), [
                    _card_image(ctx, "image-0", images[0], 600, 300, "alt"),
                ], {"padding": "8px"}),
            ]),
        ]
        rest = images[1:]
        if rest:
            body.append(el.row(ctx.ids("row-1"), [
                el.column(ctx.ids(f"image-{i}-col"), [
                    _card_image(ctx, f"image-{i}", item, 300, 200, "alt"),
                ], {"width": "50%" if len(rest) == 2 else "100%", "padding": "8px"})
                for i, item in enumerate(rest, start=1)
            ]))
        return el.section(ctx.ids("section"), [*intro(block, ctx), *body], SECTION_STYLE)


@builders.register("gallery", "vertical-split")
class GalleryVerticalSplitBuilder(BlockBuilder):
    """One tall image beside a column of two stacked images."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        images = ctx.required_items(block, "images", 3)
        columns = [
            el.column(ctx.ids("image-0-col"), [
                _card_image(ctx, "image-0", images[0], 300, 416, "alt"),
            ], {"width": "50%", "padding": "8px", "verticalAlign": "top"}),
        ]
        if len(images) > 1:
            columns.append(el.column(ctx.ids("stack-col"), [
                _card_image(ctx, f"image-{i}", item, 300, 200, "alt")
                for i, item in enumerate(images[1:], start=1)
            ], {"width": "50%", "padding": "8px", "verticalAlign": "top"}))
        body = [el.row(ctx.ids("row"), columns)]
        return el.section(ctx.ids("section"), [*intro(block, ctx), *body], SECTION_STYLE)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------


def _stat_nodes(ctx: BuildContext, i: int, stat: dict[str, Any], align: str) -> list[DocumentNode]:
    nodes = [
        el.heading(ctx.ids(f"stat-{i}-value"), str(stat.get("value", "")), 2, {
            "color": ctx.primary,
            "fontSize": "36px",
            "fontWeight": 700,
            "margin": "0 0 4px 0",
            "textAlign": align,
            "fontFamily": ctx.font,
        }),
        el.text(ctx.ids(f"stat-{i}-label"), str(stat.get("label", "")), {
            "color": DEFAULT_COLORS["content_headline"],
            "fontSize": "16px",
            "fontWeight": 600,
            "margin": "0",
            "textAlign": align,
            "fontFamily": ctx.font,
        }),
    ]
    if stat.get("description"):
        nodes.append(body_text(ctx, f"stat-{i}-desc", stat["description"], align))
    return nodes


@builders.register("stats", "simple")
class StatsSimpleBuilder(BlockBuilder):
    """Figures side by side in one row."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("stats")
        stats = ctx.items(block, "stats", 4)
        width = fan_out_width(len(stats))
        columns = [
            el.column(ctx.ids(f"stat-{i}-col"), _stat_nodes(ctx, i, stat, "center"), {
                "width": width,
                "padding": "16px",
                "verticalAlign": "top",
            })
            for i, stat in enumerate(stats)
        ]
        return el.section(
            ctx.ids("section"), [*intro(block, ctx), el.row(ctx.ids("row"), columns)], SECTION_STYLE
        )


@builders.register("stats", "stepped")
class StatsSteppedBuilder(BlockBuilder):
    """Figures stacked as steps, each marked by a brand-colored rule."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("stats")
        rows = [
            el.row(ctx.ids(f"stat-{i}-row"), [
                el.column(ctx.ids(f"stat-{i}-col"), _stat_nodes(ctx, i, stat, "left"), {
                    "borderLeft": f"4px solid {ctx.primary}",
                    "paddingLeft": f"{16 + 24 * i}px",
                    "paddingBottom": "24px",
                }),
            ])
            for i, stat in enumerate(ctx.items(block, "stats", 4))
        ]
        return el.section(ctx.ids("section"), [*intro(block, ctx, align="left"), *rows], SECTION_STYLE)


# ---------------------------------------------------------------------------
# Pricing
# ---------------------------------------------------------------------------


@builders.register("pricing", "simple", "two-tier")
class PricingBuilder(BlockBuilder):
    """Plan cards side by side; two-tier shows at most two, highlighting one."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("plans")
        plans = ctx.items(block, "plans", 2 if ctx.variant == "two-tier" else 3)
        width = "100%" if len(plans) == 1 else fan_out_width(len(plans))
        columns = [
            el.column(ctx.ids(f"plan-{i}-col"), self._plan(ctx, i, plan), {
                "width": width,
                "padding": "8px",
                "verticalAlign": "top",
            })
            for i, plan in enumerate(plans)
        ]
        return el.section(
            ctx.ids("section"), [*intro(block, ctx), el.row(ctx.ids("row"), columns)], SECTION_STYLE
        )

    def _plan(self, ctx: BuildContext, i: int, plan: dict[str, Any]) -> list[DocumentNode]:
        highlighted = bool(plan.get("highlighted")) and ctx.variant == "two-tier"
        background = ctx.primary if highlighted else DEFAULT_COLORS["light_gray"]
        fg = get_safe_text_color(background) if highlighted else DEFAULT_COLORS["content_headline"]
        price = str(plan.get("price", ""))
        if plan.get("interval"):
            price = f"{price} / {plan['interval']}"
        card = [
            el.heading(ctx.ids(f"plan-{i}-name"), str(plan.get("name", "")), 3, {
                "color": fg,
                "fontSize": "20px",
                "fontWeight": 600,
                "margin": "0 0 8px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }),
            el.text(ctx.ids(f"plan-{i}-price"), price, {
                "color": fg,
                "fontSize": "28px",
                "fontWeight": 700,
                "margin": "0 0 12px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }),
        ]
        if plan.get("description"):
            card.append(body_text(ctx, f"plan-{i}-desc", plan["description"]))
        features = plan.get("features") or []
        if features:
            card.append(el.text(ctx.ids(f"plan-{i}-features"), bullet_join(features[:10]), {
                "color": fg,
                "fontSize": "14px",
                "lineHeight": "1.6",
                "margin": "12px 0 16px 0",
                "textAlign": "center",
                "fontFamily": ctx.font,
            }))
        card.append(primary_button(
            ctx, f"plan-{i}-cta", str(plan.get("ctaText", "Choose plan")), plan.get("ctaUrl")
        ))
        return [el.section(ctx.ids(f"plan-{i}"), card, {
            "backgroundColor": background,
            "borderRadius": "8px",
            "padding": "24px",
            "textAlign": "center",
        })]


# ---------------------------------------------------------------------------
# Ecommerce
# ---------------------------------------------------------------------------


def _product_details(ctx: BuildContext, i: int, product: dict[str, Any], align: str) -> list[DocumentNode]:
    nodes = [title_text(ctx, f"product-{i}-name", str(product.get("name", "")), align)]
    if product.get("description"):
        nodes.append(body_text(ctx, f"product-{i}-desc", product["description"], align))
    nodes.append(el.text(ctx.ids(f"product-{i}-price"), str(product.get("price", "")), {
        "color": ctx.primary,
        "fontSize": "18px",
        "fontWeight": 700,
        "margin": "8px 0 12px 0",
        "textAlign": align,
        "fontFamily": ctx.font,
    }))
    nodes.append(primary_button(
        ctx, f"product-{i}-cta", str(product.get("ctaText", "Shop now")), product.get("ctaUrl")
    ))
    return nodes


def _product_image(ctx: BuildContext, i: int, product: dict[str, Any], size: int) -> DocumentNode:
    return _card_image(ctx, f"product-{i}-image", product, size, size, "name")


@builders.register("ecommerce", "single")
class ProductSingleBuilder(BlockBuilder):
    """One product with a large image."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        product = ctx.required_items(block, "products", 1)[0]
        body = [_product_image(ctx, 0, product, 552), *_product_details(ctx, 0, product, "center")]
        return el.section(ctx.ids("section"), [*intro(block, ctx), *body], SECTION_STYLE)


@builders.register("ecommerce", "image-left")
class ProductImageLeftBuilder(BlockBuilder):
    """Products stacked, each with its image to the left of the details."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("products")
        rows = [
            el.row(ctx.ids(f"product-{i}-row"), [
                el.column(ctx.ids(f"product-{i}-image-col"), [_product_image(ctx, i, product, 220)], {
                    "width": "40%",
                    "paddingRight": "24px",
                    "verticalAlign": "top",
                }),
                el.column(ctx.ids(f"product-{i}-col"), _product_details(ctx, i, product, "left"), {
                    "width": "60%",
                    "verticalAlign": "top",
                    "paddingBottom": "24px",
                }),
            ])
            for i, product in enumerate(ctx.items(block, "products", 4))
        ]
        return el.section(ctx.ids("section"), [*intro(block, ctx), *rows], SECTION_STYLE)


@builders.register("ecommerce", "3-column", "4-grid")
class ProductGridBuilder(BlockBuilder):
    """Product cards in one row of three or a two-by-two grid."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("products")
        per_row = 3 if ctx.variant == "3-column" else 2
        products = ctx.items(block, "products", 3 if per_row == 3 else 4)
        width = fan_out_width(per_row)
        rows = [
            el.row(ctx.ids(f"row-{r}"), [
                el.column(ctx.ids(f"product-{i}-col"), [
                    _product_image(ctx, i, product, 180 if per_row == 3 else 260),
                    *_product_details(ctx, i, product, "center"),
                ], {"width": width, "padding": "8px", "verticalAlign": "top"})
                for i, product in group
            ])
            for r, group in enumerate(chunk(list(enumerate(products)), per_row))
        ]
        return el.section(ctx.ids("section"), [*intro(block, ctx), *rows], SECTION_STYLE)


@builders.register("ecommerce", "checkout")
class CheckoutBuilder(BlockBuilder):
    """Order summary lines followed by a single checkout button."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        products = ctx.required_items(block, "products", 4)
        rows = [
            el.row(ctx.ids(f"line-{i}"), [
                el.column(ctx.ids(f"line-{i}-image-col"), [_product_image(ctx, i, product, 64)], {
                    "width": "64px",
                    "paddingRight": "16px",
                }),
                el.column(ctx.ids(f"line-{i}-name-col"), [
                    title_text(ctx, f"product-{i}-name", str(product.get("name", "")), "left"),
                ], {"verticalAlign": "middle"}),
                el.column(ctx.ids(f"line-{i}-price-col"), [
                    el.text(ctx.ids(f"product-{i}-price"), str(product.get("price", "")), {
                        "color": DEFAULT_COLORS["content_headline"],
                        "fontSize": "16px",
                        "fontWeight": 600,
                        "margin": "0",
                        "textAlign": "right",
                        "fontFamily": ctx.font,
                    }),
                ], {"width": "25%", "verticalAlign": "middle"}),
            ], {"borderBottom": "1px solid #e5e7eb"})
            for i, product in enumerate(products)
        ]
        label = block.get("ctaText", "Complete your purchase")
        href = block.get("ctaUrl") or products[0].get("ctaUrl")
        checkout = el.section(ctx.ids("checkout"), [primary_button(ctx, "checkout-button", label, href)], {
            "padding": "24px 0 0 0",
            "textAlign": "center",
        })
        return el.section(ctx.ids("section"), [*intro(block, ctx, align="left"), *rows, checkout], SECTION_STYLE)


# ---------------------------------------------------------------------------
# Marketing
# ---------------------------------------------------------------------------


@builders.register("marketing", "bento-grid")
class BentoGridBuilder(BlockBuilder):
    """A featured tile above a two-by-two grid of smaller tiles."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("items")
        body: list[DocumentNode] = []
        featured = block.get("featuredItem")
        if isinstance(featured, dict) and featured.get("title"):
            body.append(el.section(ctx.ids("featured"), self._tile(ctx, "featured", featured, 552, 280), {
                "backgroundColor": DEFAULT_COLORS["light_gray"],
                "borderRadius": "8px",
                "padding": "24px",
                "margin": "0 0 16px 0",
            }))
        items = ctx.items(block, "items", 4)
        for r, group in enumerate(chunk(list(enumerate(items)), 2)):
            body.append(el.row(ctx.ids(f"row-{r}"), [
                el.column(ctx.ids(f"item-{i}-col"), self._tile(ctx, f"item-{i}", item, 260, 180), {
                    "width": "50%",
                    "padding": "8px",
                    "verticalAlign": "top",
                    "backgroundColor": DEFAULT_COLORS["light_gray"],
                })
                for i, item in group
            ]))
        return el.section(ctx.ids("section"), [*intro(block, ctx), *body], SECTION_STYLE)

    def _tile(
        self, ctx: BuildContext, name: str, item: dict[str, Any], width: int, height: int
    ) -> list[DocumentNode]:
        nodes = [
            _card_image(ctx, f"{name}-image", item, width, height, "title"),
            title_text(ctx, f"{name}-title", str(item.get("title", "")), "left"),
        ]
        if item.get("description"):
            nodes.append(body_text(ctx, f"{name}-desc", item["description"], "left"))
        if item.get("ctaUrl"):
            nodes.append(el.link(ctx.ids(f"{name}-link"), str(item.get("ctaText") or "Learn more →"), item["ctaUrl"], {
                "color": ctx.primary,
                "fontSize": "14px",
                "fontWeight": 600,
                "textDecoration": "none",
                "display": "block",
                "marginTop": "12px",
                "fontFamily": ctx.font,
            }))
        return nodes
