"""Editorial layouts: content, article, articles, list, testimonial and feedback."""
from __future__ import annotations

from typing import Any

from mailblocks.colors.contrast import DEFAULT_COLORS
from mailblocks.compiler import elements as el
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.builders.common import (
    SECTION_STYLE,
    body_text,
    intro,
    number_badge,
    primary_button,
    title_text,
)
from mailblocks.compiler.context import BuildContext
from mailblocks.compiler.helpers import bullet_join, star_rating
from mailblocks.compiler.registry import BlockBuilder, builders
from mailblocks.nodes.nodes import DocumentNode

_LINK_STYLE: dict[str, Any] = {
    "marginTop": "12px",
    "display": "block",
    "fontSize": "14px",
    "fontWeight": 600,
    "textDecoration": "none",
}


# ---------------------------------------------------------------------------
# Content
# ---------------------------------------------------------------------------


@builders.register("content", "top", "bottom", "left", "right")
class ContentBuilder(BlockBuilder):
    """Heading and formatted paragraphs with an optional image.

    The variant is the image position: above or below the paragraphs, or
    beside them on the left or right.
    """

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        paragraphs = [p for p in block.require("paragraphs") if p]
        formatted = ctx.formatted(block, "paragraphs")
        children: list[DocumentNode] = []
        heading = block.get("heading")
        if heading:
            children.append(el.heading(ctx.ids("heading"), heading, 2, {
                "color": ctx.headline_color(),
                "fontSize": "28px",
                "fontWeight": 700,
                "margin": "0 0 24px 0",
                "fontFamily": ctx.font,
            }))

        body_color = ctx.body_color()
        texts = [
            el.text(ctx.ids(f"para-{i}"), paragraph, {
                "color": body_color,
                "fontSize": "16px",
                "lineHeight": "1.6",
                "margin": "0" if i == len(paragraphs) - 1 else "0 0 16px 0",
                "fontFamily": ctx.font,
            }, formatted=formatted)
            for i, paragraph in enumerate(paragraphs)
        ]

        has_image = bool(block.get("imageUrl") or block.get("imageKeyword"))
        if not has_image:
            children.extend(texts)
        elif ctx.variant in ("left", "right"):
            picture = self._image(block, ctx, 240, 240, {})
            image_col = el.column(ctx.ids("image-col"), [picture], {
                "width": "40%",
                "verticalAlign": "top",
                "paddingRight" if ctx.variant == "left" else "paddingLeft": "24px",
            })
            text_col = el.column(ctx.ids("text-col"), texts, {"width": "60%", "verticalAlign": "top"})
            cols = [image_col, text_col] if ctx.variant == "left" else [text_col, image_col]
            children.append(el.row(ctx.ids("row"), cols))
        elif ctx.variant == "bottom":
            children.extend(texts)
            children.append(self._image(block, ctx, 600, 400, {"margin": "24px 0 0 0"}))
        else:
            children.append(self._image(block, ctx, 600, 400, {"margin": "0 0 24px 0"}))
            children.extend(texts)
        return el.section(ctx.ids("section"), children, SECTION_STYLE)

    def _image(
        self, block: SemanticBlock, ctx: BuildContext, width: int, height: int, style: dict[str, Any]
    ) -> DocumentNode:
        seed = block.get("heading") or block.get("imageKeyword") or "content"
        return el.image(
            ctx.ids("image"),
            ctx.image_src(block.get("imageUrl"), width, height, seed),
            alt=block.get("imageAlt", ""),
            width=width,
            style={"width": "100%", "maxWidth": f"{width}px", "height": "auto", "borderRadius": "8px", **style},
        )


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------


class _ArticleBuilder(BlockBuilder):
    def copy(
        self,
        ctx: BuildContext,
        name: str,
        article: dict[str, Any],
        color: str | None = None,
        align: str = "left",
    ) -> list[DocumentNode]:
        headline_color = color or ctx.headline_color()
        nodes: list[DocumentNode] = []
        if article.get("eyebrow"):
            nodes.append(el.text(ctx.ids(f"{name}eyebrow"), str(article["eyebrow"]).upper(), {
                "color": color or ctx.primary,
                "fontSize": "12px",
                "fontWeight": 700,
                "letterSpacing": "1px",
                "margin": "0 0 8px 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }))
        nodes.append(el.heading(ctx.ids(f"{name}headline"), str(article.get("headline", "")), 2, {
            "color": headline_color,
            "fontSize": "28px",
            "fontWeight": 700,
            "lineHeight": "1.3",
            "margin": "0 0 12px 0",
            "textAlign": align,
            "fontFamily": ctx.font,
        }))
        if article.get("excerpt"):
            nodes.append(el.text(ctx.ids(f"{name}excerpt"), str(article["excerpt"]), {
                "color": color or ctx.body_color(),
                "fontSize": "16px",
                "lineHeight": "1.6",
                "margin": "0 0 16px 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }))
        if article.get("ctaUrl"):
            nodes.append(primary_button(
                ctx, f"{name}cta", str(article.get("ctaText") or "Read more"), article["ctaUrl"]
            ))
        return nodes

    def picture(
        self, ctx: BuildContext, name: str, article: dict[str, Any], width: int, height: int
    ) -> DocumentNode:
        seed = str(article.get("headline") or article.get("imageKeyword") or "article")
        return el.image(
            ctx.ids(f"{name}image"),
            ctx.image_src(article.get("imageUrl"), width, height, seed),
            alt=str(article.get("imageAlt") or article.get("headline") or ""),
            width=width,
            height=height,
            style={
                "width": "100%",
                "height": "auto",
                "borderRadius": "8px",
                "display": "block",
                "margin": "0 0 24px 0",
            },
        )

    def author_row(self, ctx: BuildContext, name: str, author: dict[str, Any]) -> DocumentNode:
        details = [el.text(ctx.ids(f"{name}name"), str(author.get("name", "")), {
            "color": DEFAULT_COLORS["content_headline"],
            "fontSize": "14px",
            "fontWeight": 600,
            "margin": "0",
            "fontFamily": ctx.font,
        })]
        if author.get("title"):
            details.append(body_text(ctx, f"{name}title", str(author["title"]), "left"))
        socials = author.get("socialLinks") or []
        for j, social in enumerate(socials[:2]):
            details.append(el.link(
                ctx.ids(f"{name}social-{j}"),
                str(social.get("platform", "")).title(),
                social.get("url"),
                {"color": ctx.primary, "fontSize": "12px", "margin": "0 8px 0 0", "fontFamily": ctx.font},
            ))
        avatar = el.image(
            ctx.ids(f"{name}avatar"),
            ctx.image_src(author.get("imageUrl"), 48, 48, str(author.get("name") or "author")),
            alt=str(author.get("name", "")),
            width=48,
            height=48,
            style={"width": "48px", "height": "48px", "borderRadius": "50%", "display": "block"},
        )
        return el.row(ctx.ids(f"{name}row"), [
            el.column(ctx.ids(f"{name}avatar-col"), [avatar], {"width": "64px", "verticalAlign": "middle"}),
            el.column(ctx.ids(f"{name}details-col"), details, {"verticalAlign": "middle"}),
        ], {"marginTop": "24px"})


@builders.register("article", "image-top", "single-author")
class ArticleImageTopBuilder(_ArticleBuilder):
    """Full-width image above the article copy; single-author adds a byline."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("headline")
        article = block.fields
        children = [self.picture(ctx, "", article, 600, 300), *self.copy(ctx, "", article)]
        author = block.get("author")
        if ctx.variant == "single-author" and isinstance(author, dict):
            children.append(self.author_row(ctx, "author-", author))
        return el.section(ctx.ids("section"), children, SECTION_STYLE)


@builders.register("article", "image-right")
class ArticleImageRightBuilder(_ArticleBuilder):
    """Article copy on the left, image on the right."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("headline")
        article = block.fields
        row = el.row(ctx.ids("row"), [
            el.column(ctx.ids("copy-col"), self.copy(ctx, "", article), {
                "width": "60%",
                "paddingRight": "24px",
                "verticalAlign": "top",
            }),
            el.column(ctx.ids("image-col"), [self.picture(ctx, "", article, 240, 240)], {
                "width": "40%",
                "verticalAlign": "top",
            }),
        ])
        return el.section(ctx.ids("section"), [row], SECTION_STYLE)


@builders.register("article", "image-background")
class ArticleImageBackgroundBuilder(_ArticleBuilder):
    """Article copy in white over a darkened background image."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        headline = block.require("headline")
        src = ctx.image_src(block.get("imageUrl"), 600, 400, headline)
        return el.section(ctx.ids("section"), self.copy(ctx, "", block.fields, DEFAULT_COLORS["white"], "center"), {
            "backgroundColor": DEFAULT_COLORS["content_headline"],
            "backgroundImage": f"url({src})",
            "backgroundSize": "cover",
            "backgroundPosition": "center",
            "padding": "80px 32px",
            "textAlign": "center",
        })


@builders.register("article", "two-cards")
class ArticleTwoCardsBuilder(_ArticleBuilder):
    """Two article cards side by side, taken from ``cards`` or the block itself."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("headline")
        cards = [c for c in ctx.items(block, "cards", 2) if isinstance(c, dict)] or [block.fields]
        width = "50%" if len(cards) == 2 else "100%"
        row = el.row(ctx.ids("row"), [
            el.column(ctx.ids(f"card-{i}-col"), [
                self.picture(ctx, f"card-{i}-", card, 276, 180),
                *self.copy(ctx, f"card-{i}-", card),
            ], {"width": width, "padding": "8px", "verticalAlign": "top"})
            for i, card in enumerate(cards)
        ])
        return el.section(ctx.ids("section"), [row], SECTION_STYLE)


@builders.register("article", "multiple-authors")
class ArticleMultipleAuthorsBuilder(_ArticleBuilder):
    """Article copy followed by a byline per author."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("headline")
        authors = [a for a in ctx.items(block, "authors", 4) if isinstance(a, dict)]
        single = block.get("author")
        if not authors and isinstance(single, dict):
            authors = [single]
        children = self.copy(ctx, "", block.fields)
        children.extend(self.author_row(ctx, f"author-{i}-", author) for i, author in enumerate(authors))
        return el.section(ctx.ids("section"), children, SECTION_STYLE)


# ---------------------------------------------------------------------------
# Articles
# ---------------------------------------------------------------------------


@builders.register("articles", "stacked")
class ArticlesBuilder(BlockBuilder):
    """A digest of article cards, one below the other."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        articles = [a for a in block.require("articles") if isinstance(a, dict)]
        cards = []
        for i, article in enumerate(articles):
            card: list[DocumentNode] = []
            if article.get("imageUrl"):
                card.append(el.image(
                    ctx.ids(f"article-{i}-image"),
                    ctx.image_src(article["imageUrl"], 552, 240, str(article.get("headline") or f"article-{i}")),
                    alt=str(article.get("headline", "")),
                    width=552,
                    height=240,
                    style={"width": "100%", "height": "auto", "borderRadius": "8px", "margin": "0 0 16px 0"},
                ))
            card.append(title_text(ctx, f"article-{i}-headline", str(article.get("headline", "")), "left"))
            card.append(body_text(ctx, f"article-{i}-excerpt", str(article.get("excerpt", "")), "left"))
            if article.get("url"):
                card.append(el.link(ctx.ids(f"article-{i}-link"), "Read more →", article["url"], {
                    **_LINK_STYLE, "color": ctx.primary, "fontFamily": ctx.font,
                }))
            cards.append(el.section(ctx.ids(f"article-{i}"), card, {
                "marginBottom": "24px" if i < len(articles) - 1 else "0",
                "padding": "24px",
                "backgroundColor": DEFAULT_COLORS["light_gray"],
                "borderRadius": "8px",
            }))
        return el.section(ctx.ids("section"), [*intro(block, ctx), *cards], SECTION_STYLE)


# ---------------------------------------------------------------------------
# List
# ---------------------------------------------------------------------------


@builders.register("list", "numbered")
class NumberedListBuilder(BlockBuilder):
    """Items with a numbered badge, title, description and optional link."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("items")
        items = ctx.items(block, "items", 5)
        children = intro(block, ctx, size="24px")
        for i, item in enumerate(items):
            content = [
                title_text(ctx, f"item-{i}-title", str(item.get("title", "")), "left"),
                body_text(ctx, f"item-{i}-desc", str(item.get("description", "")), "left"),
            ]
            if item.get("link"):
                content.append(el.link(ctx.ids(f"item-{i}-link"), "Learn more →", item["link"], {
                    **_LINK_STYLE, "color": ctx.primary, "fontFamily": ctx.font,
                }))
            children.append(el.row(ctx.ids(f"item-{i}-row"), [
                el.column(ctx.ids(f"item-{i}-number-col"), [number_badge(ctx, f"item-{i}-number", i + 1)], {
                    "width": "24px",
                    "paddingRight": "18px",
                    "verticalAlign": "top",
                }),
                el.column(ctx.ids(f"item-{i}-content-col"), content, {"verticalAlign": "top"}),
            ], {"marginBottom": "36px" if i < len(items) - 1 else "0"}))
        return el.section(ctx.ids("section"), children, {**SECTION_STYLE, "margin": "16px 0"})


@builders.register("list", "image-left")
class ImageLeftListBuilder(BlockBuilder):
    """Items with an image to the left of a numbered title and description."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        block.require("items")
        items = ctx.items(block, "items", 5)
        children = intro(block, ctx, size="24px")
        for i, item in enumerate(items):
            title = str(item.get("title", ""))
            picture = el.image(
                ctx.ids(f"item-{i}-image"),
                ctx.image_src(item.get("imageUrl"), 240, 168, title or f"item-{i}"),
                alt=title,
                width=240,
                height=168,
                style={"display": "block", "width": "100%", "borderRadius": "4px", "objectFit": "cover"},
            )
            content = [
                number_badge(ctx, f"item-{i}-number", i + 1),
                title_text(ctx, f"item-{i}-title", title, "left"),
                body_text(ctx, f"item-{i}-desc", str(item.get("description", "")), "left"),
            ]
            if item.get("link"):
                content.append(el.link(ctx.ids(f"item-{i}-link"), "Learn more →", item["link"], {
                    **_LINK_STYLE, "color": ctx.primary, "fontFamily": ctx.font,
                }))
            children.append(el.row(ctx.ids(f"item-{i}-row"), [
                el.column(ctx.ids(f"item-{i}-image-col"), [picture], {"width": "40%", "paddingRight": "24px"}),
                el.column(ctx.ids(f"item-{i}-content-col"), content, {"width": "60%", "verticalAlign": "top"}),
            ], {"marginBottom": "32px" if i < len(items) - 1 else "0"}))
        return el.section(ctx.ids("section"), children, {**SECTION_STYLE, "margin": "16px 0"})


# ---------------------------------------------------------------------------
# Testimonial
# ---------------------------------------------------------------------------


class _TestimonialBuilder(BlockBuilder):
    def quote(self, block: SemanticBlock, ctx: BuildContext, align: str) -> list[DocumentNode]:
        nodes = [el.text(ctx.ids("quote"), f"\"{block.require('quote')}\"", {
            "color": ctx.headline_color(DEFAULT_COLORS["light_gray"]),
            "fontSize": "20px",
            "fontStyle": "italic",
            "lineHeight": "1.6",
            "margin": "0 0 24px 0",
            "textAlign": align,
            "fontFamily": ctx.font,
        })]
        if block.get("rating") is not None:
            nodes.append(el.text(ctx.ids("rating"), star_rating(block.get("rating")), {
                "color": "#f59e0b",
                "fontSize": "20px",
                "margin": "0 0 16px 0",
                "textAlign": align,
            }))
        return nodes

    def author(self, block: SemanticBlock, ctx: BuildContext, align: str) -> list[DocumentNode]:
        nodes = [el.text(ctx.ids("author-name"), block.require("authorName"), {
            "color": DEFAULT_COLORS["content_headline"],
            "fontSize": "16px",
            "fontWeight": 600,
            "margin": "0",
            "textAlign": align,
            "fontFamily": ctx.font,
        })]
        title_parts = [p for p in (block.get("authorTitle"), block.get("authorCompany")) if p]
        if title_parts:
            nodes.append(el.text(ctx.ids("author-title"), " at ".join(title_parts), {
                "color": DEFAULT_COLORS["content_subtext"],
                "fontSize": "14px",
                "margin": "4px 0 0 0",
                "textAlign": align,
                "fontFamily": ctx.font,
            }))
        return nodes

    def avatar(self, block: SemanticBlock, ctx: BuildContext, size: int, margin: str) -> DocumentNode:
        name = block.require("authorName")
        return el.image(
            ctx.ids("author-image"),
            ctx.image_src(block.get("authorImage"), size, size, name),
            alt=name,
            width=size,
            height=size,
            style={
                "width": f"{size}px",
                "height": f"{size}px",
                "borderRadius": "50%",
                "margin": margin,
                "display": "block",
            },
        )


@builders.register("testimonial", "centered")
class CenteredTestimonialBuilder(_TestimonialBuilder):
    """Quote and rating above a centered author card."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        children = self.quote(block, ctx, "center")
        author = [self.avatar(block, ctx, 64, "0 auto 12px"), *self.author(block, ctx, "center")]
        children.append(el.row(ctx.ids("author-row"), [
            el.column(ctx.ids("author-col"), author, {"textAlign": "center"}),
        ]))
        return el.section(ctx.ids("section"), children, {
            "backgroundColor": DEFAULT_COLORS["light_gray"],
            "padding": "48px 24px",
        })


@builders.register("testimonial", "large-avatar")
class LargeAvatarTestimonialBuilder(_TestimonialBuilder):
    """Large author portrait beside the quote."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        row = el.row(ctx.ids("row"), [
            el.column(ctx.ids("avatar-col"), [self.avatar(block, ctx, 120, "0")], {
                "width": "30%",
                "verticalAlign": "top",
                "paddingRight": "24px",
            }),
            el.column(ctx.ids("quote-col"), [*self.quote(block, ctx, "left"), *self.author(block, ctx, "left")], {
                "width": "70%",
                "verticalAlign": "top",
            }),
        ])
        return el.section(ctx.ids("section"), [row], {
            "backgroundColor": DEFAULT_COLORS["light_gray"],
            "padding": "48px 24px",
        })


# ---------------------------------------------------------------------------
# Feedback
# ---------------------------------------------------------------------------


class _FeedbackBuilder(BlockBuilder):
    def closing(self, block: SemanticBlock, ctx: BuildContext) -> list[DocumentNode]:
        if not block.get("ctaUrl"):
            return []
        return [el.section(ctx.ids("cta-wrap"), [
            primary_button(ctx, "cta", block.get("ctaText", "Share your feedback"), block.get("ctaUrl")),
        ], {"padding": "24px 0 0 0", "textAlign": "center"})]


@builders.register("feedback", "simple-rating")
class SimpleRatingBuilder(_FeedbackBuilder):
    """A one-to-five rating scale of links."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        base = block.get("ctaUrl")
        separator = "&" if base and "?" in base else "?"
        columns = [
            el.column(ctx.ids(f"rating-{n}-col"), [
                el.link(ctx.ids(f"rating-{n}"), str(n), f"{base}{separator}rating={n}" if base else None, {
                    "display": "inline-block",
                    "width": "40px",
                    "lineHeight": "40px",
                    "borderRadius": "50%",
                    "backgroundColor": DEFAULT_COLORS["light_gray"],
                    "color": ctx.primary,
                    "fontSize": "16px",
                    "fontWeight": 600,
                    "textDecoration": "none",
                    "fontFamily": ctx.font,
                }),
            ], {"width": "20%", "textAlign": "center"})
            for n in range(1, 6)
        ]
        children = [*intro(block, ctx), el.row(ctx.ids("scale"), columns)]
        return el.section(ctx.ids("section"), children, {**SECTION_STYLE, "textAlign": "center"})


@builders.register("feedback", "survey")
class SurveyBuilder(_FeedbackBuilder):
    """Survey questions with their options, followed by a response button."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        children = intro(block, ctx, align="left")
        for i, question in enumerate(ctx.items(block, "questions", 5)):
            children.append(title_text(ctx, f"question-{i}", str(question.get("text", "")), "left"))
            options = question.get("options") or []
            if options:
                children.append(el.text(ctx.ids(f"question-{i}-options"), bullet_join(options), {
                    "color": DEFAULT_COLORS["content_subtext"],
                    "fontSize": "14px",
                    "margin": "0 0 16px 0",
                    "fontFamily": ctx.font,
                }))
        children.extend(self.closing(block, ctx))
        return el.section(ctx.ids("section"), children, SECTION_STYLE)


@builders.register("feedback", "customer-reviews")
class CustomerReviewsBuilder(_FeedbackBuilder):
    """Customer reviews with ratings and attributions."""

    def build(self, block: SemanticBlock, ctx: BuildContext) -> DocumentNode:
        children = intro(block, ctx)
        for i, review in enumerate(ctx.items(block, "reviews", 4)):
            card: list[DocumentNode] = []
            if review.get("rating") is not None:
                card.append(el.text(ctx.ids(f"review-{i}-rating"), star_rating(review["rating"]), {
                    "color": "#f59e0b",
                    "fontSize": "16px",
                    "margin": "0 0 8px 0",
                }))
            card.append(el.text(ctx.ids(f"review-{i}-text"), str(review.get("text", "")), {
                "color": ctx.body_color(DEFAULT_COLORS["light_gray"]),
                "fontSize": "15px",
                "lineHeight": "1.6",
                "margin": "0 0 12px 0",
                "fontFamily": ctx.font,
            }))
            attribution = ", ".join(
                str(part) for part in (review.get("authorName"), review.get("authorTitle")) if part
            )
            card.append(el.text(ctx.ids(f"review-{i}-author"), f"— {attribution}", {
                "color": DEFAULT_COLORS["content_subtext"],
                "fontSize": "13px",
                "fontWeight": 600,
                "margin": "0",
                "fontFamily": ctx.font,
            }))
            children.append(el.section(ctx.ids(f"review-{i}"), card, {
                "backgroundColor": DEFAULT_COLORS["light_gray"],
                "borderRadius": "8px",
                "padding": "20px",
                "marginBottom": "16px",
            }))
        children.extend(self.closing(block, ctx))
        return el.section(ctx.ids("section"), children, SECTION_STYLE)
