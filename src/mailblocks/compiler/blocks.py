"""Semantic content blocks and their static schemas.

A ``SemanticBlock`` says *what* a section of an email should contain: a
``kind`` (hero, features, footer, ...), the kind's fields, and an optional
``variant`` selecting a layout preset.  ``BLOCK_SCHEMAS`` declares for each
kind which fields are structurally required, which variants exist, which
fields carry inline formatting, and how many repeated items a layout
supports.

Length limits and URL formats are enforced upstream; the compiler only
checks that required fields are present.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from mailblocks.errors import MissingFieldError, StructuralError


@dataclass(frozen=True)
class BlockSchema:
    """Static description of one block kind.

    Parameters
    ----------
    kind:
        The block kind name.
    variants:
        Known layout variants; the first is the default.
    required:
        Fields that must be present and non-empty.
    items_field:
        Name of the repeated-item field, if the kind has one.
    max_items:
        Largest number of repeated items any variant lays out.
    formatted:
        Fields whose text expands ``**bold**``, ``*italic*`` and newlines.
    variant_key:
        Field that selects the variant, ``"variant"`` for most kinds.
    """

    kind: str
    variants: tuple[str, ...]
    required: tuple[str, ...] = ()
    items_field: str | None = None
    max_items: int | None = None
    formatted: tuple[str, ...] = ()
    variant_key: str = "variant"

    @property
    def default_variant(self) -> str:
        """Return the variant used when a block names none."""
        return self.variants[0]


_SCHEMAS: tuple[BlockSchema, ...] = (
    BlockSchema("hero", ("centered", "split"), required=("headline", "ctaText", "ctaUrl")),
    BlockSchema(
        "features",
        ("grid", "list", "numbered", "icons-2col", "icons-centered"),
        required=("features",),
        items_field="features",
        max_items=4,
    ),
    BlockSchema(
        "content",
        ("top", "bottom", "left", "right"),
        required=("paragraphs",),
        formatted=("paragraphs",),
        variant_key="imagePosition",
    ),
    BlockSchema("testimonial", ("centered", "large-avatar"), required=("quote", "authorName")),
    BlockSchema(
        "cta",
        ("primary", "secondary", "outline"),
        required=("headline", "buttonText", "buttonUrl"),
        variant_key="style",
    ),
    BlockSchema(
        "footer",
        ("one-column", "two-column"),
        required=("companyName", "unsubscribeUrl"),
        items_field="additionalLinks",
        max_items=5,
    ),
    BlockSchema(
        "article",
        ("image-top", "image-right", "image-background", "two-cards", "single-author",
         "multiple-authors"),
        required=("headline",),
    ),
    BlockSchema("articles", ("stacked",), required=("articles",), items_field="articles"),
    BlockSchema(
        "gallery",
        ("grid-2x2", "3-column", "horizontal-split", "vertical-split"),
        required=("images",),
        items_field="images",
        max_items=6,
    ),
    BlockSchema("stats", ("simple", "stepped"), required=("stats",), items_field="stats", max_items=4),
    BlockSchema("pricing", ("simple", "two-tier"), required=("plans",), items_field="plans", max_items=3),
    BlockSchema("list", ("numbered", "image-left"), required=("items",), items_field="items", max_items=5),
    BlockSchema(
        "ecommerce",
        ("single", "image-left", "3-column", "4-grid", "checkout"),
        required=("products",),
        items_field="products",
        max_items=4,
    ),
    BlockSchema("marketing", ("bento-grid",), required=("items",), items_field="items", max_items=4),
    BlockSchema(
        "header",
        ("centered-menu", "side-menu", "social-icons"),
        items_field="menuItems",
        max_items=6,
    ),
    BlockSchema("feedback", ("simple-rating", "survey", "customer-reviews")),
    BlockSchema("heading", ("simple-heading", "multiple-headings")),
    BlockSchema("text", ("default",), required=("content",), formatted=("content",)),
    BlockSchema("link", ("default",), required=("url",)),
    BlockSchema("buttons", ("default",), required=("buttons",), items_field="buttons", max_items=4),
    BlockSchema("image", ("default",)),
    BlockSchema("avatars", ("default",), required=("avatars",), items_field="avatars", max_items=8),
    BlockSchema("code", ("default",), required=("code",)),
    BlockSchema("markdown", ("default",), required=("content",), formatted=("content",)),
)

BLOCK_SCHEMAS: MappingProxyType[str, BlockSchema] = MappingProxyType(
    {schema.kind: schema for schema in _SCHEMAS}
)


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, (str, list, tuple, dict)) and len(value) == 0)


@dataclass(frozen=True)
class SemanticBlock:
    """A semantic content block.

    Parameters
    ----------
    kind:
        The block kind, one of the keys of ``BLOCK_SCHEMAS``.
    fields:
        Kind-specific fields with camelCase names, as produced upstream.
    variant:
        Requested layout variant; ``None`` selects the kind's default.
    """

    kind: str
    fields: dict[str, Any] = field(default_factory=dict, hash=False)
    variant: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SemanticBlock:
        """Build a block from a flat mapping.

        The kind is read from ``kind`` or ``blockType``; the variant from
        ``variant`` or the kind's own selector field (``style`` on cta,
        ``imagePosition`` on content).

        Raises
        ------
        StructuralError
            If the mapping names no kind.
        """
        if not isinstance(data, dict):
            raise StructuralError("A block must be a mapping")
        kind = data.get("kind") or data.get("blockType")
        if not kind:
            raise StructuralError("Block has no 'kind' or 'blockType'")
        fields = {k: v for k, v in data.items() if k not in ("kind", "blockType", "variant")}
        variant = data.get("variant")
        schema = BLOCK_SCHEMAS.get(str(kind))
        if variant is None and schema is not None and schema.variant_key != "variant":
            variant = fields.get(schema.variant_key)
        return cls(kind=str(kind), fields=fields, variant=variant)

    def to_dict(self) -> dict[str, Any]:
        """Return the flat mapping form of this block."""
        data: dict[str, Any] = {"kind": self.kind, **self.fields}
        if self.variant is not None:
            data["variant"] = self.variant
        return data

    @property
    def schema(self) -> BlockSchema | None:
        """Return the schema for this block's kind, if registered."""
        return BLOCK_SCHEMAS.get(self.kind)

    def get(self, name: str, default: Any = None) -> Any:
        """Return field ``name``, or ``default`` when absent or empty."""
        value = self.fields.get(name)
        return default if _is_missing(value) else value

    def require(self, name: str) -> Any:
        """Return field ``name``.

        Raises
        ------
        MissingFieldError
            If the field is absent or empty.
        """
        value = self.fields.get(name)
        if _is_missing(value):
            raise MissingFieldError(
                f"Block {self.kind!r} requires field {name!r}",
                path=name,
                kind=self.kind,
                field_name=name,
            )
        return value

    def items(self, name: str) -> list[Any]:
        """Return list field ``name`` as a list (empty when absent)."""
        value = self.fields.get(name)
        if isinstance(value, (list, tuple)):
            return list(value)
        return []

    def with_fields(self, **updates: Any) -> SemanticBlock:
        """Return a copy of this block with ``updates`` merged into its fields."""
        return SemanticBlock(kind=self.kind, fields={**self.fields, **updates}, variant=self.variant)
