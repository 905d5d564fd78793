"""Per-block build context handed to every builder."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from mailblocks.colors.contrast import (
    DEFAULT_COLORS,
    get_safe_body_color,
    get_safe_headline_color,
)
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.helpers import is_valid_image_url, placeholder_url
from mailblocks.errors import MissingFieldError
from mailblocks.settings import GlobalEmailSettings
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity


class IdFactory:
    """Generates deterministic ids unique within one compilation.

    Every id is ``<prefix>-<name>``; asking for the same name twice yields
    ``<prefix>-<name>-2``, ``-3`` and so on.

    Parameters
    ----------
    prefix:
        Shared prefix, usually the block kind or ``<kind>-<index>``.
    used:
        Set of ids already taken, shared between factories of one email.
    """

    def __init__(self, prefix: str, used: set[str] | None = None) -> None:
        self._prefix = prefix
        self._used: set[str] = used if used is not None else set()

    @property
    def prefix(self) -> str:
        return self._prefix

    def __call__(self, name: str) -> str:
        base = f"{self._prefix}-{name}"
        candidate = base
        n = 2
        while candidate in self._used:
            candidate = f"{base}-{n}"
            n += 1
        self._used.add(candidate)
        return candidate


@dataclass
class BuildContext:
    """Everything a builder needs besides the block itself.

    Parameters
    ----------
    settings:
        Global presentation settings.
    ids:
        Id factory for this block.
    variant:
        The resolved layout variant.
    year:
        Year printed in copyright lines, or ``None`` to omit it.
    diagnostics:
        List receiving non-fatal findings.
    location:
        Prefix for diagnostic paths, e.g. ``blocks[2]``.
    """

    settings: GlobalEmailSettings
    ids: IdFactory
    variant: str
    year: int | None
    diagnostics: list[Diagnostic] = field(default_factory=list)
    location: str = ""

    @property
    def font(self) -> str:
        return self.settings.font_family

    @property
    def primary(self) -> str:
        return self.settings.primary_color

    def _path(self, name: str) -> str:
        return f"{self.location}.{name}" if self.location else name

    def note(self, code: str, message: str, name: str, severity: DiagnosticSeverity) -> None:
        """Record a diagnostic about field ``name`` of the current block."""
        self.diagnostics.append(Diagnostic(
            severity=severity,
            code=code,
            message=message,
            path=self._path(name),
            rule="compiler",
        ))

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def headline_color(self, background: str = DEFAULT_COLORS["white"]) -> str:
        """Return the safe headline color for content on ``background``."""
        return get_safe_headline_color(
            self.settings.headline_color,
            background,
            DEFAULT_COLORS["content_headline"],
            self.diagnostics,
            field_name=self._path("headlineColor"),
        )

    def body_color(
        self,
        background: str = DEFAULT_COLORS["white"],
        fallback: str = DEFAULT_COLORS["content_body"],
    ) -> str:
        """Return the safe body text color for content on ``background``."""
        return get_safe_body_color(
            self.settings.body_text_color,
            background,
            fallback,
            self.diagnostics,
            field_name=self._path("bodyTextColor"),
        )

    def hero_colors(self) -> tuple[str, str]:
        """Return ``(headline, subheadline)`` colors for primary backgrounds."""
        headline = get_safe_headline_color(
            self.settings.hero_text_color,
            self.primary,
            DEFAULT_COLORS["hero_headline"],
            self.diagnostics,
            field_name=self._path("heroTextColor"),
        )
        sub = get_safe_body_color(
            self.settings.hero_text_color,
            self.primary,
            DEFAULT_COLORS["hero_subheadline"],
            self.diagnostics,
            field_name=self._path("heroTextColor"),
        )
        return headline, sub

    # ------------------------------------------------------------------
    # Fields
    # ------------------------------------------------------------------

    def image_src(self, url: Any, width: int, height: int, seed: str | None) -> str:
        """Return ``url`` if usable, otherwise a seeded placeholder."""
        if is_valid_image_url(url):
            return str(url)
        if url:
            self.note(
                "MB203",
                f"Image URL {url!r} is not usable; a placeholder was substituted",
                "imageUrl",
                DiagnosticSeverity.HINT,
            )
        return placeholder_url(width, height, seed)

    def items(self, block: SemanticBlock, name: str, limit: int | None) -> list[Any]:
        """Return list field ``name``, dropping entries beyond ``limit``."""
        values = [v for v in block.items(name) if v is not None]
        if limit is not None and len(values) > limit:
            self.note(
                "MB202",
                f"{len(values) - limit} {name} item(s) dropped; "
                f"the {self.variant!r} layout shows at most {limit}",
                name,
                DiagnosticSeverity.INFORMATION,
            )
            values = values[:limit]
        return values

    def required_items(self, block: SemanticBlock, name: str, limit: int | None) -> list[Any]:
        """Like :meth:`items`, but the field must hold at least one entry.

        Raises
        ------
        MissingFieldError
            If the field is absent, empty, or holds only null entries.
        """
        values = self.items(block, name, limit)
        if not values:
            raise MissingFieldError(
                f"Block {block.kind!r} requires at least one {name!r} entry",
                path=name,
                kind=block.kind,
                field_name=name,
            )
        return values

    def formatted(self, block: SemanticBlock, name: str) -> bool:
        """Return True if field ``name`` carries inline formatting."""
        schema = block.schema
        return schema is not None and name in schema.formatted
