"""Block compiler: semantic blocks in, document trees out.

``compile_block`` dispatches a block first by kind and then by variant to
the builder registered for that pair.  ``compile_email`` assembles several
blocks into a complete email tree::

    Root
    ├── Preview            (optional inbox preview text)
    └── Section "email-container"
        ├── <block 0 section>
        └── <block 1 section> ...
"""
from __future__ import annotations

import dataclasses
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Union

from mailblocks.compiler import builders as _layouts  # noqa: F401  registers the layouts
from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.context import BuildContext, IdFactory
from mailblocks.compiler.registry import BuilderRegistry, builders
from mailblocks.errors import StructuralError, UnknownBlockKindError
from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.settings import GlobalEmailSettings
from mailblocks.tree.queries import count_nodes
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)

BlockLike = Union[SemanticBlock, Mapping[str, Any]]
SettingsLike = Union[GlobalEmailSettings, Mapping[str, Any], None]

ROOT_ID = "root"
PREVIEW_ID = "preview-text"
CONTAINER_ID = "email-container"


@dataclass
class CompileOutput:
    """Result of compiling one block.

    Parameters
    ----------
    root:
        The compiled section node.
    diagnostics:
        Non-fatal findings: overridden colors, variant fallbacks, dropped
        items and substituted images.
    """

    root: DocumentNode
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(d.is_error for d in self.diagnostics)

    def summary(self) -> str:
        """Return a one-line human-readable summary of this output."""
        return (
            f"Compiled {count_nodes(self.root)} node(s) "
            f"with {len(self.diagnostics)} diagnostic(s)"
        )


def _coerce_settings(settings: SettingsLike) -> GlobalEmailSettings:
    if settings is None:
        return GlobalEmailSettings()
    if isinstance(settings, GlobalEmailSettings):
        return settings
    return GlobalEmailSettings.from_dict(dict(settings))


def _coerce_block(block: BlockLike) -> SemanticBlock:
    if isinstance(block, SemanticBlock):
        return block
    return SemanticBlock.from_dict(dict(block))


class BlockCompiler:
    """Compiles semantic blocks with shared settings.

    Diagnostics from every compilation accumulate on :attr:`diagnostics`
    until :meth:`reset` is called.

    Parameters
    ----------
    settings:
        Global presentation settings, or a mapping of them.
    registry:
        Builder registry to dispatch through.
    year:
        Year printed in footer copyright lines; overrides
        ``settings.copyright_year``. Without either, the line carries no year.
    """

    def __init__(
        self,
        settings: SettingsLike = None,
        registry: BuilderRegistry | None = None,
        year: int | None = None,
    ) -> None:
        self._settings = _coerce_settings(settings)
        self._registry = registry if registry is not None else builders
        self._year = year if year is not None else self._settings.copyright_year
        self._diagnostics: list[Diagnostic] = []

    @property
    def settings(self) -> GlobalEmailSettings:
        return self._settings

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """Diagnostics recorded so far (a copy)."""
        return list(self._diagnostics)

    def reset(self) -> None:
        """Forget recorded diagnostics."""
        self._diagnostics.clear()

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def _resolve_variant(self, block: SemanticBlock, location: str) -> str:
        known = self._registry.variants(block.kind)
        if not known:
            raise UnknownBlockKindError(
                f"Unknown block kind {block.kind!r}",
                path=location,
                kind=block.kind,
            )
        schema = block.schema
        default = schema.default_variant if schema is not None and schema.default_variant in known else known[0]
        requested = block.variant
        if requested is None:
            return default
        if requested in known:
            return requested
        path = f"{location}.variant" if location else "variant"
        self._diagnostics.append(Diagnostic(
            severity=DiagnosticSeverity.INFORMATION,
            code="MB201",
            message=f"Unknown {block.kind} variant {requested!r}; using {default!r}",
            path=path,
            suggestion=f"Use one of: {', '.join(known)}",
            rule="compiler",
        ))
        logger.info("Unknown %s variant %r, falling back to %r", block.kind, requested, default)
        return default

    def _compile(
        self, block: SemanticBlock, index: int | None, used: set[str] | None
    ) -> DocumentNode:
        location = f"blocks[{index}]" if index is not None else ""
        variant = self._resolve_variant(block, location)
        prefix = block.kind if index is None else f"{block.kind}-{index}"
        ctx = BuildContext(
            settings=self._settings,
            ids=IdFactory(prefix, used),
            variant=variant,
            year=self._year,
            diagnostics=self._diagnostics,
            location=location,
        )
        schema = block.schema
        try:
            if schema is not None:
                for name in schema.required:
                    block.require(name)
            node = self._registry.get(block.kind, variant)().build(block, ctx)
        except StructuralError as exc:
            if location and not exc.path.startswith(location):
                path = f"{location}.{exc.path}" if exc.path else location
                raise dataclasses.replace(exc, path=path) from exc
            raise
        logger.debug(
            "Compiled %s/%s into %d node(s)", block.kind, variant, count_nodes(node)
        )
        return node

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def compile(self, block: BlockLike, index: int | None = None) -> DocumentNode:
        """Compile one block into its section node.

        Parameters
        ----------
        block:
            A ``SemanticBlock`` or its flat mapping form.
        index:
            Position of the block within an email; used as an id prefix
            and in error paths.

        Raises
        ------
        UnknownBlockKindError
            If no builder is registered for the block's kind.
        MissingFieldError
            If a structurally required field is absent.
        """
        return self._compile(_coerce_block(block), index, None)

    def compile_with_diagnostics(self, block: BlockLike) -> CompileOutput:
        """Compile one block and return it with the diagnostics it produced."""
        start = len(self._diagnostics)
        node = self.compile(block)
        return CompileOutput(node, self._diagnostics[start:])

    def compile_email(
        self, blocks: Iterable[BlockLike], preview_text: str | None = None
    ) -> DocumentNode:
        """Compile a sequence of blocks into a complete email tree.

        Raises
        ------
        StructuralError
            If a block fails to compile or compiles to an empty section.
        """
        used: set[str] = {ROOT_ID, PREVIEW_ID, CONTAINER_ID}
        sections: list[DocumentNode] = []
        for index, raw in enumerate(blocks):
            section = self._compile(_coerce_block(raw), index, used)
            if not section.children:
                raise StructuralError(
                    f"Block {section.id!r} compiled to an empty section", path=f"blocks[{index}]"
                )
            sections.append(section)

        settings = self._settings
        container = DocumentNode(
            CONTAINER_ID,
            ComponentType.SECTION,
            {"style": {
                "maxWidth": settings.max_width,
                "margin": "0 auto",
                "backgroundColor": settings.background_color,
            }},
            children=tuple(sections),
        )
        children: list[DocumentNode] = []
        if preview_text:
            children.append(DocumentNode(PREVIEW_ID, ComponentType.PREVIEW, content=preview_text))
        children.append(container)
        logger.info("Compiled email with %d block(s)", len(sections))
        return DocumentNode(
            ROOT_ID,
            ComponentType.ROOT,
            {"style": {
                "backgroundColor": settings.background_color,
                "fontFamily": settings.font_family,
                "margin": "0",
                "padding": "0",
            }},
            children=tuple(children),
        )


def compile_block(block: BlockLike, settings: SettingsLike = None) -> DocumentNode:
    """Compile one block with ``settings``.

    Identical inputs yield deep-equal trees, including ids and placeholder
    image URLs.
    """
    return BlockCompiler(settings).compile(block)


def compile_with_diagnostics(block: BlockLike, settings: SettingsLike = None) -> CompileOutput:
    """Compile one block and return it together with its diagnostics."""
    return BlockCompiler(settings).compile_with_diagnostics(block)


def compile_email(
    blocks: Iterable[BlockLike],
    settings: SettingsLike = None,
    preview_text: str | None = None,
) -> DocumentNode:
    """Compile ``blocks`` into a Root tree; see :meth:`BlockCompiler.compile_email`."""
    return BlockCompiler(settings).compile_email(blocks, preview_text)
