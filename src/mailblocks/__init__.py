"""mailblocks: bidirectional email transform engine.

Semantic content blocks compile to a document tree; the tree renders to
email-safe markup, and that markup parses back into a tree an editor can
manipulate.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import mailblocks

    tree = mailblocks.compile_email(
        [
            {"kind": "hero", "headline": "Welcome", "ctaText": "Start",
             "ctaUrl": "https://example.com"},
            {"kind": "footer", "companyName": "Acme",
             "unsubscribeUrl": "https://example.com/unsubscribe"},
        ],
        settings={"primaryColor": "#1d4ed8"},
        preview_text="Thanks for signing up",
    )

    markup = mailblocks.render(tree).markup
    restored = mailblocks.parse(markup)
    diagnostics = mailblocks.validate(restored)
    changes = mailblocks.diff(tree, restored)

    mailblocks.__version__
    '0.1.0'
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Union

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from collections.abc import Iterable

    from mailblocks.compiler.blocks import SemanticBlock
    from mailblocks.differ.diff import TreeChange
    from mailblocks.nodes.nodes import DocumentNode
    from mailblocks.renderer.renderer import RenderResult
    from mailblocks.settings import GlobalEmailSettings
    from mailblocks.validator.diagnostics import Diagnostic

    BlockLike = Union[SemanticBlock, dict[str, Any]]
    SettingsLike = Union[GlobalEmailSettings, dict[str, Any], None]


def compile_block(block: "BlockLike", settings: "SettingsLike" = None) -> "DocumentNode":
    """Compile one semantic block into a Section subtree.

    Parameters
    ----------
    block:
        A ``SemanticBlock`` or a mapping with a ``kind`` key.
    settings:
        ``GlobalEmailSettings`` or a camelCase/snake_case mapping.

    Raises
    ------
    mailblocks.errors.UnknownBlockKindError
        If no builder is registered for the block kind.
    mailblocks.errors.MissingFieldError
        If a structurally required field is absent.
    """
    from mailblocks.compiler.compiler import compile_block as _compile_block

    return _compile_block(block, settings)


def compile_email(
    blocks: "Iterable[BlockLike]",
    settings: "SettingsLike" = None,
    preview_text: str | None = None,
) -> "DocumentNode":
    """Compile a sequence of blocks into a complete Root tree."""
    from mailblocks.compiler.compiler import compile_email as _compile_email

    return _compile_email(blocks, settings, preview_text)


def render(
    tree: "DocumentNode",
    settings: "GlobalEmailSettings | None" = None,
    pretty: bool = False,
    plain_text: bool = False,
) -> "RenderResult":
    """Render a tree to an email markup document.

    Raises
    ------
    mailblocks.errors.StructuralError
        If the tree has an unknown component type or invalid nesting.
    """
    from mailblocks.renderer.renderer import render as _render

    return _render(tree, settings, pretty=pretty, plain_text=plain_text)


def parse(markup: str) -> "DocumentNode":
    """Parse email markup into a Root-topped tree.

    Raises
    ------
    mailblocks.errors.MarkupParseError
        If the markup is unbalanced or has no ``<body>``.
    """
    from mailblocks.parser.parser import parse as _parse

    return _parse(markup)


def validate(tree: "DocumentNode", strict: bool = False) -> list["Diagnostic"]:
    """Validate a tree against all built-in rules.

    Returns
    -------
    list[Diagnostic]
        All findings in document order; empty if the tree is valid.
    """
    from mailblocks.validator.validator import validate_tree

    return validate_tree(tree, strict=strict)


def diff(old: "DocumentNode", new: "DocumentNode") -> list["TreeChange"]:
    """Compute node-level changes from ``old`` to ``new``."""
    from mailblocks.differ.diff import diff as _diff

    return _diff(old, new)


__all__ = [
    "__version__",
    "compile_block",
    "compile_email",
    "render",
    "parse",
    "validate",
    "diff",
]
