"""Markup renderer and its post-processing passes."""
from __future__ import annotations

from mailblocks.renderer.plaintext import to_plain_text
from mailblocks.renderer.postprocess import (
    SCALING_RULE,
    VIEWPORT_META,
    ensure_scaling_rule,
    ensure_viewport_meta,
    postprocess,
)
from mailblocks.renderer.renderer import RenderResult, Renderer, render

__all__ = [
    "SCALING_RULE",
    "VIEWPORT_META",
    "RenderResult",
    "Renderer",
    "ensure_scaling_rule",
    "ensure_viewport_meta",
    "postprocess",
    "render",
    "to_plain_text",
]
