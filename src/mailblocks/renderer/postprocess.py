"""Post-processing passes over serialized email markup.

Both passes are idempotent: applying either one to its own output returns
the output unchanged.  They work on the markup string so that they can also
be applied to documents that did not come from the renderer.
"""
from __future__ import annotations

import re

VIEWPORT_META = '<meta name="viewport" content="width=600"/>'

SCALING_RULE = (
    "body { -webkit-text-size-adjust:100%; -ms-text-size-adjust:100%; "
    "min-width:600px !important; }"
)

_VIEWPORT_RE = re.compile(r"<meta\b[^>]*\bname\s*=\s*[\"']?viewport\b", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_HTML_OPEN_RE = re.compile(r"<html\b[^>]*>", re.IGNORECASE)
_STYLE_OPEN_RE = re.compile(r"<style\b[^>]*>", re.IGNORECASE)
_SCALING_RE = re.compile(r"-webkit-text-size-adjust", re.IGNORECASE)


def _head_bounds(markup: str) -> tuple[int, int] | None:
    """Return ``(content_start, content_end)`` of the head, if present."""
    opening = _HEAD_OPEN_RE.search(markup)
    if opening is None:
        return None
    closing = _HEAD_CLOSE_RE.search(markup, opening.end())
    end = closing.start() if closing else opening.end()
    return opening.end(), end


def _ensure_head(markup: str) -> str:
    if _HEAD_OPEN_RE.search(markup):
        return markup
    html_open = _HTML_OPEN_RE.search(markup)
    at = html_open.end() if html_open else 0
    return f"{markup[:at]}<head></head>{markup[at:]}"


def ensure_viewport_meta(markup: str) -> str:
    """Insert a fixed-width viewport ``<meta>`` into the head if missing.

    A head element is created when the document has none.

    >>> ensure_viewport_meta("<html><head></head></html>")
    '<html><head><meta name="viewport" content="width=600"/></head></html>'
    """
    if _VIEWPORT_RE.search(markup):
        return markup
    markup = _ensure_head(markup)
    start, _ = _head_bounds(markup)  # type: ignore[misc]
    return f"{markup[:start]}{VIEWPORT_META}{markup[start:]}"


def ensure_scaling_rule(markup: str) -> str:
    """Insert the fixed-width body scaling rule into an embedded stylesheet.

    The rule goes into the first ``<style>`` element in the head, or into a
    new one appended to the head.  Documents that already declare
    ``-webkit-text-size-adjust`` anywhere in the head are left untouched.
    """
    markup = _ensure_head(markup)
    start, end = _head_bounds(markup)  # type: ignore[misc]
    head = markup[start:end]
    if _SCALING_RE.search(head):
        return markup
    style = _STYLE_OPEN_RE.search(head)
    if style is not None:
        at = start + style.end()
        return f"{markup[:at]}{SCALING_RULE}{markup[at:]}"
    block = f'<style type="text/css">{SCALING_RULE}</style>'
    return f"{markup[:end]}{block}{markup[end:]}"


def postprocess(markup: str) -> str:
    """Apply every post-processing pass in order."""
    return ensure_scaling_rule(ensure_viewport_meta(markup))
