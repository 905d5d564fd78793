"""Color safety engine.

Pure functions that decide whether a requested text color is readable
against a background.  Luminance and contrast follow the WCAG 2 relative
luminance definition; a text color is accepted when it reaches the AA
threshold of 4.5:1 for normal text.

When a requested color is replaced, the override is reported as a
``Diagnostic``: appended to the caller's ``diagnostics`` list if one is
given, otherwise issued as a ``ColorSafetyWarning`` through ``warnings``.

Example
-------
::

    from mailblocks.colors import get_safe_headline_color

    get_safe_headline_color("#ffff00", "#ffffff", "#111111")  # '#111111'
    get_safe_headline_color("#000000", "#ffffff", "#111111")  # '#000000'
"""
from __future__ import annotations

import logging
import re
import warnings

from mailblocks.errors import ColorSafetyWarning
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)

_HEX = re.compile(r"^#[0-9a-fA-F]{6}$")

#: Minimum contrast ratio accepted for text (WCAG AA, normal text).
MIN_CONTRAST: float = 4.5

#: Mean channel intensity above which a color counts as too vibrant for body text.
VIBRANT_THRESHOLD: float = 230

#: Mean channel intensity below which a color counts as very dark.
DARK_THRESHOLD: float = 50

DEFAULT_COLORS: dict[str, str] = {
    "hero_headline": "#ffffff",
    "hero_subheadline": "#e9d5ff",
    "content_headline": "#111827",
    "content_body": "#374151",
    "content_subtext": "#6b7280",
    "footer_text": "#6b7280",
    "footer_subtext": "#9ca3af",
    "white": "#ffffff",
    "light_gray": "#f9fafb",
}


def is_valid_hex(color: object) -> bool:
    """Return True if ``color`` is a ``#rrggbb`` string."""
    return isinstance(color, str) and bool(_HEX.match(color))


def parse_hex(color: str) -> tuple[int, int, int]:
    """Return the ``(r, g, b)`` channels of a ``#rrggbb`` color.

    Raises
    ------
    ValueError
        If ``color`` is not a 6-digit hex color.
    """
    if not is_valid_hex(color):
        raise ValueError(f"Not a 6-digit hex color: {color!r}")
    return int(color[1:3], 16), int(color[3:5], 16), int(color[5:7], 16)


def validate_hex_color(color: str | None) -> str | None:
    """Return ``color`` if it is a valid hex color, otherwise ``None``."""
    if color is None or not is_valid_hex(color):
        return None
    return color


def _channel(value: int) -> float:
    normalized = value / 255
    if normalized <= 0.03928:
        return normalized / 12.92
    return ((normalized + 0.055) / 1.055) ** 2.4


def relative_luminance(color: str) -> float:
    """Return the WCAG relative luminance of ``color`` in ``[0, 1]``."""
    r, g, b = parse_hex(color)
    return 0.2126 * _channel(r) + 0.7152 * _channel(g) + 0.0722 * _channel(b)


def contrast_ratio(color1: str, color2: str) -> float:
    """Return the contrast ratio between two colors, from 1.0 to 21.0."""
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def meets_contrast_standard(text_color: str, background_color: str) -> bool:
    """Return True if the pair reaches the 4.5:1 AA threshold."""
    return contrast_ratio(text_color, background_color) >= MIN_CONTRAST


def _mean_intensity(color: str) -> float:
    return sum(parse_hex(color)) / 3


def is_too_vibrant(color: str) -> bool:
    """Return True for very bright colors (mean channel above 230)."""
    return is_valid_hex(color) and _mean_intensity(color) > VIBRANT_THRESHOLD


def is_too_dark(color: str) -> bool:
    """Return True for very dark colors (mean channel below 50)."""
    return is_valid_hex(color) and _mean_intensity(color) < DARK_THRESHOLD


def get_safe_text_color(background_color: str) -> str:
    """Return black or white, whichever reads better on ``background_color``."""
    return "#000000" if relative_luminance(background_color) > 0.5 else "#ffffff"


def _reject(
    code: str,
    message: str,
    field_name: str,
    fallback: str,
    diagnostics: list[Diagnostic] | None,
) -> str:
    diagnostic = Diagnostic(
        severity=DiagnosticSeverity.WARNING,
        code=code,
        message=message,
        path=field_name,
        suggestion=f"Using {fallback} instead",
        rule="color_safety",
    )
    logger.warning("%s; falling back to %s", message, fallback)
    if diagnostics is not None:
        diagnostics.append(diagnostic)
    else:
        warnings.warn(str(diagnostic), ColorSafetyWarning, stacklevel=3)
    return fallback


def get_safe_headline_color(
    user_color: str | None,
    background_color: str,
    fallback: str,
    diagnostics: list[Diagnostic] | None = None,
    field_name: str = "headlineColor",
) -> str:
    """Return ``user_color`` if it is readable on ``background_color``.

    Parameters
    ----------
    user_color:
        Requested text color; ``None`` or empty selects ``fallback`` silently.
    background_color:
        Background the text is drawn on.
    fallback:
        Color returned when ``user_color`` is rejected.
    diagnostics:
        Optional list receiving a ``Diagnostic`` per rejection.  When
        omitted, rejections are issued as ``ColorSafetyWarning``.
    field_name:
        Setting name reported in the diagnostic.

    Returns
    -------
    str
        ``user_color`` when valid hex with contrast of at least 4.5:1,
        otherwise ``fallback``.
    """
    if not user_color:
        return fallback
    if not is_valid_hex(user_color):
        return _reject(
            "MB101",
            f"Color {user_color!r} is not a 6-digit hex color",
            field_name,
            fallback,
            diagnostics,
        )
    ratio = contrast_ratio(user_color, background_color)
    if ratio < MIN_CONTRAST:
        return _reject(
            "MB102",
            f"Color {user_color} has contrast {ratio:.2f}:1 against {background_color}, "
            f"below {MIN_CONTRAST}:1",
            field_name,
            fallback,
            diagnostics,
        )
    return user_color


def get_safe_body_color(
    user_color: str | None,
    background_color: str,
    fallback: str,
    diagnostics: list[Diagnostic] | None = None,
    field_name: str = "bodyTextColor",
) -> str:
    """Like ``get_safe_headline_color``, but also rejects very bright colors."""
    if user_color and is_valid_hex(user_color) and is_too_vibrant(user_color):
        return _reject(
            "MB103",
            f"Color {user_color} is too bright for body text",
            field_name,
            fallback,
            diagnostics,
        )
    return get_safe_headline_color(
        user_color, background_color, fallback, diagnostics, field_name=field_name
    )
