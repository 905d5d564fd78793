"""Color safety engine."""
from __future__ import annotations

from mailblocks.colors.contrast import (
    DEFAULT_COLORS,
    MIN_CONTRAST,
    contrast_ratio,
    get_safe_body_color,
    get_safe_headline_color,
    get_safe_text_color,
    is_too_dark,
    is_too_vibrant,
    is_valid_hex,
    meets_contrast_standard,
    parse_hex,
    relative_luminance,
    validate_hex_color,
)

__all__ = [
    "DEFAULT_COLORS",
    "MIN_CONTRAST",
    "contrast_ratio",
    "get_safe_body_color",
    "get_safe_headline_color",
    "get_safe_text_color",
    "is_too_dark",
    "is_too_vibrant",
    "is_valid_hex",
    "meets_contrast_standard",
    "parse_hex",
    "relative_luminance",
    "validate_hex_color",
]
