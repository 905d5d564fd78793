"""Image search keyword handling.

Keywords written for people ("dramatic close up shot of a glowing lighthouse")
make poor search queries.  ``simplify_keyword`` strips descriptive
adjectives, camera vocabulary and filler words, keeping at most three core
words.
"""
from __future__ import annotations

from typing import Literal

Orientation = Literal["landscape", "portrait", "squarish"]

#: Words dropped from search keywords.
STOP_WORDS: frozenset[str] = frozenset(
    {
        # descriptive adjectives
        "dark", "mysterious", "epic", "dramatic", "cinematic", "vivid", "moody",
        "stunning", "breathtaking", "spectacular", "magnificent", "gorgeous",
        "beautiful", "striking", "powerful", "intense", "eerie", "haunting",
        "atmospheric", "ethereal", "surreal", "heroic", "determined", "fierce",
        "bold", "vibrant", "lush", "pristine", "serene",
        # action and state words
        "glowing", "shimmering", "sparkling", "radiant", "illuminated", "lit",
        "running", "jumping", "flying", "standing", "sitting", "walking",
        # camera vocabulary
        "close", "up", "closeup", "macro", "wide", "angle", "shot", "scene",
        # overly narrow locations
        "norwegian", "swedish", "finnish", "icelandic",
        # filler
        "the", "a", "an", "in", "on", "at", "with", "and", "or", "of", "for",
    }
)

MAX_KEYWORD_WORDS = 3

_PORTRAIT_HINTS = ("portrait", "person", "author")


def simplify_keyword(keyword: str) -> str:
    """Return a broader search query for ``keyword``.

    >>> simplify_keyword("Dramatic close up shot of a glowing lighthouse at dusk")
    'lighthouse dusk'

    When every word is a stop word the first two words are kept; blank
    input is returned unchanged.
    """
    if not keyword or not keyword.strip():
        return keyword
    words = keyword.lower().split()
    core = [w for w in words if w not in STOP_WORDS and len(w) >= 2]
    simplified = " ".join(core[:MAX_KEYWORD_WORDS])
    if not simplified:
        return " ".join(words[:2])
    return simplified


def image_dimensions(kind: str | None, keyword: str = "") -> tuple[int, int, Orientation]:
    """Return ``(width, height, orientation)`` to request for a block kind."""
    if kind == "hero":
        return 800, 400, "landscape"
    if kind == "testimonial":
        return 200, 200, "squarish"
    if kind == "ecommerce":
        return 400, 400, "squarish"
    if kind == "article" and any(hint in keyword.lower() for hint in _PORTRAIT_HINTS):
        return 200, 200, "squarish"
    return 600, 400, "landscape"
