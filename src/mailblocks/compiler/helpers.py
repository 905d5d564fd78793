"""Layout helpers shared by the block builders."""
from __future__ import annotations

import html
import re
from collections.abc import Iterable
from urllib.parse import quote, urlparse

PLACEHOLDER_BASE = "https://picsum.photos"

#: Separator used when flattening item arrays into a single text node.
BULLET = " • "

#: Hosts that never serve real images.
BLOCKED_IMAGE_HOSTS: frozenset[str] = frozenset(
    {
        "example.com",
        "example.org",
        "example.net",
        "yourdomain.com",
        "yourcompany.com",
        "domain.com",
        "placeholder.com",
    }
)

_TEMPLATE_MARKER = re.compile(r"[\[\]]|\{\{|\}\}")
_BOLD = re.compile(r"\*\*(.+?)\*\*")
_ITALIC = re.compile(r"\*(.+?)\*")


def fan_out_width(count: int) -> str:
    """Return the column width for ``count`` side-by-side items."""
    if count == 2:
        return "50%"
    if count == 3:
        return "33.33%"
    return "25%"


def is_valid_image_url(url: object) -> bool:
    """Return True if ``url`` looks like a real, fetchable image URL.

    Rejects empty values, unresolved template markers (``[...]``,
    ``{{...}}``), non-http(s) schemes and known placeholder domains.
    """
    if not isinstance(url, str) or not url:
        return False
    if _TEMPLATE_MARKER.search(url):
        return False
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.hostname:
        return False
    host = parsed.hostname.lower()
    return not any(host == blocked or host.endswith("." + blocked) for blocked in BLOCKED_IMAGE_HOSTS)


def placeholder_url(width: int, height: int, seed: str | None = None) -> str:
    """Return a placeholder image URL, seeded when ``seed`` is given.

    >>> placeholder_url(600, 400, "Welcome")
    'https://picsum.photos/seed/Welcome/600/400'
    """
    if seed:
        return f"{PLACEHOLDER_BASE}/seed/{quote(seed, safe='')}/{width}/{height}"
    return f"{PLACEHOLDER_BASE}/{width}/{height}"


def format_inline(text: str) -> str:
    """Escape ``text`` and expand ``**bold**``, ``*italic*`` and newlines."""
    escaped = html.escape(text, quote=False)
    escaped = _BOLD.sub(r"<strong>\1</strong>", escaped)
    escaped = _ITALIC.sub(r"<em>\1</em>", escaped)
    return escaped.replace("\n", "<br/>")


def has_inline_formatting(text: str) -> bool:
    """Return True if ``text`` would change under ``format_inline`` beyond escaping."""
    return "*" in text or "\n" in text


def bullet_join(items: Iterable[object]) -> str:
    """Join non-empty items with a bullet separator."""
    return BULLET.join(str(item) for item in items if item not in (None, ""))


def star_rating(rating: object) -> str:
    """Return a five-star rating string, clamping ``rating`` to 0..5."""
    try:
        value = int(rating)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        value = 0
    value = max(0, min(5, value))
    return "★" * value + "☆" * (5 - value)
