"""Property ↔ markup attribute conversion shared by the renderer and parser.

Node properties use camelCase keys (``backgroundColor``, ``className``);
markup uses kebab-case attribute names and CSS declarations.  The
functions here are exact inverses for every key they produce, which keeps
``render(parse(render(tree)))`` equal to ``render(tree)``.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

ID_ATTR = "data-component-id"
TYPE_ATTR = "data-component-type"

_UPPER = re.compile(r"[A-Z]")
_DASHED = re.compile(r"-([a-z0-9])")

_SPECIAL_ATTRS = {"className": "class", "htmlFor": "for"}
_SPECIAL_PROPS = {v: k for k, v in _SPECIAL_ATTRS.items()}


def _kebab(name: str) -> str:
    return _UPPER.sub(lambda m: "-" + m.group(0).lower(), name)


def _camel(name: str) -> str:
    return _DASHED.sub(lambda m: m.group(1).upper(), name.lower())


def attr_name(prop: str) -> str:
    """Return the markup attribute for property ``prop``.

    >>> attr_name("className"), attr_name("ariaLabel")
    ('class', 'aria-label')
    """
    return _SPECIAL_ATTRS.get(prop, _kebab(prop))


def prop_name(attr: str) -> str:
    """Return the property for markup attribute ``attr``."""
    return _SPECIAL_PROPS.get(attr, _camel(attr))


def css_property(key: str) -> str:
    """Return the CSS property for style key ``key``.

    Capitalized keys are vendor prefixed: ``WebkitTextSizeAdjust`` becomes
    ``-webkit-text-size-adjust``.
    """
    return _kebab(key)


def style_key(prop: str) -> str:
    """Return the style key for CSS property ``prop``; inverse of ``css_property``."""
    return _camel(prop.strip())


def style_to_css(style: Mapping[str, Any]) -> str:
    """Serialize a style map as an inline CSS declaration list.

    >>> style_to_css({"backgroundColor": "#fff", "fontWeight": 700})
    'background-color:#fff;font-weight:700'
    """
    return ";".join(
        f"{css_property(key)}:{value}"
        for key, value in style.items()
        if value is not None and value != ""
    )


def css_to_style(css: str) -> dict[str, str]:
    """Parse an inline CSS declaration list into a style map.

    Declarations without a colon are ignored.  Values keep their text,
    including ``!important``.
    """
    style: dict[str, str] = {}
    for declaration in _split_declarations(css):
        prop, sep, value = declaration.partition(":")
        if not sep or not prop.strip():
            continue
        style[style_key(prop)] = value.strip()
    return style


def _split_declarations(css: str) -> list[str]:
    """Split on ``;`` outside parentheses and quotes (``url(a;b)`` stays whole)."""
    parts: list[str] = []
    depth = 0
    quote: str | None = None
    current: list[str] = []
    for ch in css:
        if quote:
            if ch == quote:
                quote = None
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth = max(0, depth - 1)
        elif ch == ";" and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(ch)
    parts.append("".join(current))
    return [p for p in (part.strip() for part in parts) if p]
