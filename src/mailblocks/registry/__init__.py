"""Component type registry and attribute naming rules."""
from __future__ import annotations

from mailblocks.registry.attributes import (
    ID_ATTR,
    TYPE_ATTR,
    attr_name,
    css_to_style,
    prop_name,
    style_to_css,
)
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry, ComponentSpec

__all__ = [
    "ComponentRegistry",
    "ComponentSpec",
    "DEFAULT_REGISTRY",
    "ID_ATTR",
    "TYPE_ATTR",
    "attr_name",
    "css_to_style",
    "prop_name",
    "style_to_css",
]
