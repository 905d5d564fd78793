"""Unit tests for mailblocks.registry: component specs and attribute naming."""
from __future__ import annotations

import pytest

from mailblocks.registry.attributes import (
    attr_name,
    css_property,
    css_to_style,
    prop_name,
    style_key,
    style_to_css,
)
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry, ComponentSpec


class TestComponentRegistry:
    def test_every_component_type_registered(self) -> None:
        assert set(DEFAULT_REGISTRY) == {
            "Root", "Section", "Row", "Column", "Text", "Heading", "Button", "Link",
            "Image", "Divider", "CodeBlock", "Markdown", "Preview",
        }

    def test_container_flags(self) -> None:
        assert DEFAULT_REGISTRY.is_container("Column")
        assert not DEFAULT_REGISTRY.is_container("Image")
        assert not DEFAULT_REGISTRY.is_container("Unknown")

    def test_editable_flags(self) -> None:
        assert DEFAULT_REGISTRY.is_editable("Text")
        assert not DEFAULT_REGISTRY.is_editable("Root")
        assert not DEFAULT_REGISTRY.is_editable("Divider")

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("table", "Section"),
            ("tr", "Row"),
            ("td", "Column"),
            ("TH", "Column"),
            ("a", "Link"),
            ("img", "Image"),
            ("h3", "Heading"),
            ("p", "Text"),
            ("span", "Text"),
            ("hr", "Divider"),
            ("pre", "CodeBlock"),
            ("article", "Section"),
        ],
    )
    def test_type_for_tag(self, tag: str, expected: str) -> None:
        assert DEFAULT_REGISTRY.type_for_tag(tag) == expected

    def test_table_sections_are_transparent(self) -> None:
        assert DEFAULT_REGISTRY.is_transparent("tbody")
        assert not DEFAULT_REGISTRY.is_transparent("tr")

    def test_heading_tag_follows_as_property(self) -> None:
        spec = DEFAULT_REGISTRY["Heading"]
        assert spec.tag_for({"as": "h1"}) == "h1"
        assert spec.tag_for({"as": "script"}) == "h2"
        assert spec.tag_for({}) == "h2"

    def test_duplicate_name_rejected(self) -> None:
        with pytest.raises(ValueError, match="registered twice"):
            ComponentRegistry([ComponentSpec("Section"), ComponentSpec("Section")])

    def test_unregistered_fallback_rejected(self) -> None:
        with pytest.raises(ValueError, match="Fallback"):
            ComponentRegistry([ComponentSpec("Text")])

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            DEFAULT_REGISTRY["Text"] = ComponentSpec("Text")  # type: ignore[index]


class TestAttributeNames:
    @pytest.mark.parametrize(
        ("prop", "attr"),
        [
            ("className", "class"),
            ("htmlFor", "for"),
            ("href", "href"),
            ("ariaLabel", "aria-label"),
            ("dataTrack", "data-track"),
        ],
    )
    def test_attr_and_prop_are_inverse(self, prop: str, attr: str) -> None:
        assert attr_name(prop) == attr
        assert prop_name(attr) == prop

    def test_vendor_prefixed_css_property(self) -> None:
        assert css_property("WebkitTextSizeAdjust") == "-webkit-text-size-adjust"
        assert style_key("-webkit-text-size-adjust") == "WebkitTextSizeAdjust"


class TestStyleConversion:
    def test_style_to_css(self) -> None:
        css = style_to_css({"backgroundColor": "#fff", "fontWeight": 700})
        assert css == "background-color:#fff;font-weight:700"

    def test_style_to_css_skips_empty_values(self) -> None:
        assert style_to_css({"color": None, "margin": "", "padding": "0"}) == "padding:0"

    def test_css_to_style(self) -> None:
        style = css_to_style("background-color: #fff; font-size:16px;")
        assert style == {"backgroundColor": "#fff", "fontSize": "16px"}

    def test_css_to_style_keeps_semicolons_inside_parentheses(self) -> None:
        style = css_to_style("background-image:url(data:image/png;base64,AAA);color:red")
        assert style["backgroundImage"] == "url(data:image/png;base64,AAA)"
        assert style["color"] == "red"

    def test_css_to_style_ignores_declarations_without_colon(self) -> None:
        assert css_to_style("bogus;color:red") == {"color": "red"}

    def test_round_trip_preserves_order(self) -> None:
        style = {"padding": "8px", "backgroundColor": "#111111", "textAlign": "center"}
        assert css_to_style(style_to_css(style)) == style
        assert list(css_to_style(style_to_css(style))) == list(style)
