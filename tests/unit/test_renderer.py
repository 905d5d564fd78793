"""Unit tests for mailblocks.renderer: markup emission, post-processing and plain text."""
from __future__ import annotations

import pytest

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import DocumentNode
from mailblocks.renderer import (
    SCALING_RULE,
    VIEWPORT_META,
    Renderer,
    ensure_scaling_rule,
    ensure_viewport_meta,
    postprocess,
    render,
    to_plain_text,
)
from mailblocks.renderer.plaintext import RULE, strip_markup
from mailblocks.renderer.renderer import DOCTYPE
from mailblocks.settings import GlobalEmailSettings


def _root(*children: DocumentNode) -> DocumentNode:
    return DocumentNode("root", "Root", children=children)


def _fragment(node: DocumentNode) -> str:
    return Renderer().render_fragment(node)


# ---------------------------------------------------------------------------
# Document structure
# ---------------------------------------------------------------------------


class TestDocument:
    def test_doctype_and_head(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree).markup
        assert markup.startswith(DOCTYPE)
        assert "<head>" in markup
        assert 'charset=UTF-8' in markup

    def test_body_carries_root_attributes(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree).markup
        assert '<body data-component-id="root" data-component-type="Root"' in markup

    def test_body_style_from_settings(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree, GlobalEmailSettings(background_color="#f9fafb")).markup
        assert "background-color:#f9fafb" in markup

    def test_root_style_overrides_settings(self) -> None:
        tree = DocumentNode("root", "Root", {"style": {"backgroundColor": "#000000"}}, children=())
        markup = render(tree, GlobalEmailSettings(background_color="#f9fafb")).markup
        assert "background-color:#000000" in markup
        assert "#f9fafb" not in markup

    def test_non_root_tree_wrapped(self) -> None:
        markup = render(DocumentNode("t", "Text", content="Hi")).markup
        assert 'data-component-id="root"' in markup
        assert 'data-component-id="t"' in markup

    def test_synthetic_root_avoids_taken_id(self) -> None:
        section = DocumentNode("s", "Section", children=(DocumentNode("root", "Text", content="x"),))
        markup = render(section).markup
        assert '<body data-component-id="root-1"' in markup

    def test_invalid_tree_rejected(self) -> None:
        tree = _root(DocumentNode("a", "Text"), DocumentNode("a", "Text"))
        with pytest.raises(StructuralError):
            render(tree)

    def test_unknown_type_rejected(self) -> None:
        with pytest.raises(StructuralError) as exc_info:
            render(_root(DocumentNode("c", "Carousel")))
        assert exc_info.value.path == "root.children[0]"

    def test_plain_text_only_on_request(self, sample_tree: DocumentNode) -> None:
        assert render(sample_tree).plain_text is None
        assert render(sample_tree, plain_text=True).plain_text == to_plain_text(sample_tree)

    def test_deterministic(self, sample_tree: DocumentNode) -> None:
        assert render(sample_tree).markup == render(sample_tree).markup


# ---------------------------------------------------------------------------
# Elements
# ---------------------------------------------------------------------------


class TestElements:
    def test_section_wrapper_and_fixed_attrs(self) -> None:
        markup = _fragment(DocumentNode("s", "Section", children=()))
        assert markup == (
            '<table data-component-id="s" data-component-type="Section" role="presentation" '
            'width="100%" cellpadding="0" cellspacing="0" border="0">'
            "<tbody><tr><td></td></tr></tbody></table>"
        )

    def test_property_overrides_fixed_attr(self) -> None:
        markup = _fragment(DocumentNode("s", "Section", {"width": 600}, children=()))
        assert 'width="600"' in markup
        assert 'width="100%"' not in markup

    def test_row_and_column(self) -> None:
        row = DocumentNode("r", "Row", children=(DocumentNode("c", "Column", children=()),))
        markup = _fragment(row)
        assert "<tbody><tr><td" in markup
        assert markup.endswith("</td></tr></tbody></table>")

    def test_heading_level_from_as(self) -> None:
        markup = _fragment(DocumentNode("h", "Heading", {"as": "h1"}, content="Hi"))
        assert markup == '<h1 data-component-id="h" data-component-type="Heading">Hi</h1>'

    def test_heading_default_level(self) -> None:
        assert _fragment(DocumentNode("h", "Heading", content="Hi")).startswith("<h2 ")

    def test_heading_rejects_foreign_tag(self) -> None:
        assert _fragment(DocumentNode("h", "Heading", {"as": "script"}, content="x")).startswith("<h2 ")

    def test_image_is_void(self) -> None:
        markup = _fragment(DocumentNode("i", "Image", {"src": "https://x.test/a.png", "width": 600}))
        assert markup == (
            '<img data-component-id="i" data-component-type="Image" '
            'src="https://x.test/a.png" width="600"/>'
        )

    def test_button_is_anchor(self) -> None:
        markup = _fragment(DocumentNode("b", "Button", {"href": "https://x.test"}, content="Go"))
        assert markup == '<a data-component-id="b" data-component-type="Button" href="https://x.test">Go</a>'

    def test_style_serialized_as_css(self) -> None:
        node = DocumentNode("t", "Text", {"style": {"color": "#111111", "fontWeight": 700}}, content="x")
        assert 'style="color:#111111;font-weight:700"' in _fragment(node)

    def test_property_names_kebab_cased(self) -> None:
        node = DocumentNode("t", "Text", {"className": "lead", "ariaLabel": "intro"}, content="x")
        markup = _fragment(node)
        assert 'class="lead"' in markup
        assert 'aria-label="intro"' in markup

    def test_non_scalar_property_skipped(self) -> None:
        node = DocumentNode("t", "Text", {"items": [1, 2]}, content="x")
        assert "items" not in _fragment(node)

    def test_boolean_property(self) -> None:
        node = DocumentNode("t", "Text", {"hidden": True}, content="x")
        assert 'hidden="true"' in _fragment(node)

    def test_content_escaped(self) -> None:
        node = DocumentNode("t", "Text", content="<b> & co")
        assert ">&lt;b&gt; &amp; co</p>" in _fragment(node)

    def test_attribute_values_escaped(self) -> None:
        node = DocumentNode("l", "Link", {"href": 'https://x.test/?a=1&b="2"'}, content="x")
        assert 'href="https://x.test/?a=1&amp;b=&quot;2&quot;"' in _fragment(node)

    def test_inline_markup_emitted_verbatim(self) -> None:
        node = DocumentNode("t", "Text", content="a <strong>b</strong>", inline_markup=True)
        assert ">a <strong>b</strong></p>" in _fragment(node)

    def test_code_block_keeps_whitespace(self) -> None:
        node = DocumentNode("c", "CodeBlock", content="  x\n    y")
        assert "<code>  x\n    y</code></pre>" in Renderer(pretty=True).render_fragment(node)

    def test_divider(self) -> None:
        assert _fragment(DocumentNode("d", "Divider")).startswith("<hr ")


class TestPreview:
    def test_root_preview_goes_to_head(self) -> None:
        tree = _root(DocumentNode("p", "Preview", content="Sale \"today\""))
        markup = render(tree).markup
        head = markup[: markup.index("</head>")]
        assert '<meta name="preview" content="Sale &quot;today&quot;" data-component-id="p"/>' in head
        assert "Sale" not in markup[markup.index("<body"):]

    def test_nested_preview_is_hidden_div(self) -> None:
        section = DocumentNode("s", "Section", children=(DocumentNode("p", "Preview", content="x"),))
        markup = _fragment(section)
        assert '<div data-component-id="p" data-component-type="Preview"' in markup
        assert "display:none" in markup


class TestPretty:
    def test_elements_on_indented_lines(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree, pretty=True).markup
        lines = markup.splitlines()
        assert any(line.startswith("<body ") for line in lines)
        assert any(line.startswith("  <table ") for line in lines)
        assert markup.endswith("</html>\n")

    def test_leaf_stays_on_one_line(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree, pretty=True).markup
        assert any(
            line.strip() == '<p data-component-id="body" data-component-type="Text">Welcome aboard</p>'
            for line in markup.splitlines()
        )


# ---------------------------------------------------------------------------
# Post-processing
# ---------------------------------------------------------------------------


class TestPostprocess:
    def test_rendered_markup_has_both_passes(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree).markup
        assert markup.count(VIEWPORT_META) == 1
        assert markup.count(SCALING_RULE) == 1

    def test_idempotent_on_rendered_markup(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree).markup
        assert postprocess(markup) == markup

    @pytest.mark.parametrize(
        "markup",
        [
            "<html><body></body></html>",
            "<html><head><title>x</title></head><body></body></html>",
            '<html><head><style type="text/css">p{}</style></head><body></body></html>',
            "<p>no document</p>",
        ],
    )
    def test_idempotent_on_arbitrary_markup(self, markup: str) -> None:
        once = postprocess(markup)
        assert postprocess(once) == once

    def test_viewport_creates_head(self) -> None:
        assert ensure_viewport_meta("<html><body></body></html>") == (
            f"<html><head>{VIEWPORT_META}</head><body></body></html>"
        )

    def test_existing_viewport_untouched(self) -> None:
        markup = '<html><head><meta name="viewport" content="width=device-width"/></head></html>'
        assert ensure_viewport_meta(markup) == markup

    def test_scaling_rule_joins_existing_stylesheet(self) -> None:
        markup = '<html><head><style type="text/css">p{}</style></head></html>'
        assert ensure_scaling_rule(markup) == (
            f'<html><head><style type="text/css">{SCALING_RULE}p{{}}</style></head></html>'
        )

    def test_scaling_rule_adds_stylesheet(self) -> None:
        assert ensure_scaling_rule("<html><head></head></html>") == (
            f'<html><head><style type="text/css">{SCALING_RULE}</style></head></html>'
        )

    def test_existing_scaling_rule_untouched(self) -> None:
        markup = "<html><head><style>body{-webkit-text-size-adjust:none}</style></head></html>"
        assert ensure_scaling_rule(markup) == markup


# ---------------------------------------------------------------------------
# Plain text
# ---------------------------------------------------------------------------


class TestPlainText:
    def test_sample_tree(self, sample_tree: DocumentNode) -> None:
        assert to_plain_text(sample_tree) == "HELLO\n\nWelcome aboard\n\nStart (https://example.com)\n"

    def test_markup_stripped(self) -> None:
        tree = _root(DocumentNode("t", "Text", content="a <strong>b</strong><br/>c &amp; d", inline_markup=True))
        assert to_plain_text(tree) == "a b\nc & d\n"

    def test_images_and_preview_omitted(self) -> None:
        tree = _root(
            DocumentNode("p", "Preview", content="hidden"),
            DocumentNode("i", "Image", {"src": "https://x.test/a.png"}),
            DocumentNode("d", "Divider"),
        )
        assert to_plain_text(tree) == f"{RULE}\n"

    def test_placeholder_href_not_shown(self) -> None:
        tree = _root(DocumentNode("l", "Link", {"href": "#"}, content="Home"))
        assert to_plain_text(tree) == "Home\n"

    def test_empty_tree(self) -> None:
        assert to_plain_text(_root()) == ""

    def test_strip_markup(self) -> None:
        assert strip_markup("<em>x</em><BR>y") == "x\ny"
