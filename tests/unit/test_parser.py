"""Unit tests for mailblocks.parser: lexer, element tree, tag mapping and round trips."""
from __future__ import annotations

import pytest

from mailblocks.compiler import compile_email
from mailblocks.errors import MarkupParseError
from mailblocks.nodes.nodes import DocumentNode
from mailblocks.parser import MarkupParser, TokenType, build_element_tree, parse, tokenize
from mailblocks.renderer import render
from mailblocks.tree import find_by_id, iter_nodes


def _body(inner: str) -> str:
    return f"<html><head></head><body>{inner}</body></html>"


def _only_child(markup: str) -> DocumentNode:
    tree = parse(_body(markup))
    (child,) = tree.child_list()
    return child


def _shape(tree: DocumentNode) -> list[tuple[str, str]]:
    return [(node.id, node.component_type) for node in iter_nodes(tree)]


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


class TestLexer:
    def test_tokens_with_positions(self) -> None:
        tokens = tokenize('<p class="a">x</p>')
        assert [t.type for t in tokens] == [TokenType.START_TAG, TokenType.TEXT, TokenType.END_TAG]
        assert [(t.line, t.col) for t in tokens] == [(1, 1), (1, 14), (1, 15)]
        assert tokens[0].attrs == (("class", "a"),)

    def test_self_closing(self) -> None:
        (token,) = tokenize('<img src="a.png"/>')
        assert token.self_closing
        assert token.tag == "img"

    def test_tag_names_lower_cased(self) -> None:
        assert tokenize("<TABLE></TABLE>")[0].tag == "table"

    def test_comments_and_doctype_dropped(self) -> None:
        tokens = tokenize("<!DOCTYPE html><!-- note --><p>x</p>")
        assert [t.tag for t in tokens if t.type is not TokenType.TEXT] == ["p", "p"]

    def test_character_references_decoded(self) -> None:
        tokens = tokenize('<a title="a &amp; b">&lt;x&gt;</a>')
        assert tokens[0].attrs == (("title", "a & b"),)
        assert tokens[1].text == "<x>"

    def test_valueless_attribute(self) -> None:
        assert tokenize("<td nowrap>")[0].attrs == (("nowrap", ""),)


# ---------------------------------------------------------------------------
# Element tree and errors
# ---------------------------------------------------------------------------


class TestElementTree:
    def test_nesting(self) -> None:
        document = build_element_tree(tokenize("<div><p>x</p><br></div>"))
        (div,) = document.elements()
        assert [e.tag for e in div.elements()] == ["p", "br"]

    def test_mismatched_close(self) -> None:
        markup = "<html>\n<body>\n<p>x</div>\n</body></html>"
        with pytest.raises(MarkupParseError) as exc_info:
            parse(markup)
        error = exc_info.value
        assert (error.line, error.col) == (3, 5)
        assert error.path == "3:5"
        assert "closes <p> opened at 3:1" in error.message
        assert error.fragment == "</div>"

    def test_unclosed_tag(self) -> None:
        with pytest.raises(MarkupParseError) as exc_info:
            parse("<html><body><p>x")
        assert exc_info.value.path == "1:13"
        assert "Unclosed tag <p>" in exc_info.value.message

    def test_stray_closing_tag(self) -> None:
        with pytest.raises(MarkupParseError, match="Unexpected closing tag"):
            parse("</p><html><body></body></html>")

    def test_missing_body(self) -> None:
        with pytest.raises(MarkupParseError, match="body"):
            parse("<p>x</p>")

    def test_optional_end_tags_not_inferred(self) -> None:
        with pytest.raises(MarkupParseError):
            parse(_body("<p>one<p>two"))

    def test_error_string_has_position(self) -> None:
        with pytest.raises(MarkupParseError) as exc_info:
            parse(_body("<p>x</span>"))
        assert " at 1:" in str(exc_info.value)

    def test_long_fragment_truncated(self) -> None:
        markup = f'<html><body><p title="{"x" * 100}">'
        with pytest.raises(MarkupParseError) as exc_info:
            parse(markup)
        assert exc_info.value.fragment.endswith("...")
        assert len(exc_info.value.fragment) == 63


# ---------------------------------------------------------------------------
# Tag mapping
# ---------------------------------------------------------------------------


class TestTagMapping:
    def test_plain_table_becomes_section_row_column(self) -> None:
        section = _only_child("<table><tr><td><p>Hi</p></td></tr></table>")
        assert section.component_type == "Section"
        (row,) = section.child_list()
        assert row.component_type == "Row"
        (column,) = row.child_list()
        assert column.component_type == "Column"
        assert column.child_list()[0].content == "Hi"

    def test_table_sections_transparent(self) -> None:
        section = _only_child("<table><tbody><tr><td></td></tr></tbody></table>")
        assert [c.component_type for c in section.child_list()] == ["Row"]

    @pytest.mark.parametrize(
        ("markup", "component_type"),
        [
            ("<p>x</p>", "Text"),
            ("<span>x</span>", "Text"),
            ('<a href="https://x.test">x</a>', "Link"),
            ('<img src="https://x.test/a.png"/>', "Image"),
            ("<hr/>", "Divider"),
            ("<pre>x</pre>", "CodeBlock"),
            ("<div></div>", "Section"),
            ("<center></center>", "Section"),
            ("<article></article>", "Section"),
        ],
    )
    def test_tag_to_type(self, markup: str, component_type: str) -> None:
        assert _only_child(markup).component_type == component_type

    def test_heading_level_kept(self) -> None:
        node = _only_child("<h3>Title</h3>")
        assert node.component_type == "Heading"
        assert node.properties["as"] == "h3"

    def test_explicit_type_wins(self) -> None:
        node = _only_child('<a data-component-type="Button" href="https://x.test">Go</a>')
        assert node.component_type == "Button"
        assert node.properties == {"href": "https://x.test"}

    def test_unknown_explicit_type_ignored(self) -> None:
        assert _only_child('<p data-component-type="Carousel">x</p>').component_type == "Text"

    def test_explicit_root_type_ignored(self) -> None:
        assert _only_child('<div data-component-type="Root"></div>').component_type == "Section"

    def test_attributes_become_properties(self) -> None:
        node = _only_child('<img src="a.png" width="600" height="auto" class="hero" aria-label="x"/>')
        assert node.properties == {
            "src": "a.png", "width": 600, "height": "auto", "className": "hero", "ariaLabel": "x",
        }

    def test_style_parsed(self) -> None:
        node = _only_child('<p style="color:#111111; font-weight:700">x</p>')
        assert node.style == {"color": "#111111", "fontWeight": "700"}

    def test_fixed_table_attrs_dropped(self) -> None:
        node = _only_child('<table role="presentation" width="100%" cellpadding="0"></table>')
        assert node.properties == {}

    def test_leaf_markup_flattened(self) -> None:
        node = _only_child("<p>  a <strong>b</strong><br/>c &amp; d  </p>")
        assert node.content == "a b\nc & d"
        assert not node.inline_markup

    def test_typed_text_whitespace_kept(self) -> None:
        node = _only_child('<p data-component-type="Text" data-component-id="sep"> • </p>')
        assert (node.id, node.content) == ("sep", " • ")

    def test_code_block_whitespace_preserved(self) -> None:
        assert _only_child("<pre>  x\n    y</pre>").content == "  x\n    y"

    def test_loose_text_becomes_text_node(self) -> None:
        node = _only_child("  hello  ")
        assert (node.id, node.component_type, node.content) == ("text-1", "Text", "hello")

    def test_ignored_elements(self) -> None:
        tree = parse(_body("<script>alert(1)</script><style>p{}</style><br/>"))
        assert tree.child_list() == ()

    def test_preview_meta_restored(self) -> None:
        markup = '<html><head><meta name="preview" content="Hi there"/></head><body></body></html>'
        (preview,) = parse(markup).child_list()
        assert (preview.id, preview.component_type, preview.content) == ("preview-text", "Preview", "Hi there")

    def test_body_attributes_become_root_properties(self) -> None:
        tree = parse('<html><body data-component-id="email" style="margin:0"></body></html>')
        assert tree.id == "email"
        assert tree.component_type == "Root"
        assert tree.style == {"margin": "0"}


class TestIds:
    def test_generated_ids_per_tag(self) -> None:
        tree = parse(_body("<p>a</p><p>b</p><hr/>"))
        assert [c.id for c in tree.child_list()] == ["p-1", "p-2", "hr-1"]

    def test_duplicate_explicit_ids_suffixed(self) -> None:
        tree = parse(_body('<p data-component-id="a">1</p><p data-component-id="a">2</p>'))
        assert [c.id for c in tree.child_list()] == ["a", "a-2"]

    def test_generated_ids_avoid_explicit_ones(self) -> None:
        tree = parse(_body('<p>1</p><p data-component-id="p-1">2</p>'))
        assert [c.id for c in tree.child_list()] == ["p-2", "p-1"]

    def test_parser_instance_reusable(self) -> None:
        parser = MarkupParser()
        first = parser.parse(_body("<p>a</p>"))
        second = parser.parse(_body("<p>a</p>"))
        assert first == second


# ---------------------------------------------------------------------------
# Round trips
# ---------------------------------------------------------------------------


def _email() -> DocumentNode:
    return compile_email(
        [
            {"kind": "hero", "headline": "Welcome", "ctaText": "Start", "ctaUrl": "https://x.test"},
            {"kind": "features", "features": [{"title": "Fast", "description": "Quick"}, {"title": "Safe"}]},
            {"kind": "cta", "headline": "Ready?", "buttonText": "Go", "buttonUrl": "https://x.test/go"},
        ],
        preview_text="Hello & welcome",
    )


class TestRoundTrip:
    @pytest.mark.parametrize("pretty", [False, True])
    def test_render_parse_render_is_stable(self, pretty: bool) -> None:
        tree = _email()
        markup = render(tree, pretty=pretty).markup
        assert render(parse(markup), pretty=pretty).markup == markup

    def test_sample_tree_stable(self, sample_tree: DocumentNode) -> None:
        markup = render(sample_tree).markup
        assert render(parse(markup)).markup == markup

    def test_ids_and_types_restored(self) -> None:
        tree = _email()
        assert _shape(parse(render(tree).markup)) == _shape(tree)

    def test_leaf_content_and_links_restored(self, sample_tree: DocumentNode) -> None:
        parsed = parse(render(sample_tree).markup)
        cta = find_by_id(parsed, "cta")
        assert cta is not None
        assert (cta.component_type, cta.content, cta.properties["href"]) == (
            "Button", "Start", "https://example.com",
        )
        title = find_by_id(parsed, "title")
        assert title is not None and title.properties["as"] == "h1"

    def test_preview_restored(self) -> None:
        parsed = parse(render(_email()).markup)
        preview = parsed.child_list()[0]
        assert (preview.id, preview.content) == ("preview-text", "Hello & welcome")
