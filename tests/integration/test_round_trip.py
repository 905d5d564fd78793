"""End-to-end tests: blocks -> tree -> markup -> tree."""
from __future__ import annotations

import pytest

import mailblocks
from mailblocks.differ import ChangeKind
from mailblocks.nodes import DocumentNode, NodeSerializer
from mailblocks.tree import iter_nodes, update_by_id

STRUCTURAL = {ChangeKind.NODE_ADDED, ChangeKind.NODE_REMOVED, ChangeKind.NODE_MOVED, ChangeKind.TYPE_CHANGED}

NEWSLETTER = [
    {"kind": "header", "companyName": "Acme", "menuItems": [
        {"label": "Blog", "url": "https://acme.test/blog"},
        {"label": "Shop", "url": "https://acme.test/shop"},
    ]},
    {"kind": "hero", "headline": "Spring update", "ctaText": "Read more", "ctaUrl": "https://acme.test/spring",
     "imageUrl": "https://cdn.acme.test/hero.jpg", "variant": "split"},
    {"kind": "stats", "stats": [{"value": "12k", "label": "Readers"}, {"value": "4.9", "label": "Rating"}]},
    {"kind": "testimonial", "quote": "Changed how we work.", "authorName": "Kim"},
    {"kind": "code", "code": "acme deploy --prod"},
    {"kind": "cta", "headline": "Try it", "buttonText": "Start", "buttonUrl": "https://acme.test/start",
     "style": "secondary"},
    {"kind": "footer", "companyName": "Acme", "unsubscribeUrl": "https://acme.test/unsubscribe",
     "variant": "two-column"},
]


@pytest.fixture()
def newsletter() -> DocumentNode:
    return mailblocks.compile_email(NEWSLETTER, settings={"primaryColor": "#0f766e"}, preview_text="Spring")


def _shape(tree: DocumentNode) -> list[tuple[str, str]]:
    return [(n.id, n.component_type) for n in iter_nodes(tree)]


class TestNewsletterRoundTrip:
    def test_compiled_tree_has_no_errors(self, newsletter: DocumentNode) -> None:
        assert not [d for d in mailblocks.validate(newsletter) if d.is_error]

    @pytest.mark.parametrize("pretty", [False, True])
    def test_ids_and_types_survive(self, newsletter: DocumentNode, pretty: bool) -> None:
        markup = mailblocks.render(newsletter, pretty=pretty).markup
        assert _shape(mailblocks.parse(markup)) == _shape(newsletter)

    def test_no_structural_changes(self, newsletter: DocumentNode) -> None:
        restored = mailblocks.parse(mailblocks.render(newsletter).markup)
        changes = mailblocks.diff(newsletter, restored)
        assert not [c for c in changes if c.kind in STRUCTURAL]

    def test_single_round_trip_is_exact(self, newsletter: DocumentNode) -> None:
        markup = mailblocks.render(newsletter).markup
        assert mailblocks.render(mailblocks.parse(markup)).markup == markup

    def test_reparsed_markup_is_a_fixed_point(self, newsletter: DocumentNode) -> None:
        once = mailblocks.render(mailblocks.parse(mailblocks.render(newsletter).markup)).markup
        assert mailblocks.render(mailblocks.parse(once)).markup == once

    def test_edit_survives_round_trip(self, newsletter: DocumentNode) -> None:
        edited = update_by_id(newsletter, "code-4-content", {"content": "acme rollback"})
        restored = mailblocks.parse(mailblocks.render(edited).markup)
        changes = mailblocks.diff(newsletter, restored)
        assert any(c.kind is ChangeKind.CONTENT_CHANGED and c.node_id == "code-4-content" for c in changes)

    def test_preview_first(self, newsletter: DocumentNode) -> None:
        restored = mailblocks.parse(mailblocks.render(newsletter).markup)
        assert [c.id for c in restored.child_list()] == ["preview-text", "email-container"]

    def test_serialized_tree_round_trips(self, newsletter: DocumentNode) -> None:
        serializer = NodeSerializer(allow_inline_markup=True)
        assert serializer.from_json(serializer.to_json(newsletter)) == newsletter
