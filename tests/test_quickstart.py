"""Test that the top-level quickstart API works for mailblocks."""
from __future__ import annotations

from mailblocks.nodes import DocumentNode


def test_quickstart_functions_importable() -> None:
    import mailblocks

    for name in ("compile_block", "compile_email", "render", "parse", "validate", "diff"):
        assert callable(getattr(mailblocks, name))


def test_quickstart_version(expected_version: str) -> None:
    import mailblocks

    assert mailblocks.__version__ == expected_version


def test_quickstart_compile_block(hero_block: dict[str, str]) -> None:
    import mailblocks

    section = mailblocks.compile_block(hero_block)
    assert section.component_type == "Section"
    assert section.id == "hero-section"


def test_quickstart_full_cycle() -> None:
    import mailblocks

    tree = mailblocks.compile_email(
        [
            {"kind": "hero", "headline": "Welcome", "ctaText": "Start", "ctaUrl": "https://x.test"},
            {"kind": "footer", "companyName": "Acme", "unsubscribeUrl": "https://x.test/unsubscribe"},
        ],
        settings={"primaryColor": "#1d4ed8"},
        preview_text="Thanks for signing up",
    )
    markup = mailblocks.render(tree).markup
    assert markup.startswith("<!DOCTYPE")

    restored = mailblocks.parse(markup)
    assert not [d for d in mailblocks.validate(restored) if d.is_error]
    changes = mailblocks.diff(tree, restored)
    assert not [c for c in changes if c.kind.name in ("NODE_ADDED", "NODE_REMOVED", "NODE_MOVED", "TYPE_CHANGED")]


def test_quickstart_render_plain_text(sample_tree: DocumentNode) -> None:
    import mailblocks

    result = mailblocks.render(sample_tree, plain_text=True)
    assert result.plain_text is not None
    assert "Welcome aboard" in result.plain_text


def test_quickstart_all_exports() -> None:
    import mailblocks

    assert set(mailblocks.__all__) == {
        "__version__", "compile_block", "compile_email", "render", "parse", "validate", "diff",
    }


def test_quickstart_diff_survives_submodule_import(sample_tree: DocumentNode) -> None:
    import mailblocks

    assert mailblocks.diff(sample_tree, sample_tree) == []
    import mailblocks.differ  # noqa: F401

    assert callable(mailblocks.diff)
    assert mailblocks.diff(sample_tree, sample_tree) == []
