"""Shared test fixtures for mailblocks.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest

from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.settings import GlobalEmailSettings


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "mailblocks"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def settings() -> GlobalEmailSettings:
    """Default presentation settings."""
    return GlobalEmailSettings()


@pytest.fixture()
def sample_tree() -> DocumentNode:
    """A small valid tree: Root > Section > Row > (Column > Heading, Column > Text+Button)."""
    heading = DocumentNode("title", ComponentType.HEADING, {"as": "h1"}, content="Hello")
    text = DocumentNode("body", ComponentType.TEXT, content="Welcome aboard")
    button = DocumentNode(
        "cta", ComponentType.BUTTON, {"href": "https://example.com"}, content="Start"
    )
    left = DocumentNode("col-a", ComponentType.COLUMN, children=(heading,))
    right = DocumentNode("col-b", ComponentType.COLUMN, children=(text, button))
    row = DocumentNode("row", ComponentType.ROW, children=(left, right))
    section = DocumentNode("section", ComponentType.SECTION, children=(row,))
    return DocumentNode("root", ComponentType.ROOT, children=(section,))


@pytest.fixture()
def hero_block() -> dict[str, str]:
    """A hero block without an image."""
    return {
        "kind": "hero",
        "headline": "Welcome",
        "ctaText": "Start",
        "ctaUrl": "https://x.test",
    }
