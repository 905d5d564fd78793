#!/usr/bin/env python3
"""Example: Quickstart for mailblocks

Minimal working example: compile semantic blocks into a document tree,
validate it, render it to email markup and produce the plain-text part.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install mailblocks
"""
from __future__ import annotations

import mailblocks

BLOCKS = [
    {
        "kind": "hero",
        "headline": "Welcome to Acme",
        "subheadline": "Everything you need to ship faster",
        "ctaText": "Get started",
        "ctaUrl": "https://acme.example/start",
    },
    {
        "kind": "features",
        "features": [
            {"title": "Fast", "description": "Builds in seconds"},
            {"title": "Safe", "description": "Reviewed by default"},
            {"title": "Open", "description": "Works with your stack"},
        ],
    },
    {
        "kind": "footer",
        "companyName": "Acme Inc.",
        "unsubscribeUrl": "https://acme.example/unsubscribe",
    },
]


def main() -> None:
    print(f"mailblocks version: {mailblocks.__version__}")

    # Step 1: Compile blocks into a document tree
    tree = mailblocks.compile_email(
        BLOCKS,
        settings={"primaryColor": "#1d4ed8"},
        preview_text="Your account is ready",
    )
    print(f"Compiled tree '{tree.id}' with {len(tree.child_list())} top-level node(s)")

    # Step 2: Validate the tree
    diagnostics = mailblocks.validate(tree)
    errors = [d for d in diagnostics if d.is_error]
    print(f"Validation: {len(errors)} errors, {len(diagnostics) - len(errors)} other findings")
    for diag in diagnostics:
        print(f"  {diag}")

    # Step 3: Render markup and plain text
    result = mailblocks.render(tree, pretty=True, plain_text=True)
    print(f"\nMarkup ({len(result.markup)} chars):")
    print(result.markup[:300])
    print("\nPlain text:")
    print(result.plain_text)


if __name__ == "__main__":
    main()
