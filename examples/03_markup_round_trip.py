#!/usr/bin/env python3
"""Example: Markup round trip

Renders a compiled email, parses the markup back into a tree and shows
that component ids and types survive, then reports parse errors with
their source position.

Usage:
    python examples/03_markup_round_trip.py

Requirements:
    pip install mailblocks
"""
from __future__ import annotations

import mailblocks
from mailblocks.errors import MarkupParseError
from mailblocks.tree import iter_nodes

BLOCKS = [
    {"kind": "heading", "heading": "Release notes"},
    {"kind": "code", "code": "pip install --upgrade acme"},
    {"kind": "buttons", "buttons": [
        {"text": "Changelog", "url": "https://acme.example/changelog"},
        {"text": "Docs", "url": "https://acme.example/docs"},
    ]},
]


def main() -> None:
    tree = mailblocks.compile_email(BLOCKS, preview_text="Version 2 is out")
    markup = mailblocks.render(tree).markup
    restored = mailblocks.parse(markup)

    original = [(n.id, n.component_type) for n in iter_nodes(tree)]
    parsed = [(n.id, n.component_type) for n in iter_nodes(restored)]
    print(f"{len(original)} nodes rendered, {len(parsed)} nodes parsed, identical: {original == parsed}")
    print(f"Re-rendered markup identical: {mailblocks.render(restored).markup == markup}")

    broken = markup.replace("</pre>", "</div>", 1)
    try:
        mailblocks.parse(broken)
    except MarkupParseError as exc:
        print(f"Broken markup rejected at {exc.line}:{exc.col}: {exc.message}")


if __name__ == "__main__":
    main()
