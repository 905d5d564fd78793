#!/usr/bin/env python3
"""Example: Editing a compiled tree

Demonstrates the non-destructive tree API an editor uses: look nodes up
by id, patch their content, reorder siblings, insert new nodes and diff
the result against the original.

Usage:
    python examples/02_tree_editing.py

Requirements:
    pip install mailblocks
"""
from __future__ import annotations

import mailblocks
from mailblocks.nodes import ComponentType, DocumentNode
from mailblocks.tree import (
    find_by_id,
    flatten_editable,
    get_breadcrumbs,
    get_tree_stats,
    insert_child,
    move_among_siblings,
    update_by_id,
)

BLOCKS = [
    {"kind": "text", "content": "Hi there,"},
    {"kind": "text", "content": "Our **spring sale** starts today."},
    {"kind": "cta", "headline": "Don't miss out", "buttonText": "Shop now", "buttonUrl": "https://acme.example/sale"},
]


def main() -> None:
    tree = mailblocks.compile_email(BLOCKS)
    stats = get_tree_stats(tree)
    print(f"{stats.total_components} components, {stats.editable_components} editable, depth {stats.max_depth}")

    editable = flatten_editable(tree)
    print("Editable nodes:")
    for element in editable:
        print(f"  {element.id:<28} {element.component_type:<10} {element.path}")

    # Patch the first text node
    first = editable[0]
    edited = update_by_id(tree, first.id, {"content": "Hello friend,"})
    print(f"\nBreadcrumbs for '{first.id}': {' > '.join(get_breadcrumbs(edited, first.id))}")

    # Move the CTA section above the second text block
    cta_section = edited.child_list()[-1].child_list()[-1]
    edited = move_among_siblings(edited, cta_section.id, "up")

    # Add a signature line to the container
    container = find_by_id(edited, "email-container")
    if container is not None:
        signature = DocumentNode("signature", ComponentType.TEXT, content="The Acme team")
        edited = insert_child(edited, container.id, signature)

    print("\nChanges:")
    for change in mailblocks.diff(tree, edited):
        print(f"  {change}")


if __name__ == "__main__":
    main()
