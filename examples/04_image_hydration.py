#!/usr/bin/env python3
"""Example: Resolving image keywords

Fills ``imageUrl`` fields from ``imageKeyword`` hints before compiling.
Unsplash is used when ``UNSPLASH_ACCESS_KEY`` is set; otherwise the
resolver falls through to deterministic Picsum placeholders.

Usage:
    python examples/04_image_hydration.py

Requirements:
    pip install mailblocks
"""
from __future__ import annotations

import asyncio

import mailblocks
from mailblocks.images import ImageResolver

BLOCKS = [
    {
        "kind": "hero",
        "headline": "Summer retreat",
        "ctaText": "Book now",
        "ctaUrl": "https://acme.example/book",
        "imageKeyword": "a stunning mountain lake at sunrise",
    },
    {
        "kind": "testimonial",
        "quote": "Best weekend of the year.",
        "authorName": "Sam",
        "imageKeyword": "smiling portrait",
    },
]


async def main() -> None:
    blocks = await ImageResolver().hydrate_block_images(BLOCKS)
    for block in blocks:
        print(f"{block.kind:<12} {block.fields.get('imageUrl')}")
    tree = mailblocks.compile_email(blocks)
    print(f"\nRendered {len(mailblocks.render(tree).markup)} chars of markup")


if __name__ == "__main__":
    asyncio.run(main())
