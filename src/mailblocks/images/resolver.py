"""Resilient image resolution.

``ImageResolver`` walks a chain of providers, by default Unsplash search
then seeded Picsum placeholders.  Each provider runs only after the
previous one failed or returned nothing; a provider exception is logged
and never propagated.  When every provider comes up empty, the caller's
original URL is kept, and failing that a generic placeholder is used, so
resolution always produces an image.

Usage
-----
::

    import asyncio
    from mailblocks.images import ImageResolver

    result = asyncio.run(ImageResolver().resolve_image("coffee beans", 600, 400))
    result.source  # "unsplash", "picsum", "original" or "placeholder"
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterator, Sequence
from typing import Any, Union

from mailblocks.compiler.blocks import SemanticBlock
from mailblocks.compiler.helpers import is_valid_image_url, placeholder_url
from mailblocks.images.keywords import Orientation, image_dimensions, simplify_keyword
from mailblocks.images.providers import (
    ImageProvider,
    ImageRequest,
    ImageResult,
    PicsumProvider,
    UnsplashProvider,
)

logger = logging.getLogger(__name__)

#: ``(list field or None, keyword key, url key)`` per block kind.  A ``None``
#: list field addresses the block itself; a field holding a mapping
#: addresses that mapping.
KEYWORD_TARGETS: dict[str, tuple[tuple[str | None, str, str], ...]] = {
    "features": (("features", "imageKeyword", "imageUrl"),),
    "list": (("items", "imageKeyword", "imageUrl"),),
    "ecommerce": (("products", "imageKeyword", "imageUrl"),),
    "gallery": (("images", "keyword", "url"),),
    "articles": (("articles", "imageKeyword", "imageUrl"),),
    "testimonial": ((None, "authorImageKeyword", "authorImage"),),
    "article": (("author", "imageKeyword", "imageUrl"), ("cards", "imageKeyword", "imageUrl")),
}
_BLOCK_TARGET = (None, "imageKeyword", "imageUrl")


class ImageResolver:
    """Resolves search keywords to image URLs through a provider chain.

    Parameters
    ----------
    providers:
        Providers tried in order.  Defaults to ``UnsplashProvider`` followed
        by ``PicsumProvider``.
    """

    def __init__(self, providers: Sequence[ImageProvider] | None = None) -> None:
        self._providers: list[ImageProvider] = (
            list(providers) if providers is not None else [UnsplashProvider(), PicsumProvider()]
        )

    @property
    def providers(self) -> list[ImageProvider]:
        return list(self._providers)

    async def resolve_image(
        self,
        query: str,
        width: int = 600,
        height: int = 300,
        orientation: Orientation = "landscape",
        original_url: str | None = None,
    ) -> ImageResult:
        """Return an image for ``query``; never raises."""
        request = ImageRequest(query, width, height, orientation)
        for provider in self._providers:
            try:
                result = await provider.fetch(request)
            except Exception as exc:
                logger.warning(
                    "Image provider %s failed for %r: %s", provider.name, query, exc
                )
                continue
            if result is not None and result.url:
                return result
            logger.info("Image provider %s had nothing for %r", provider.name, query)

        if original_url:
            logger.warning("Keeping original image URL for %r", query)
            return ImageResult(original_url, "original", alt=query)
        logger.warning("Using generic placeholder image for %r", query)
        return ImageResult(placeholder_url(width, height), "placeholder", alt="Image placeholder")

    async def resolve_images(
        self, requests: Sequence[Union[ImageRequest, str]]
    ) -> list[ImageResult]:
        """Resolve ``requests`` concurrently, preserving their order."""
        normalized = [r if isinstance(r, ImageRequest) else ImageRequest(r) for r in requests]
        results = await asyncio.gather(*(
            self.resolve_image(r.query, r.width, r.height, r.orientation) for r in normalized
        ))
        found = sum(1 for r in results if r.source == "unsplash")
        logger.info("Resolved %d image(s), %d from search", len(results), found)
        return list(results)

    async def hydrate_block_images(
        self, blocks: Sequence[Union[SemanticBlock, dict[str, Any]]]
    ) -> list[SemanticBlock]:
        """Return copies of ``blocks`` with image keywords resolved to URLs.

        Keywords are simplified before searching, and each distinct
        ``(keyword, size)`` pair is looked up once.  Fields that already hold
        a usable URL are kept.
        """
        parsed = [b if isinstance(b, SemanticBlock) else SemanticBlock.from_dict(dict(b)) for b in blocks]

        wanted: dict[tuple[str, int, int, str], None] = {}
        for block in parsed:
            for _, _, keyword, _ in _keyword_slots(block):
                wanted.setdefault(_request_key(block.kind, keyword), None)
        if not wanted:
            return parsed

        keys = list(wanted)
        results = await asyncio.gather(*(
            self.resolve_image(simplify_keyword(keyword), width, height, orientation)  # type: ignore[arg-type]
            for keyword, width, height, orientation in keys
        ))
        resolved = dict(zip(keys, results))
        return [_apply(block, resolved) for block in parsed]


def _request_key(kind: str, keyword: str) -> tuple[str, int, int, str]:
    width, height, orientation = image_dimensions(kind, keyword)
    return keyword, width, height, orientation


def _targets(kind: str) -> tuple[tuple[str | None, str, str], ...]:
    return (_BLOCK_TARGET, *KEYWORD_TARGETS.get(kind, ()))


def _keyword_slots(block: SemanticBlock) -> Iterator[tuple[str | None, int | None, str, str]]:
    """Yield ``(field, index, keyword, url_key)`` for every unresolved keyword."""
    for field_name, keyword_key, url_key in _targets(block.kind):
        if field_name is None:
            entries: list[tuple[int | None, Any]] = [(None, block.fields)]
        else:
            value = block.fields.get(field_name)
            if isinstance(value, dict):
                entries = [(None, value)]
            elif isinstance(value, list):
                entries = list(enumerate(value))
            else:
                continue
        for index, entry in entries:
            if not isinstance(entry, dict):
                continue
            keyword = entry.get(keyword_key)
            if keyword and not is_valid_image_url(entry.get(url_key)):
                yield field_name, index, str(keyword), url_key


def _apply(
    block: SemanticBlock, resolved: dict[tuple[str, int, int, str], ImageResult]
) -> SemanticBlock:
    updates: dict[str, Any] = {}
    for field_name, index, keyword, url_key in _keyword_slots(block):
        url = resolved[_request_key(block.kind, keyword)].url
        if field_name is None:
            updates[url_key] = url
            continue
        current = updates.get(field_name, block.fields[field_name])
        if index is None:
            updates[field_name] = {**current, url_key: url}
        else:
            items = list(current)
            items[index] = {**items[index], url_key: url}
            updates[field_name] = items
    return block.with_fields(**updates) if updates else block


async def resolve_image(
    query: str,
    width: int = 600,
    height: int = 300,
    orientation: Orientation = "landscape",
    original_url: str | None = None,
) -> ImageResult:
    """Resolve one image with the default provider chain."""
    return await ImageResolver().resolve_image(query, width, height, orientation, original_url)


async def resolve_images(requests: Sequence[Union[ImageRequest, str]]) -> list[ImageResult]:
    """Resolve several images concurrently with the default provider chain."""
    return await ImageResolver().resolve_images(requests)


async def hydrate_block_images(
    blocks: Sequence[Union[SemanticBlock, dict[str, Any]]],
    resolver: ImageResolver | None = None,
) -> list[SemanticBlock]:
    """Resolve image keywords in ``blocks``; see :meth:`ImageResolver.hydrate_block_images`."""
    return await (resolver or ImageResolver()).hydrate_block_images(blocks)
