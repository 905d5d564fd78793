"""Asynchronous image resolution with a provider fallback chain."""
from __future__ import annotations

from mailblocks.images.keywords import STOP_WORDS, image_dimensions, simplify_keyword
from mailblocks.images.providers import (
    ImageProvider,
    ImageRequest,
    ImageResult,
    PicsumProvider,
    UnsplashProvider,
    picsum_seed,
)
from mailblocks.images.resolver import (
    ImageResolver,
    hydrate_block_images,
    resolve_image,
    resolve_images,
)

__all__ = [
    "STOP_WORDS",
    "ImageProvider",
    "ImageRequest",
    "ImageResolver",
    "ImageResult",
    "PicsumProvider",
    "UnsplashProvider",
    "hydrate_block_images",
    "image_dimensions",
    "picsum_seed",
    "resolve_image",
    "resolve_images",
    "simplify_keyword",
]
