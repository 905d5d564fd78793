"""Image providers for the resolution fallback chain.

Defines the ``ImageProvider`` protocol plus two built-in implementations:

- ``UnsplashProvider``: searches the Unsplash API with ``httpx``.
- ``PicsumProvider``: deterministic seeded placeholders; never fails.

Usage
-----
::

    from mailblocks.images.providers import ImageRequest, UnsplashProvider

    provider = UnsplashProvider(access_key="...")
    result = await provider.fetch(ImageRequest("mountain lake"))
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, Literal, Protocol, runtime_checkable
from urllib.parse import quote

import httpx

from mailblocks.compiler.helpers import PLACEHOLDER_BASE
from mailblocks.images.keywords import Orientation
from mailblocks.settings import unsplash_access_key

logger = logging.getLogger(__name__)

ImageSource = Literal["unsplash", "picsum", "original", "placeholder"]


@dataclass(frozen=True)
class ImageRequest:
    """What to look for.

    Parameters
    ----------
    query:
        Search keywords.
    width, height:
        Requested pixel dimensions.
    orientation:
        Preferred orientation passed to search providers.
    """

    query: str
    width: int = 600
    height: int = 300
    orientation: Orientation = "landscape"


@dataclass(frozen=True)
class ImageResult:
    """A resolved image.

    Parameters
    ----------
    url:
        Image URL.
    source:
        Which stage of the chain produced the URL.
    alt:
        Alternative text.
    credit:
        Photographer name to credit, when the source requires attribution.
    """

    url: str
    source: ImageSource
    alt: str = ""
    credit: str | None = None


@runtime_checkable
class ImageProvider(Protocol):
    """Protocol for image back-ends.

    ``fetch`` returns ``None`` when the provider has nothing for the
    request; it may also raise, in which case the resolver moves on to the
    next provider.
    """

    name: str

    async def fetch(self, request: ImageRequest) -> ImageResult | None:
        """Return an image for ``request``, or ``None``."""
        ...  # pragma: no cover


class UnsplashProvider:
    """Unsplash random-photo search.

    Parameters
    ----------
    access_key:
        API access key; defaults to the ``UNSPLASH_ACCESS_KEY`` environment
        variable.  Without a key the provider returns ``None``.
    client:
        Shared ``httpx.AsyncClient``.  When omitted a client is created per
        request.
    timeout:
        Request timeout in seconds.
    """

    name = "unsplash"
    API_ENDPOINT = "https://api.unsplash.com/photos/random"

    def __init__(
        self,
        access_key: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
    ) -> None:
        self._access_key = access_key if access_key is not None else unsplash_access_key()
        self._client = client
        self._timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self._access_key)

    async def fetch(self, request: ImageRequest) -> ImageResult | None:
        """Fetch one random photo matching ``request.query``.

        Raises
        ------
        httpx.HTTPError
            On transport failures and non-success responses.
        """
        if not self._access_key:
            logger.warning("UNSPLASH_ACCESS_KEY not configured, skipping Unsplash")
            return None
        params = {"query": request.query, "orientation": request.orientation, "count": "1"}
        headers = {"Authorization": f"Client-ID {self._access_key}", "Accept-Version": "v1"}
        if self._client is not None:
            response = await self._client.get(
                self.API_ENDPOINT, params=params, headers=headers, timeout=self._timeout
            )
        else:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                response = await client.get(self.API_ENDPOINT, params=params, headers=headers)
        response.raise_for_status()
        payload: Any = response.json()
        photo = payload[0] if isinstance(payload, list) and payload else payload
        if not isinstance(photo, dict) or not photo.get("urls"):
            return None
        return ImageResult(
            url=self._sized_url(photo["urls"], request),
            source="unsplash",
            alt=photo.get("alt_description") or photo.get("description") or request.query,
            credit=(photo.get("user") or {}).get("name"),
        )

    @staticmethod
    def _sized_url(urls: dict[str, str], request: ImageRequest) -> str:
        raw = urls.get("raw")
        if not raw:
            return urls.get("regular", "")
        separator = "&" if "?" in raw else "?"
        return f"{raw}{separator}w={request.width}&h={request.height}&fit=crop"


def picsum_seed(keyword: str) -> str:
    """Return the placeholder seed for ``keyword``: dashes for spaces, lower case."""
    return re.sub(r"\s+", "-", keyword.strip()).lower()


class PicsumProvider:
    """Seeded placeholder photos; the same keyword always yields the same URL."""

    name = "picsum"

    async def fetch(self, request: ImageRequest) -> ImageResult | None:
        seed = picsum_seed(request.query)
        if not seed:
            return None
        return ImageResult(
            url=f"{PLACEHOLDER_BASE}/seed/{quote(seed, safe='')}/{request.width}/{request.height}",
            source="picsum",
            alt=request.query,
        )
