"""Server-side image fetching for hotlink-protected thumbnails."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import unquote, urlsplit

import httpx

from model_search.models import is_absolute_http_url
from model_search.services.cache import TTLCache
from model_search.sources.http import USER_AGENT

logger = logging.getLogger(__name__)

IMAGE_TTL_S = 30 * 60
IMAGE_CACHE_MAX_ENTRIES = 100
DEFAULT_CONTENT_TYPE = "image/jpeg"

# Matched against the image host, first suffix wins.
REFERERS: tuple[tuple[str, str], ...] = (
    ("thingiverse.com", "https://www.thingiverse.com/"),
    ("thangs.com", "https://thangs.com/"),
    ("myminifactory.com", "https://www.myminifactory.com/"),
    ("creality.com", "https://www.crealitycloud.com/"),
    ("crealitycloud.com", "https://www.crealitycloud.com/"),
    ("printables.com", "https://www.printables.com/"),
    ("youmagine.com", "https://youmagine.com/"),
)


class ImageProxyError(Exception):
    """Base exception for image proxy failures (HTTP 500 unless overridden)."""

    status_code = 500


class InvalidImageURLError(ImageProxyError):
    status_code = 400


class UpstreamImageError(ImageProxyError):
    """Upstream answered with an error status, mirrored to the client."""

    def __init__(self, status_code: int, url: str) -> None:
        super().__init__(f"Upstream returned HTTP {status_code} for {url}")
        self.status_code = status_code


@dataclass(frozen=True)
class ProxiedImage:
    content: bytes
    content_type: str


def referer_for(url: str) -> str:
    host = (urlsplit(url).hostname or "").lower()
    for domain, referer in REFERERS:
        if host == domain or host.endswith(f".{domain}"):
            return referer
    return ""


def image_headers(url: str) -> dict[str, str]:
    return {
        "User-Agent": USER_AGENT,
        "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
        "Accept-Language": "en-US,en;q=0.9",
        "Referer": referer_for(url),
        "Sec-Fetch-Dest": "image",
        "Sec-Fetch-Mode": "no-cors",
        "Sec-Fetch-Site": "cross-site",
    }


class ImageProxy:
    """Fetch remote images with a site-appropriate referer and cache them."""

    def __init__(self, client: httpx.AsyncClient, cache: TTLCache[ProxiedImage]) -> None:
        self._client = client
        self._cache = cache

    async def fetch(self, raw_url: str | None) -> ProxiedImage:
        if not raw_url:
            raise InvalidImageURLError("URL parameter required")
        url = unquote(raw_url)
        if not is_absolute_http_url(url):
            raise InvalidImageURLError("Invalid URL")

        cached = self._cache.get(url)
        if cached is not None:
            return cached

        try:
            response = await self._client.get(url, headers=image_headers(url))
        except httpx.HTTPError as exc:
            raise ImageProxyError(f"Failed to fetch image: {exc}") from exc

        if not response.is_success:
            logger.error("Image proxy error: %d for %s", response.status_code, url)
            raise UpstreamImageError(response.status_code, url)

        image = ProxiedImage(
            content=response.content,
            content_type=response.headers.get("content-type") or DEFAULT_CONTENT_TYPE,
        )
        self._cache.put(url, image)
        return image
