"""Shared HTTP identity and helpers for source adapters."""

from __future__ import annotations

import json
import logging
import re
from urllib.parse import quote
from typing import Any, Awaitable, Callable

import httpx

from model_search.sources.exceptions import SourcePayloadError, UpstreamStatusError

logger = logging.getLogger(__name__)

USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

BROWSER_HEADERS: dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,image/apng,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Cache-Control": "no-cache",
}

JSON_HEADERS: dict[str, str] = {"Accept": "application/json"}

DEFAULT_TIMEOUT_S = 20.0

_NEXT_DATA_RE = re.compile(
    r'<script id="__NEXT_DATA__" type="application/json">([^<]+)</script>'
)


def encode_component(value: str) -> str:
    """Percent-encode ``value`` for use inside a URL path or query value.

    Leaves only unreserved characters and ``!'()*`` as-is, so a space becomes
    ``%20`` and ``/`` becomes ``%2F``.
    """
    return quote(value, safe="!'()*")


def create_client(timeout_s: float = DEFAULT_TIMEOUT_S) -> httpx.AsyncClient:
    """Client shared by all adapters and the image proxy."""
    return httpx.AsyncClient(
        headers=BROWSER_HEADERS,
        timeout=timeout_s,
        follow_redirects=True,
    )


def ensure_ok(source: str, response: httpx.Response) -> httpx.Response:
    if response.status_code >= 400:
        raise UpstreamStatusError(source, response.status_code)
    return response


def parse_json(source: str, response: httpx.Response) -> Any:
    try:
        return response.json()
    except (json.JSONDecodeError, ValueError) as exc:
        raise SourcePayloadError(f"{source} returned non-JSON payload") from exc


def extract_next_data(html: str) -> dict[str, Any] | None:
    """Return the embedded Next.js ``__NEXT_DATA__`` document, if any."""
    match = _NEXT_DATA_RE.search(html)
    if not match:
        return None
    try:
        data = json.loads(match.group(1))
    except (json.JSONDecodeError, ValueError):
        logger.debug("Unparseable __NEXT_DATA__ block")
        return None
    return data if isinstance(data, dict) else None


Strategy = Callable[[], Awaitable[list]]


async def first_successful(source: str, *strategies: Strategy) -> list:
    """Run acquisition strategies in order; first non-empty result wins.

    A strategy that raises or returns nothing falls through to the next one.
    """
    for index, strategy in enumerate(strategies, start=1):
        try:
            results = await strategy()
        except Exception as exc:
            logger.info("%s strategy %d failed: %s", source, index, exc)
            continue
        if results:
            return results
    return []
