"""Thingiverse source adapter.

With an API token the official REST API is used. Without one (or when the
API fails) search falls back to the public search page: first the embedded
Next.js state, then plain card scraping. Popular listings without a token
come from a curated seed list.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from bs4 import BeautifulSoup

from model_search.models import ModelRecord, SourceId
from model_search.sources.base import ModelSource
from model_search.sources.fields import absolute_url, pick, pick_int, pick_list, pick_str
from model_search.sources.http import (
    JSON_HEADERS,
    encode_component,
    ensure_ok,
    extract_next_data,
    first_successful,
    parse_json,
)
from model_search.sources.seeds import seed_records

logger = logging.getLogger(__name__)

API_URL = "https://api.thingiverse.com"
SEARCH_PAGE_URL = "https://www.thingiverse.com/search"

_CARD_SELECTOR = (
    '[class*="ThingCard"], [class*="thing-card"], .thing-card-body, a[href*="/thing:"]'
)


class ThingiverseSource(ModelSource):
    base_url = "https://www.thingiverse.com"

    def __init__(self, client: httpx.AsyncClient, api_key: str = "") -> None:
        super().__init__(client)
        self.api_key = api_key

    @property
    def source_name(self) -> SourceId:
        return SourceId.THINGIVERSE

    def search_page_url(self, query: str) -> str:
        return f"{SEARCH_PAGE_URL}?q={encode_component(query)}&type=things&sort=popular"

    # ------------------------------------------------------------------
    # Parsers
    # ------------------------------------------------------------------

    def _parse_thing(self, thing: dict[str, Any]) -> ModelRecord:
        thing_id = pick(thing, "id")
        if thing_id is None:
            raise ValueError("thing without id")
        return ModelRecord(
            title=pick_str(thing, "name"),
            creator=pick_str(thing, "creator.name", "creator.username"),
            thumbnail=pick_str(thing, "preview_image", "thumbnail"),
            url=f"{self.base_url}/thing:{thing_id}",
            likes=pick_int(thing, "like_count", "likes"),
            downloads=pick_int(thing, "download_count", "downloads", "collect_count"),
            source=SourceId.THINGIVERSE,
        )

    def _parse_next_data(self, html: str) -> list[ModelRecord]:
        next_data = extract_next_data(html)
        if next_data is None:
            return []
        things = pick_list(
            next_data,
            "props.pageProps.things",
            "props.pageProps.searchResults.things",
            "props.pageProps.initialState.search.results",
        )
        return self._records(things, self._parse_thing)

    def _parse_cards(self, html: str, limit: int) -> list[ModelRecord]:
        soup = BeautifulSoup(html, "html.parser")
        records: list[ModelRecord] = []
        seen: set[str] = set()
        for card in soup.select(_CARD_SELECTOR):
            if len(records) >= limit:
                break
            link = card if card.name == "a" else card.select_one('a[href*="/thing:"]')
            href = link.get("href") if link is not None else None
            if not href or "/thing:" not in href:
                continue
            url = absolute_url(href, self.base_url)
            if url in seen:
                continue
            seen.add(url)
            title_node = card.select_one('[class*="title"], [class*="name"], h3, h4')
            title = title_node.get_text(strip=True) if title_node else ""
            img = card.find("img")
            thumbnail = (img.get("src") or img.get("data-src") or "") if img else ""
            records.append(
                ModelRecord(
                    title=title or link.get("title") or "",
                    thumbnail=thumbnail,
                    url=url,
                    source=SourceId.THINGIVERSE,
                )
            )
        return records

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    async def _api_get(self, path: str, params: dict[str, Any]) -> list[ModelRecord]:
        response = await self._client.get(
            f"{API_URL}{path}",
            params=params,
            headers={**JSON_HEADERS, "Authorization": f"Bearer {self.api_key}"},
        )
        data = parse_json("thingiverse", ensure_ok("thingiverse", response))
        records = self._records(pick_list(data, "hits"), self._parse_thing)
        logger.info("Thingiverse API: found %d results for %s", len(records), path)
        return records

    async def _from_api(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        return await self._api_get(
            f"/search/{encode_component(query)}",
            {"per_page": limit, "page": page, "sort": "relevant"},
        )

    async def _from_search_page(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(
            SEARCH_PAGE_URL,
            params={"q": query, "type": "things", "sort": "relevant", "page": page},
        )
        html = response.text
        return self._parse_next_data(html) or self._parse_cards(html, limit)

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        strategies = [lambda: self._from_search_page(query, limit, page)]
        if self.api_key:
            strategies.insert(0, lambda: self._from_api(query, limit, page))
        else:
            logger.debug("No Thingiverse API key provided")
        return await first_successful("thingiverse", *strategies)

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        if self.api_key:
            records = await first_successful(
                "thingiverse", lambda: self._api_get("/popular", {"per_page": limit})
            )
            if records:
                return records
        logger.info("thingiverse: using curated popular list")
        return seed_records(SourceId.THINGIVERSE, limit)
