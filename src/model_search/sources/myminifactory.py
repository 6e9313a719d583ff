"""MyMiniFactory source adapter."""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup

from model_search.models import ModelRecord, SourceId
from model_search.sources.base import ModelSource
from model_search.sources.fields import absolute_url, pick, pick_int, pick_list, pick_str
from model_search.sources.http import (
    JSON_HEADERS,
    encode_component,
    ensure_ok,
    first_successful,
    parse_json,
)
from model_search.sources.seeds import seed_records

logger = logging.getLogger(__name__)

API_SEARCH_URL = "https://www.myminifactory.com/api/v2/search"
SEARCH_PAGE_URL = "https://www.myminifactory.com/search/"


class MyMiniFactorySource(ModelSource):
    base_url = "https://www.myminifactory.com"

    @property
    def source_name(self) -> SourceId:
        return SourceId.MYMINIFACTORY

    def search_page_url(self, query: str) -> str:
        return f"{SEARCH_PAGE_URL}?query={encode_component(query)}"

    def _parse_item(self, item: dict[str, Any]) -> ModelRecord:
        url = absolute_url(pick_str(item, "url"), self.base_url)
        if not url:
            slug = pick(item, "slug", "id")
            if slug is None:
                raise ValueError("item without slug or url")
            url = f"{self.base_url}/object/{slug}"
        return ModelRecord(
            title=pick_str(item, "name", "title"),
            creator=pick_str(item, "designer.name", "designer.username", "user.name"),
            thumbnail=pick_str(item, "images.0.thumbnail.url", "images.0.url", "thumbnail"),
            url=url,
            likes=pick_int(item, "likes"),
            downloads=pick_int(item, "downloads", "views"),
            source=SourceId.MYMINIFACTORY,
        )

    def _parse_search_page(self, html: str, limit: int) -> list[ModelRecord]:
        soup = BeautifulSoup(html, "html.parser")
        records: list[ModelRecord] = []
        seen: set[str] = set()
        for link in soup.select('a[href*="/object/"]'):
            if len(records) >= limit:
                break
            href = link.get("href")
            if not href:
                continue
            url = absolute_url(href, self.base_url)
            card = link.find_parent(
                lambda tag: any(
                    "card" in cls or "item" in cls or cls == "col"
                    for cls in tag.get("class") or []
                )
            )
            title_node = card.select_one('[class*="title"], h3, h4, h5') if card else None
            title = title_node.get_text(strip=True) if title_node else link.get("title", "")
            if not title or url in seen:
                continue
            seen.add(url)
            img = card.find("img") if card else None
            thumbnail = (img.get("src") or img.get("data-src") or "") if img else ""
            records.append(
                ModelRecord(
                    title=title,
                    thumbnail=absolute_url(thumbnail, self.base_url),
                    url=url,
                    source=SourceId.MYMINIFACTORY,
                )
            )
        return records

    async def _from_api(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(
            API_SEARCH_URL,
            params={"q": query, "limit": limit, "page": page},
            headers=JSON_HEADERS,
        )
        data = parse_json("myminifactory", ensure_ok("myminifactory", response))
        return self._records(pick_list(data, "items", "objects", "results"), self._parse_item)

    async def _from_search_page(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(
            SEARCH_PAGE_URL, params={"query": query, "page": page}
        )
        return self._parse_search_page(response.text, limit)

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        return await first_successful(
            "myminifactory",
            lambda: self._from_api(query, limit, page),
            lambda: self._from_search_page(query, limit, page),
        )

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        logger.info("myminifactory: using curated popular list")
        return seed_records(SourceId.MYMINIFACTORY, limit)
