"""Thangs source adapter.

Search tries the models search API, then the generic search API. Popular
listings come from a curated seed list because the site sits behind
Cloudflare.
"""

from __future__ import annotations

import logging
from typing import Any

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

MODELS_SEARCH_URL = "https://thangs.com/api/models/search"
SEARCH_URL = "https://thangs.com/api/search"


class ThangsSource(ModelSource):
    base_url = "https://thangs.com"

    @property
    def source_name(self) -> SourceId:
        return SourceId.THANGS

    def search_page_url(self, query: str) -> str:
        return f"{self.base_url}/search/{encode_component(query)}?scope=all"

    def _parse_item(self, item: dict[str, Any]) -> ModelRecord:
        url = absolute_url(pick_str(item, "publicUrl", "url"), self.base_url)
        if not url:
            model_id = pick(item, "id", "modelId")
            if model_id is None:
                raise ValueError("item without id or url")
            url = f"{self.base_url}/model/{model_id}"
        return ModelRecord(
            title=pick_str(item, "name", "title"),
            creator=pick_str(item, "owner.username", "ownerUsername", "creator"),
            thumbnail=pick_str(item, "thumbnailUrl", "previewUrl", "thumbnail"),
            url=url,
            likes=pick_int(item, "likes", "likeCount"),
            downloads=pick_int(item, "downloads", "downloadCount"),
            source=SourceId.THANGS,
        )

    async def _from_models_api(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(
            MODELS_SEARCH_URL,
            params={"q": query, "limit": limit, "page": page, "sort": "popular"},
            headers=JSON_HEADERS,
        )
        data = parse_json("thangs", ensure_ok("thangs", response))
        return self._records(pick_list(data, "results", "models"), self._parse_item)

    async def _from_search_api(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(
            SEARCH_URL,
            params={"query": query, "pageSize": limit, "page": page},
            headers=JSON_HEADERS,
        )
        data = parse_json("thangs", ensure_ok("thangs", response))
        return self._records(pick_list(data, "models", "results"), self._parse_item)

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        return await first_successful(
            "thangs",
            lambda: self._from_models_api(query, limit, page),
            lambda: self._from_search_api(query, limit, page),
        )

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        logger.info("thangs: using curated popular list")
        return seed_records(SourceId.THANGS, limit)
