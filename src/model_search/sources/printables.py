"""Printables GraphQL source adapter."""

from __future__ import annotations

from typing import Any

import httpx

from model_search.models import ModelRecord, SourceId
from model_search.sources.base import ModelSource
from model_search.sources.fields import pick, pick_int, pick_list, pick_str
from model_search.sources.http import JSON_HEADERS, encode_component, ensure_ok, parse_json

GRAPHQL_URL = "https://api.printables.com/graphql/"
MEDIA_URL = "https://media.printables.com/"

# Used when the popularity ordering returns nothing.
POPULAR_FALLBACK_QUERY = "gridfinity"

_ITEM_FIELDS = """
    items {
        id
        name
        slug
        likesCount
        downloadCount
        user {
            publicUsername
        }
        image {
            filePath
        }
    }
"""

SEARCH_QUERY = (
    "query SearchPrints($query: String!, $limit: Int, $offset: Int) {"
    " searchPrints2(query: $query, limit: $limit, offset: $offset) {"
    f"{_ITEM_FIELDS}"
    " } }"
)

POPULAR_QUERY = (
    "query SearchPrints($limit: Int) {"
    ' searchPrints2(query: "", limit: $limit, ordering: "-download_count") {'
    f"{_ITEM_FIELDS}"
    " } }"
)


class PrintablesSource(ModelSource):
    """Printables adapter backed by the public GraphQL endpoint."""

    base_url = "https://www.printables.com"

    @property
    def source_name(self) -> SourceId:
        return SourceId.PRINTABLES

    def search_page_url(self, query: str) -> str:
        return f"{self.base_url}/search/models?q={encode_component(query)}"

    @staticmethod
    def _parse_item(item: dict[str, Any]) -> ModelRecord:
        model_id = pick(item, "id")
        if model_id is None:
            raise ValueError("item without id")
        file_path = pick_str(item, "image.filePath")
        return ModelRecord(
            title=pick_str(item, "name"),
            creator=pick_str(item, "user.publicUsername"),
            thumbnail=f"{MEDIA_URL}{file_path}" if file_path else "",
            url=f"https://www.printables.com/model/{model_id}-{pick_str(item, 'slug')}",
            likes=pick_int(item, "likesCount"),
            downloads=pick_int(item, "downloadCount"),
            source=SourceId.PRINTABLES,
        )

    async def _post(self, document: str, variables: dict[str, Any]) -> httpx.Response:
        return await self._client.post(
            GRAPHQL_URL,
            json={"query": document, "variables": variables},
            headers={**JSON_HEADERS, "Content-Type": "application/json"},
        )

    def _parse_response(self, response: httpx.Response) -> list[ModelRecord]:
        data = parse_json("printables", ensure_ok("printables", response))
        return self._records(pick_list(data, "data.searchPrints2.items"), self._parse_item)

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._post(
            SEARCH_QUERY,
            {"query": query, "limit": limit, "offset": (page - 1) * limit},
        )
        return self._parse_response(response)

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        # Network errors abort; an error status or empty ordering falls back
        # to a search for a perennially popular term.
        response = await self._post(POPULAR_QUERY, {"limit": limit})
        if response.is_success:
            records = self._parse_response(response)
            if records:
                return records
        return await self.search(POPULAR_FALLBACK_QUERY, limit)
