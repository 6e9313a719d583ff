"""model-search: cross-site search for 3D-printable model files."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

from model_search.models import ALL_SOURCES, ModelRecord, SearchResponse, SourceId

if TYPE_CHECKING:
    from model_search.config import AppConfig


async def search(
    query: str,
    sites: Iterable[str] | None = None,
    limit: int | str | None = 10,
    page: int | str | None = 1,
    config: AppConfig | None = None,
) -> SearchResponse:
    """One-line convenience: search the selected sites and collect the results.

    Args:
        query: Search terms.
        sites: Site ids to query. If None, all sources are searched.
        limit: Results per site (clamped to 1-20).
        page: Result page (minimum 1).
        config: Optional AppConfig. If None, loads from environment.
    """
    from model_search.config import load_config
    from model_search.services.aggregator import (
        Aggregator,
        parse_limit,
        parse_page,
        parse_sites,
    )
    from model_search.sources.factory import create_sources
    from model_search.sources.http import create_client

    cfg = config or load_config()
    async with create_client(cfg.request_timeout_s) as client:
        aggregator = Aggregator(create_sources(client, cfg))
        search_limit = parse_limit(limit)
        search_page = parse_page(page)
        results = await aggregator.aggregate(
            parse_sites(sites), query, limit=search_limit, page=search_page
        )
    return SearchResponse(page=search_page, limit=search_limit, results=results)


__all__ = [
    "ALL_SOURCES",
    "ModelRecord",
    "SearchResponse",
    "SourceId",
    "search",
]
