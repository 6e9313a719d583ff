"""Cached popular-model listings."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from model_search.services.aggregator import Aggregator, SearchResults, parse_limit
from model_search.services.cache import TTLCache

logger = logging.getLogger(__name__)

POPULAR_TTL_S = 5 * 60


def popular_cache_key(site_ids: Iterable[str], limit: int) -> str:
    return f"{','.join(sorted(site_ids))}-{limit}"


class PopularService:
    """Memoize aggregated popular listings per (sorted sites, limit).

    Concurrent misses on one key each fetch independently; the last one to
    finish wins the cache slot.
    """

    def __init__(self, aggregator: Aggregator, cache: TTLCache[SearchResults]) -> None:
        self._aggregator = aggregator
        self._cache = cache

    async def get_or_fetch(self, site_ids: Iterable[str], limit: Any) -> SearchResults:
        sites = list(site_ids)
        limit = parse_limit(limit)
        key = popular_cache_key(sites, limit)

        cached = self._cache.get(key)
        if cached is not None:
            logger.info("Returning cached popular models for %s", key)
            return cached

        logger.info("Fetching popular models for: %s", ", ".join(sites))
        results = await self._aggregator.aggregate(sites, popular=True, limit=limit)
        self._cache.put(key, results)
        return results
