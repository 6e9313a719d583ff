"""Multi-source aggregator: fan a request out to adapters and join the results."""

from __future__ import annotations

import asyncio
import logging
import re
from typing import Any, Iterable

from model_search.models import ALL_SOURCES, ModelRecord, SourceId
from model_search.sources.base import ModelSource

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 10
MAX_LIMIT = 20
DEFAULT_PAGE = 1

SearchResults = dict[SourceId, list[ModelRecord]]


_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _parse_int(raw: Any) -> int | None:
    """Leading integer of ``raw`` ("12abc" -> 12, "7.9" -> 7), else None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT_RE.match(str(raw))
    return int(match.group(1)) if match else None


def parse_limit(raw: Any) -> int:
    """clamp(parsed or default, 1, 20); 0 and non-numeric fall back to 10."""
    value = _parse_int(raw) or DEFAULT_LIMIT
    return max(1, min(value, MAX_LIMIT))


def parse_page(raw: Any) -> int:
    return max(_parse_int(raw) or DEFAULT_PAGE, 1)


def parse_sites(raw: str | Iterable[str] | None) -> list[str]:
    """Split a comma list of site ids; an absent or blank value means all sites."""
    if raw is None:
        return [s.value for s in ALL_SOURCES]
    parts = raw.split(",") if isinstance(raw, str) else list(raw)
    sites = [p.strip().lower() for p in parts if p and p.strip()]
    return sites or [s.value for s in ALL_SOURCES]


class Aggregator:
    """Execute a search or popular listing across several sources concurrently."""

    def __init__(self, sources: list[ModelSource]) -> None:
        self._sources = {s.source_name: s for s in sources}

    @property
    def source_ids(self) -> list[SourceId]:
        return list(self._sources)

    def get(self, site: str) -> ModelSource | None:
        try:
            return self._sources.get(SourceId(site))
        except ValueError:
            return None

    def select(self, site_ids: Iterable[str]) -> list[ModelSource]:
        """Recognized sources among ``site_ids``, in request order, without repeats."""
        selected: dict[SourceId, ModelSource] = {}
        for site in site_ids:
            source = self.get(site)
            if source is not None and source.source_name not in selected:
                selected[source.source_name] = source
        return list(selected.values())

    async def _run(
        self,
        source: ModelSource,
        query: str | None,
        popular: bool,
        limit: int,
        page: int,
    ) -> tuple[SourceId, list[ModelRecord]]:
        name = source.source_name
        try:
            if popular:
                records = await source.fetch_popular(limit)
            else:
                records = await source.search(query or "", limit, page)
        except Exception as exc:
            logger.warning("Source '%s' failed: %s", name.value, exc)
            return name, []
        logger.info(
            "%s%s: found %d results", "popular " if popular else "", name.value, len(records)
        )
        return name, records

    async def aggregate(
        self,
        site_ids: Iterable[str],
        query: str | None = None,
        *,
        popular: bool = False,
        limit: Any = DEFAULT_LIMIT,
        page: Any = DEFAULT_PAGE,
    ) -> SearchResults:
        if not popular and not (query and query.strip()):
            raise ValueError('Query parameter "q" is required')

        limit = parse_limit(limit)
        page = parse_page(page)
        selected = self.select(site_ids)
        if not selected:
            return {}

        # Each task turns its own failure into an empty outcome, so the
        # join itself never faults.
        outcomes = await asyncio.gather(
            *(self._run(src, query, popular, limit, page) for src in selected)
        )
        return dict(outcomes)
