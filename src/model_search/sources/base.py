"""Model source adapter abstraction."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable

import httpx

from model_search.models import ModelRecord, SourceId

logger = logging.getLogger(__name__)


class ModelSource(ABC):
    """Abstract base class for model file sources.

    Each source adapter translates a query into the specific site's API or
    search page and normalizes the response into ModelRecord objects.

    Subclasses implement ``_search`` and ``_fetch_popular`` and may raise
    freely. The public ``search`` and ``fetch_popular`` never raise: any
    failure is logged and degrades to an empty list, and results are
    truncated to ``limit``.
    """

    base_url: str = ""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    @property
    @abstractmethod
    def source_name(self) -> SourceId:
        """Unique identifier for this source (e.g. SourceId.THINGIVERSE)."""
        ...

    @abstractmethod
    def search_page_url(self, query: str) -> str:
        """Direct link to the site's own search page for ``query``."""
        ...

    @abstractmethod
    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        ...

    @abstractmethod
    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        ...

    async def search(
        self, query: str, limit: int = 10, page: int = 1
    ) -> list[ModelRecord]:
        try:
            records = await self._search(query, limit, page)
        except Exception as exc:
            logger.warning("%s search failed: %s", self.source_name.value, exc)
            return []
        return records[:limit]

    async def fetch_popular(self, limit: int = 10) -> list[ModelRecord]:
        try:
            records = await self._fetch_popular(limit)
        except Exception as exc:
            logger.warning("%s popular fetch failed: %s", self.source_name.value, exc)
            return []
        return records[:limit]

    def _records(
        self,
        items: list[dict[str, Any]],
        build: Callable[[dict[str, Any]], ModelRecord],
    ) -> list[ModelRecord]:
        """Normalize ``items`` with ``build``, skipping ones that fail validation."""
        records: list[ModelRecord] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            try:
                records.append(build(item))
            except ValueError as exc:
                logger.debug("%s: skipping item: %s", self.source_name.value, exc)
        return records
