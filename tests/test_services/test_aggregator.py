"""Tests for the multi-source aggregator."""

from __future__ import annotations

import asyncio

import pytest

from model_search.models import ModelRecord, SourceId
from model_search.services.aggregator import (
    Aggregator,
    parse_limit,
    parse_page,
    parse_sites,
)
from model_search.sources.base import ModelSource


def _make_record(source: SourceId, n: int = 0) -> ModelRecord:
    return ModelRecord(
        title=f"{source.value} {n}",
        url=f"https://example.com/{source.value}/{n}",
        source=source,
    )


class MockSource(ModelSource):
    """Adapter double: returns ``count`` records, or raises ``error`` internally."""

    def __init__(
        self,
        name: SourceId,
        count: int = 3,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        super().__init__(client=None)
        self._name = name
        self._count = count
        self._error = error
        self._delay = delay
        self.calls: list[tuple] = []

    @property
    def source_name(self) -> SourceId:
        return self._name

    def search_page_url(self, query: str) -> str:
        return f"https://example.com/{self._name.value}?q={query}"

    async def _produce(self, limit: int) -> list[ModelRecord]:
        if self._delay:
            await asyncio.sleep(self._delay)
        if self._error is not None:
            raise self._error
        return [_make_record(self._name, i) for i in range(self._count)]

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        self.calls.append(("search", query, limit, page))
        return await self._produce(limit)

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        self.calls.append(("popular", limit))
        return await self._produce(limit)


class ExplodingSource(MockSource):
    """Breaks the adapter contract by raising from the public method."""

    async def search(self, query: str, limit: int = 10, page: int = 1):
        raise RuntimeError("contract violation")


def _all_sources(**overrides) -> list[MockSource]:
    return [overrides.get(sid.value, MockSource(sid)) for sid in SourceId]


class TestParsing:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            (None, 10),
            ("5", 5),
            ("999", 20),
            ("0", 10),
            ("abc", 10),
            ("-3", 1),
            ("7.9", 7),
            (20, 20),
        ],
    )
    def test_parse_limit(self, raw, expected):
        assert parse_limit(raw) == expected

    @pytest.mark.parametrize(
        "raw, expected",
        [(None, 1), ("3", 3), ("-5", 1), ("0", 1), ("x", 1)],
    )
    def test_parse_page(self, raw, expected):
        assert parse_page(raw) == expected

    def test_parse_sites_default_is_all(self):
        assert parse_sites(None) == [s.value for s in SourceId]
        assert parse_sites(" , ") == [s.value for s in SourceId]

    def test_parse_sites_splits_and_normalizes(self):
        assert parse_sites("Thangs, printables,,bogus") == ["thangs", "printables", "bogus"]


class TestAggregate:
    @pytest.mark.asyncio
    async def test_key_set_is_requested_and_recognized(self):
        aggregator = Aggregator(_all_sources())

        results = await aggregator.aggregate(
            ["printables", "nope", "thangs", "printables"], "benchy"
        )

        assert list(results) == [SourceId.PRINTABLES, SourceId.THANGS]

    @pytest.mark.asyncio
    async def test_only_unknown_sites(self):
        aggregator = Aggregator(_all_sources())
        assert await aggregator.aggregate(["nope"], "benchy") == {}

    @pytest.mark.asyncio
    async def test_one_failing_source_does_not_affect_others(self):
        failing = MockSource(SourceId.THANGS, error=ConnectionError("forced"))
        aggregator = Aggregator(_all_sources(thangs=failing))

        results = await aggregator.aggregate([s.value for s in SourceId], "benchy")

        assert len(results) == 6
        assert results[SourceId.THANGS] == []
        non_empty = [sid for sid, records in results.items() if records]
        assert len(non_empty) == 5

    @pytest.mark.asyncio
    async def test_contract_violation_is_contained(self):
        rogue = ExplodingSource(SourceId.YOUMAGINE)
        aggregator = Aggregator(_all_sources(youmagine=rogue))

        results = await aggregator.aggregate(["youmagine", "printables"], "benchy")

        assert results[SourceId.YOUMAGINE] == []
        assert len(results[SourceId.PRINTABLES]) == 3

    @pytest.mark.asyncio
    async def test_limit_and_page_are_clamped(self):
        source = MockSource(SourceId.PRINTABLES, count=50)
        aggregator = Aggregator([source])

        results = await aggregator.aggregate(["printables"], "benchy", limit="999", page="-5")

        assert source.calls == [("search", "benchy", 20, 1)]
        assert len(results[SourceId.PRINTABLES]) == 20

    @pytest.mark.asyncio
    async def test_sources_run_concurrently(self):
        sources = [MockSource(sid, delay=0.2) for sid in SourceId]
        aggregator = Aggregator(sources)

        loop = asyncio.get_running_loop()
        start = loop.time()
        await aggregator.aggregate([s.value for s in SourceId], "benchy")
        elapsed = loop.time() - start

        assert elapsed < 0.2 * 3  # sequential would take 1.2s

    @pytest.mark.asyncio
    async def test_waits_for_slowest(self):
        slow = MockSource(SourceId.THANGS, delay=0.2)
        aggregator = Aggregator([MockSource(SourceId.PRINTABLES), slow])

        results = await aggregator.aggregate(["printables", "thangs"], "benchy")

        assert len(results[SourceId.THANGS]) == 3

    @pytest.mark.asyncio
    async def test_popular_mode(self):
        source = MockSource(SourceId.THANGS)
        aggregator = Aggregator([source])

        await aggregator.aggregate(["thangs"], popular=True, limit=4)

        assert source.calls == [("popular", 4)]

    @pytest.mark.asyncio
    async def test_search_without_query_raises(self):
        source = MockSource(SourceId.THANGS)
        aggregator = Aggregator([source])

        with pytest.raises(ValueError):
            await aggregator.aggregate(["thangs"], "  ")
        assert source.calls == []
