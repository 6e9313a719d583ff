"""Tests for the HTTP API."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from model_search.config import AppConfig
from model_search.models import ModelRecord, SourceId
from model_search.server import build_services, create_app
from model_search.sources.base import ModelSource

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


class StubSource(ModelSource):
    """Adapter double with call counting and optional internal failure."""

    def __init__(self, name: SourceId, fail: bool = False) -> None:
        super().__init__(client=None)
        self._name = name
        self._fail = fail
        self.search_calls = 0
        self.popular_calls = 0

    @property
    def source_name(self) -> SourceId:
        return self._name

    def search_page_url(self, query: str) -> str:
        return f"https://{self._name.value}.example/search?q={query}"

    def _make(self, tag: str, n: int) -> list[ModelRecord]:
        if self._fail:
            raise ConnectionError("upstream down")
        return [
            ModelRecord(
                title=f"{tag} {i}",
                creator="maker",
                url=f"https://{self._name.value}.example/model/{tag}-{i}",
                likes=i,
                source=self._name,
            )
            for i in range(n)
        ]

    async def _search(self, query, limit, page):
        self.search_calls += 1
        return self._make(f"{query}-p{page}", limit)

    async def _fetch_popular(self, limit):
        self.popular_calls += 1
        return self._make(f"popular{self.popular_calls}", limit)


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _image_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path.endswith("missing.png"):
        return httpx.Response(404)
    return httpx.Response(200, content=PNG_BYTES, headers={"content-type": "image/png"})


@pytest.fixture
def sources():
    return [StubSource(sid, fail=(sid is SourceId.THANGS)) for sid in SourceId]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api(sources, clock):
    config = AppConfig()
    client = httpx.AsyncClient(transport=httpx.MockTransport(_image_handler))
    services = build_services(config, client, sources=sources, clock=clock)
    with TestClient(create_app(config, services)) as test_client:
        yield test_client


def test_health(api):
    body = api.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["timestamp"].endswith("Z")


class TestSearch:
    def test_missing_query(self, api, sources):
        response = api.get("/api/search")

        assert response.status_code == 400
        assert response.json() == {"error": 'Query parameter "q" is required'}
        assert all(s.search_calls == 0 for s in sources)

    @pytest.mark.parametrize("path", ["/api/search", "/api/search/printables", "/api/search-urls"])
    def test_blank_query_is_rejected(self, api, sources, path):
        response = api.get(path, params={"q": "   "})

        assert response.status_code == 400
        assert response.json() == {"error": 'Query parameter "q" is required'}
        assert all(s.search_calls == 0 for s in sources)

    def test_all_sites_with_one_failure(self, api):
        response = api.get("/api/search", params={"q": "benchy", "limit": "2"})

        assert response.status_code == 200
        body = response.json()
        assert body["page"] == 1
        assert body["limit"] == 2
        assert set(body["results"]) == {s.value for s in SourceId}
        assert body["results"]["thangs"] == []
        for site in ("thingiverse", "printables", "youmagine", "myminifactory", "crealitycloud"):
            assert len(body["results"][site]) == 2

    def test_record_shape(self, api):
        body = api.get("/api/search", params={"q": "benchy", "sites": "printables"}).json()
        record = body["results"]["printables"][0]
        assert set(record) == {
            "title",
            "creator",
            "thumbnail",
            "url",
            "likes",
            "downloads",
            "source",
        }
        assert record["source"] == "printables"

    def test_sites_filter_drops_unknown(self, api):
        body = api.get(
            "/api/search", params={"q": "benchy", "sites": "thingiverse,bogus,youmagine"}
        ).json()
        assert list(body["results"]) == ["thingiverse", "youmagine"]

    def test_limit_and_page_are_clamped(self, api):
        body = api.get(
            "/api/search",
            params={"q": "benchy", "sites": "printables", "limit": "999", "page": "-5"},
        ).json()
        assert body["limit"] == 20
        assert body["page"] == 1
        assert len(body["results"]["printables"]) == 20
        assert body["results"]["printables"][0]["title"] == "benchy-p1 0"

    def test_non_numeric_limit(self, api):
        body = api.get("/api/search", params={"q": "benchy", "limit": "abc"}).json()
        assert body["limit"] == 10


class TestSiteSearch:
    def test_single_site(self, api):
        response = api.get("/api/search/printables", params={"q": "vase", "page": "2"})

        assert response.status_code == 200
        body = response.json()
        assert body["site"] == "printables"
        assert body["page"] == 2
        assert body["results"][0]["title"] == "vase-p2 0"

    def test_invalid_site(self, api):
        response = api.get("/api/search/cults3d", params={"q": "vase"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid site"
        assert body["validSites"] == [s.value for s in SourceId]

    def test_missing_query_checked_first(self, api):
        response = api.get("/api/search/cults3d")
        assert response.status_code == 400
        assert response.json()["error"] == 'Query parameter "q" is required'

    def test_failing_site_is_empty(self, api):
        body = api.get("/api/search/thangs", params={"q": "vase"}).json()
        assert body["results"] == []


def test_search_urls(api):
    response = api.get("/api/search-urls", params={"q": "gear"})

    assert response.status_code == 200
    body = response.json()
    assert set(body) == {s.value for s in SourceId}
    assert body["thangs"] == "https://thangs.example/search?q=gear"


def test_search_urls_requires_query(api):
    assert api.get("/api/search-urls").status_code == 400


class TestPopular:
    def test_repeat_within_ttl_is_identical(self, api, sources):
        first = api.get("/api/popular", params={"sites": "printables,thingiverse", "limit": "3"})
        second = api.get("/api/popular", params={"sites": "thingiverse,printables", "limit": "3"})

        assert first.status_code == 200
        assert second.content == first.content
        assert sources[1].popular_calls == 1

    def test_expired_listing_is_refetched(self, api, sources, clock):
        first = api.get("/api/popular", params={"sites": "printables"}).json()
        clock.now = 301
        second = api.get("/api/popular", params={"sites": "printables"}).json()

        assert first != second
        assert second["printables"][0]["title"] == "popular2 0"

    def test_defaults_to_all_sites(self, api):
        body = api.get("/api/popular").json()
        assert set(body) == {s.value for s in SourceId}
        assert body["thangs"] == []
        assert len(body["printables"]) == 10


class TestImage:
    def test_proxies_bytes(self, api):
        response = api.get("/api/image", params={"url": "https://cdn.thingiverse.com/a.png"})

        assert response.status_code == 200
        assert response.content == PNG_BYTES
        assert response.headers["content-type"] == "image/png"
        assert response.headers["cache-control"] == "public, max-age=1800"

    def test_missing_url(self, api):
        response = api.get("/api/image")
        assert response.status_code == 400
        assert response.json() == {"error": "URL parameter required"}

    def test_invalid_url(self, api):
        response = api.get("/api/image", params={"url": "nope"})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid URL"}

    def test_upstream_status_is_mirrored(self, api):
        response = api.get("/api/image", params={"url": "https://thangs.com/missing.png"})
        assert response.status_code == 404
        assert response.json() == {"error": "Failed to fetch image"}
