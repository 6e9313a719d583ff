"""HTTP API for model-search.

Exposes aggregated search, cached popular listings, per-site deep links and
the image proxy as JSON endpoints.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from model_search.config import AppConfig, load_config
from model_search.models import HealthResponse, SearchResponse, SiteSearchResponse
from model_search.services.aggregator import (
    Aggregator,
    SearchResults,
    parse_limit,
    parse_page,
    parse_sites,
)
from model_search.services.cache import Clock, TTLCache
from model_search.services.image_proxy import ImageProxy, ImageProxyError, ProxiedImage
from model_search.services.popular import PopularService
from model_search.sources.base import ModelSource
from model_search.sources.factory import create_sources
from model_search.sources.http import create_client

logger = logging.getLogger(__name__)

_MISSING_QUERY = 'Query parameter "q" is required'
_IMAGE_CACHE_CONTROL = "public, max-age=1800"


# ---------------------------------------------------------------------------
# Service wiring
# ---------------------------------------------------------------------------


@dataclass
class Services:
    aggregator: Aggregator
    popular: PopularService
    image_proxy: ImageProxy
    client: httpx.AsyncClient


def build_services(
    config: AppConfig,
    client: httpx.AsyncClient,
    sources: list[ModelSource] | None = None,
    clock: Clock = time.monotonic,
) -> Services:
    """Wire adapters, aggregator and both caches around one shared client."""
    aggregator = Aggregator(sources if sources is not None else create_sources(client, config))
    popular_cache: TTLCache[SearchResults] = TTLCache(config.popular_cache_ttl_s, clock=clock)
    image_cache: TTLCache[ProxiedImage] = TTLCache(
        config.image_cache_ttl_s,
        clock=clock,
        max_entries=config.image_cache_max_entries,
    )
    return Services(
        aggregator=aggregator,
        popular=PopularService(aggregator, popular_cache),
        image_proxy=ImageProxy(client, image_cache),
        client=client,
    )


def _error(status_code: int, error: str, **extra: Any) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def _services(request: Request) -> Services:
    return request.app.state.services


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


def create_app(config: AppConfig | None = None, services: Services | None = None) -> FastAPI:
    """Build the FastAPI app. Pass ``services`` to bypass the real adapters."""
    cfg = config or load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned_client: httpx.AsyncClient | None = None
        if getattr(app.state, "services", None) is None:
            owned_client = create_client(cfg.request_timeout_s)
            app.state.services = build_services(cfg, owned_client)
        logger.info(
            "Thingiverse: %s",
            "API key configured" if cfg.thingiverse_api_key else "no API key (using fallback data)",
        )
        try:
            yield
        finally:
            if owned_client is not None:
                await owned_client.aclose()

    app = FastAPI(title="model-search", version="0.1.0", lifespan=lifespan)
    app.state.services = services

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health():
        return HealthResponse()

    @app.get("/api/search")
    async def search(
        request: Request,
        q: str | None = None,
        sites: str | None = None,
        limit: str | None = None,
        page: str | None = None,
    ):
        if not q or not q.strip():
            return _error(400, _MISSING_QUERY)

        site_ids = parse_sites(sites)
        search_limit = parse_limit(limit)
        search_page = parse_page(page)
        logger.info(
            'Searching for "%s" on sites: %s (page %d)', q, ", ".join(site_ids), search_page
        )
        try:
            results = await _services(request).aggregator.aggregate(
                site_ids, q, limit=search_limit, page=search_page
            )
        except Exception as exc:
            logger.exception("Search error")
            return _error(500, "Search failed", message=str(exc))
        return SearchResponse(page=search_page, limit=search_limit, results=results)

    @app.get("/api/search-urls")
    async def search_urls(request: Request, q: str | None = None):
        if not q or not q.strip():
            return _error(400, _MISSING_QUERY)
        aggregator = _services(request).aggregator
        return {
            source_id.value: aggregator.get(source_id.value).search_page_url(q)
            for source_id in aggregator.source_ids
        }

    @app.get("/api/search/{site}")
    async def search_site(
        request: Request,
        site: str,
        q: str | None = None,
        limit: str | None = None,
        page: str | None = None,
    ):
        if not q or not q.strip():
            return _error(400, _MISSING_QUERY)

        aggregator = _services(request).aggregator
        source = aggregator.get(site)
        if source is None:
            return _error(
                400, "Invalid site", validSites=[s.value for s in aggregator.source_ids]
            )

        search_page = parse_page(page)
        try:
            results = await source.search(q, parse_limit(limit), search_page)
        except Exception as exc:
            logger.exception("%s search error", site)
            return _error(500, "Search failed", message=str(exc))
        return SiteSearchResponse(site=source.source_name, page=search_page, results=results)

    @app.get("/api/popular")
    async def popular(request: Request, sites: str | None = None, limit: str | None = None):
        try:
            results = await _services(request).popular.get_or_fetch(parse_sites(sites), limit)
        except Exception as exc:
            logger.exception("Popular fetch error")
            return _error(500, "Popular fetch failed", message=str(exc))
        return {
            site.value: [r.model_dump(mode="json") for r in records]
            for site, records in results.items()
        }

    @app.get("/api/image")
    async def image(request: Request, url: str | None = None):
        try:
            proxied = await _services(request).image_proxy.fetch(url)
        except ImageProxyError as exc:
            if exc.status_code == 400:
                return _error(400, str(exc))
            return _error(exc.status_code, "Failed to fetch image")
        except Exception:
            logger.exception("Image proxy error")
            return _error(500, "Failed to fetch image")
        return Response(
            content=proxied.content,
            media_type=proxied.content_type,
            headers={"Cache-Control": _IMAGE_CACHE_CONTROL},
        )

    return app


def main() -> None:
    """Entry point for the HTTP server."""
    import uvicorn

    config = load_config()
    logging.basicConfig(
        level=config.log_level, format="%(levelname)s %(name)s: %(message)s"
    )
    logger.info("model-search server running on http://%s:%d", config.host, config.port)
    uvicorn.run(create_app(config), host=config.host, port=config.port)


if __name__ == "__main__":
    main()
