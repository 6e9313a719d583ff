"""Aggregation, caching and image proxy services."""

from model_search.services.aggregator import (
    Aggregator,
    SearchResults,
    parse_limit,
    parse_page,
    parse_sites,
)
from model_search.services.cache import CacheEntry, TTLCache
from model_search.services.image_proxy import (
    ImageProxy,
    ImageProxyError,
    InvalidImageURLError,
    ProxiedImage,
    UpstreamImageError,
)
from model_search.services.popular import PopularService

__all__ = [
    "Aggregator",
    "CacheEntry",
    "ImageProxy",
    "ImageProxyError",
    "InvalidImageURLError",
    "PopularService",
    "ProxiedImage",
    "SearchResults",
    "TTLCache",
    "UpstreamImageError",
    "parse_limit",
    "parse_page",
    "parse_sites",
]
