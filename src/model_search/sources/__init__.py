"""Model source adapters."""

from model_search.sources.base import ModelSource
from model_search.sources.exceptions import (
    SourceError,
    SourcePayloadError,
    UpstreamStatusError,
)
from model_search.sources.factory import create_source, create_sources

__all__ = [
    "create_source",
    "create_sources",
    "ModelSource",
    "SourceError",
    "SourcePayloadError",
    "UpstreamStatusError",
]
