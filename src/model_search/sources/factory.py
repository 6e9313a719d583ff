"""Model source factory."""

from __future__ import annotations

import httpx

from model_search.config import AppConfig
from model_search.models import ALL_SOURCES, SourceId
from model_search.sources.base import ModelSource


def create_source(
    source_id: SourceId | str, client: httpx.AsyncClient, config: AppConfig
) -> ModelSource:
    """Create a model source adapter for ``source_id``."""
    match SourceId(source_id):
        case SourceId.THINGIVERSE:
            from model_search.sources.thingiverse import ThingiverseSource

            return ThingiverseSource(client, api_key=config.thingiverse_api_key)
        case SourceId.PRINTABLES:
            from model_search.sources.printables import PrintablesSource

            return PrintablesSource(client)
        case SourceId.THANGS:
            from model_search.sources.thangs import ThangsSource

            return ThangsSource(client)
        case SourceId.YOUMAGINE:
            from model_search.sources.youmagine import YouMagineSource

            return YouMagineSource(client)
        case SourceId.MYMINIFACTORY:
            from model_search.sources.myminifactory import MyMiniFactorySource

            return MyMiniFactorySource(client)
        case SourceId.CREALITYCLOUD:
            from model_search.sources.crealitycloud import CrealityCloudSource

            return CrealityCloudSource(client)
        case _:
            raise ValueError(f"Unknown model source: {source_id}")


def create_sources(client: httpx.AsyncClient, config: AppConfig) -> list[ModelSource]:
    """All adapters, in the default site order."""
    return [create_source(source_id, client, config) for source_id in ALL_SOURCES]
