"""Core data models for the model search service.

All Pydantic models are defined here as the single source of truth.
Every other module imports from this file.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any
from urllib.parse import urlsplit

from pydantic import BaseModel, Field, field_validator

UNTITLED = "Untitled"
UNKNOWN_CREATOR = "Unknown"


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class SourceId(str, Enum):
    THINGIVERSE = "thingiverse"
    PRINTABLES = "printables"
    THANGS = "thangs"
    YOUMAGINE = "youmagine"
    MYMINIFACTORY = "myminifactory"
    CREALITYCLOUD = "crealitycloud"


# Default order used when a request does not name any sites.
ALL_SOURCES: tuple[SourceId, ...] = (
    SourceId.THINGIVERSE,
    SourceId.PRINTABLES,
    SourceId.THANGS,
    SourceId.YOUMAGINE,
    SourceId.MYMINIFACTORY,
    SourceId.CREALITYCLOUD,
)


def is_absolute_http_url(value: str) -> bool:
    parts = urlsplit(value)
    return parts.scheme in {"http", "https"} and bool(parts.netloc)


def to_count(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return max(0, int(value))
    if isinstance(value, str):
        cleaned = value.strip().replace(",", "").replace("_", "")
        try:
            return max(0, int(float(cleaned)))
        except ValueError:
            return 0
    return 0


# ---------------------------------------------------------------------------
# Normalized records
# ---------------------------------------------------------------------------

class ModelRecord(BaseModel):
    """One printable model as returned by any source adapter."""

    title: str = UNTITLED
    creator: str = UNKNOWN_CREATOR
    thumbnail: str = ""
    url: str
    likes: int = 0
    downloads: int = 0
    source: SourceId

    @field_validator("title", mode="before")
    @classmethod
    def _default_title(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or UNTITLED

    @field_validator("creator", mode="before")
    @classmethod
    def _default_creator(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        return text or UNKNOWN_CREATOR

    @field_validator("thumbnail", mode="before")
    @classmethod
    def _default_thumbnail(cls, value: Any) -> str:
        return str(value).strip() if value else ""

    @field_validator("url")
    @classmethod
    def _absolute_url(cls, value: str) -> str:
        if not is_absolute_http_url(value):
            raise ValueError(f"url must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("likes", "downloads", mode="before")
    @classmethod
    def _non_negative(cls, value: Any) -> int:
        return to_count(value)


# ---------------------------------------------------------------------------
# API payloads
# ---------------------------------------------------------------------------

class SearchResponse(BaseModel):
    page: int
    limit: int
    results: dict[SourceId, list[ModelRecord]] = {}


class SiteSearchResponse(BaseModel):
    site: SourceId
    page: int
    results: list[ModelRecord] = []


class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: str = Field(
        default_factory=lambda: datetime.now(UTC).isoformat().replace("+00:00", "Z")
    )
