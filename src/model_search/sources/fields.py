"""Best-effort field extraction for loosely specified upstream payloads.

Upstream JSON shapes drift between endpoints and over time, so adapters name
an ordered list of candidate paths per field and take the first usable value.
Paths are dotted; integer segments index into lists (``"images.0.url"``).
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urljoin

from model_search.models import to_count


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, dict)):
        return not value
    return False


def resolve(data: Any, path: str) -> Any:
    """Follow a dotted path into nested dicts/lists. Returns None on any miss."""
    current = data
    for segment in path.split("."):
        if isinstance(current, dict):
            current = current.get(segment)
        elif isinstance(current, list) and segment.isdigit():
            index = int(segment)
            current = current[index] if index < len(current) else None
        else:
            return None
        if current is None:
            return None
    return current


def pick(data: Any, *paths: str, default: Any = None) -> Any:
    """Return the first non-empty value found at any of ``paths``."""
    for path in paths:
        value = resolve(data, path)
        if not _is_missing(value):
            return value
    return default


def pick_str(data: Any, *paths: str, default: str = "") -> str:
    value = pick(data, *paths)
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value).strip()


def pick_int(data: Any, *paths: str) -> int:
    """First positive count among ``paths``; 0 when none is usable."""
    for path in paths:
        count = to_count(resolve(data, path))
        if count > 0:
            return count
    return 0


def pick_list(data: Any, *paths: str) -> list[Any]:
    """First non-empty list among ``paths``; a bare list payload counts too."""
    if isinstance(data, list):
        return data
    for path in paths:
        value = resolve(data, path)
        if isinstance(value, list) and value:
            return value
    return []


def absolute_url(href: str, base_url: str) -> str:
    if not href:
        return ""
    if href.startswith(("http://", "https://")):
        return href
    if href.startswith("//"):
        return f"https:{href}"
    return urljoin(base_url, href)
