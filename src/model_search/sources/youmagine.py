"""YouMagine source adapter (HTML scraping).

The bare domain is used because ``www.`` redirects.
"""

from __future__ import annotations

from bs4 import BeautifulSoup

from model_search.models import ModelRecord, SourceId
from model_search.sources.base import ModelSource
from model_search.sources.fields import absolute_url
from model_search.sources.http import encode_component

DESIGNS_URL = "https://youmagine.com/designs"

_SITE_LOGO_ALT = "YouMagine"


class YouMagineSource(ModelSource):
    base_url = "https://youmagine.com"

    @property
    def source_name(self) -> SourceId:
        return SourceId.YOUMAGINE

    def search_page_url(self, query: str) -> str:
        return f"https://www.youmagine.com/designs?q={encode_component(query)}"

    def _parse_designs(self, html: str, limit: int) -> list[ModelRecord]:
        """Model cards are full-size cover images whose alt text is the title."""
        soup = BeautifulSoup(html, "html.parser")
        records: list[ModelRecord] = []
        seen: set[str] = set()
        for img in soup.select("img.object-cover[alt]"):
            if len(records) >= limit:
                break
            alt = img.get("alt") or ""
            src = img.get("src") or ""
            # avatars and icons are not w-full
            if "w-full" not in (img.get("class") or []) or not src or alt == _SITE_LOGO_ALT:
                continue
            link = img.find_parent("a", href=lambda h: h and "/designs/" in h)
            href = link.get("href") if link is not None else None
            if not href or href.endswith("/designs/") or href in seen:
                continue
            seen.add(href)
            records.append(
                ModelRecord(
                    title=alt,
                    thumbnail=absolute_url(src, self.base_url),
                    url=absolute_url(href, self.base_url),
                    source=SourceId.YOUMAGINE,
                )
            )
        return records

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        response = await self._client.get(DESIGNS_URL, params={"q": query, "page": page})
        return self._parse_designs(response.text, limit)

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        response = await self._client.get(DESIGNS_URL)
        return self._parse_designs(response.text, limit)
