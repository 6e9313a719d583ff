"""Creality Cloud source adapter."""

from __future__ import annotations

import uuid
from typing import Any

from model_search.models import ModelRecord, SourceId
from model_search.sources.base import ModelSource
from model_search.sources.exceptions import SourcePayloadError
from model_search.sources.fields import pick, pick_int, pick_list, pick_str
from model_search.sources.http import encode_component, ensure_ok, parse_json

SEARCH_URL = "https://www.crealitycloud.com/api/cxy/search/model"
TREND_URL = "https://www.crealitycloud.com/api/cxy/v3/model/listTrend"


def _cxy_headers() -> dict[str, str]:
    """Client identity headers the web app sends; ids are fresh per request."""
    return {
        "Content-Type": "application/json",
        "Accept": "application/json, text/plain, */*",
        "__cxy_app_ch_": "Chrome 144.0.0.0",
        "__cxy_app_id_": "creality_model",
        "__cxy_app_ver_": "6.0.0",
        "__cxy_brand_": "creality",
        "__cxy_duid_": f"uuid-{uuid.uuid4()}",
        "__cxy_jwtoken_": "",
        "__cxy_os_lang_": "0",
        "__cxy_os_ver_": "Linux x86_64",
        "__cxy_platform_": "2",
        "__cxy_requestid_": str(uuid.uuid4()),
        "__cxy_timezone_": "-18000",
        "__cxy_token_": "",
        "__cxy_uid_": "",
        "_x_cxy_ehrtoken_": "",
        "Origin": "https://www.crealitycloud.com",
        "Referer": "https://www.crealitycloud.com/",
    }


class CrealityCloudSource(ModelSource):
    base_url = "https://www.crealitycloud.com"

    @property
    def source_name(self) -> SourceId:
        return SourceId.CREALITYCLOUD

    def search_page_url(self, query: str) -> str:
        return f"{self.base_url}/search/{encode_component(query)}"

    def _parse_item(self, item: dict[str, Any]) -> ModelRecord:
        model_id = pick(item, "id")
        if model_id is None:
            raise ValueError("item without id")
        return ModelRecord(
            title=pick_str(item, "groupName"),
            creator=pick_str(item, "userInfo.nickName"),
            thumbnail=pick_str(item, "covers.0.url"),
            url=f"{self.base_url}/model-detail/{model_id}",
            likes=pick_int(item, "likeCount"),
            downloads=pick_int(item, "downloadCount"),
            source=SourceId.CREALITYCLOUD,
        )

    async def _post(self, url: str, body: dict[str, Any]) -> list[ModelRecord]:
        response = await self._client.post(url, json=body, headers=_cxy_headers())
        data = parse_json("crealitycloud", ensure_ok("crealitycloud", response))
        if not isinstance(data, dict) or data.get("code") != 0:
            raise SourcePayloadError(
                f"crealitycloud returned code {pick(data, 'code')!r}"
            )
        return self._records(pick_list(data, "result.list"), self._parse_item)

    async def _search(self, query: str, limit: int, page: int) -> list[ModelRecord]:
        return await self._post(
            SEARCH_URL,
            {
                "page": page,
                "pageSize": limit,
                "sortType": 11,
                "isPay": 0,
                "hasCfgFile": 0,
                "isVip": 0,
                "isExclusive": 0,
                "multiMarkType": 0,
                "hasPromo": 0,
                "promoType": 0,
                "keyword": query,
            },
        )

    async def _fetch_popular(self, limit: int) -> list[ModelRecord]:
        return await self._post(
            TREND_URL,
            {
                "page": 1,
                "pageSize": limit,
                "trendType": 3,
                "filterType": 10,
                "isPay": 0,
                "isExclusive": 0,
                "promoType": 0,
                "isVip": 0,
                "multiMark": 0,
                "hasCfgFile": 0,
                "hasCubeMeModel": 1,
            },
        )
