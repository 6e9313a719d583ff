"""Tests for shared adapter HTTP helpers."""

from __future__ import annotations

import httpx
import pytest

from model_search.sources.exceptions import SourcePayloadError, UpstreamStatusError
from model_search.sources.http import (
    encode_component,
    ensure_ok,
    extract_next_data,
    first_successful,
    parse_json,
)


class TestEncodeComponent:
    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("dice tower", "dice%20tower"),
            ("a/b", "a%2Fb"),
            ("x&y=z", "x%26y%3Dz"),
            ("it's (big)!*", "it's%20(big)!*"),
            ("caf\u00e9", "caf%C3%A9"),
            ("a_b.c~d-e", "a_b.c~d-e"),
        ],
    )
    def test_matches_uri_component_encoding(self, raw, expected):
        assert encode_component(raw) == expected


class TestEnsureOk:
    def test_passes_success(self):
        response = httpx.Response(200, text="ok")
        assert ensure_ok("thangs", response) is response

    def test_raises_on_error_status(self):
        with pytest.raises(UpstreamStatusError) as exc_info:
            ensure_ok("thangs", httpx.Response(403))
        assert exc_info.value.status_code == 403


class TestParseJson:
    def test_non_json_raises_payload_error(self):
        with pytest.raises(SourcePayloadError):
            parse_json("thangs", httpx.Response(200, text="<html>blocked</html>"))


class TestExtractNextData:
    def test_found(self):
        html = (
            '<script id="__NEXT_DATA__" type="application/json">'
            '{"props": {"pageProps": {"things": []}}}</script>'
        )
        assert extract_next_data(html) == {"props": {"pageProps": {"things": []}}}

    def test_missing(self):
        assert extract_next_data("<html></html>") is None

    def test_broken_json(self):
        html = '<script id="__NEXT_DATA__" type="application/json">{oops</script>'
        assert extract_next_data(html) is None


class TestFirstSuccessful:
    @pytest.mark.asyncio
    async def test_first_non_empty_wins(self):
        calls = []

        async def empty():
            calls.append("empty")
            return []

        async def good():
            calls.append("good")
            return ["a"]

        async def never():
            calls.append("never")
            return ["b"]

        assert await first_successful("test", empty, good, never) == ["a"]
        assert calls == ["empty", "good"]

    @pytest.mark.asyncio
    async def test_error_falls_through(self):
        async def broken():
            raise httpx.ConnectError("refused")

        async def good():
            return ["a"]

        assert await first_successful("test", broken, good) == ["a"]

    @pytest.mark.asyncio
    async def test_all_fail(self):
        async def broken():
            raise SourcePayloadError("bad")

        async def empty():
            return []

        assert await first_successful("test", broken, empty) == []
