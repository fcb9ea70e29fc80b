"""Tests for the Steam API service, its response decoding and the HTTP client."""

import asyncio
import json
from typing import Any, Callable

import httpx
import pytest

from creamapi_dlc_updater.models import AppListEntry
from creamapi_dlc_updater.services import (
    DataError,
    FetchError,
    HttpClientService,
    SteamApiService,
    parse_app_details,
    parse_app_list,
)


Handler = Callable[[httpx.Request], httpx.Response]


def make_client(handler: Handler, timeout: float = 15.0) -> HttpClientService:
    return HttpClientService(timeout=timeout, transport=httpx.MockTransport(handler))


def json_response(payload: Any, status_code: int = 200) -> Handler:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload)
    return handler


class TestParseAppDetails:
    """Decoding of the appdetails response shape."""

    def test_returns_dlc_ids(self) -> None:
        payload = {"440": {"success": True, "data": {"dlc": [3, 1, 2]}}}

        details = parse_app_details(payload, "440")

        assert details.app_id == "440"
        assert details.success is True
        assert details.dlc == [3, 1, 2]

    @pytest.mark.parametrize(
        "entry",
        [
            {"success": True, "data": {}},
            {"success": True, "data": {"dlc": []}},
            {"success": True},
        ],
    )
    def test_no_dlc_is_not_an_error(self, entry: dict[str, Any]) -> None:
        assert parse_app_details({"10": entry}, "10").dlc == []

    def test_missing_app_id(self) -> None:
        with pytest.raises(DataError, match="no entry for appid 440"):
            parse_app_details({"570": {"success": True, "data": {}}}, "440")

    def test_unsuccessful(self) -> None:
        with pytest.raises(DataError, match="not successful"):
            parse_app_details({"440": {"success": False}}, "440")

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            [],
            "440",
            {"440": None},
            {"440": {"success": "true"}},
            {"440": {"success": True, "data": []}},
            {"440": {"success": True, "data": {"dlc": "1,2"}}},
            {"440": {"success": True, "data": {"dlc": [1, "2"]}}},
            {"440": {"success": True, "data": {"dlc": [True]}}},
        ],
    )
    def test_malformed(self, payload: Any) -> None:
        with pytest.raises(DataError):
            parse_app_details(payload, "440")


class TestParseAppList:
    """Decoding of the GetAppList v2 response shape."""

    def test_returns_entries(self) -> None:
        payload = {"applist": {"apps": [{"appid": 1, "name": "One"}, {"appid": 2, "name": ""}]}}

        assert parse_app_list(payload) == [
            AppListEntry(appid=1, name="One"),
            AppListEntry(appid=2, name=""),
        ]

    def test_missing_name_defaults_to_empty(self) -> None:
        assert parse_app_list({"applist": {"apps": [{"appid": 5}]}}) == [AppListEntry(appid=5, name="")]

    @pytest.mark.parametrize(
        "payload",
        [
            None,
            {},
            {"applist": {}},
            {"applist": {"apps": {}}},
            {"applist": {"apps": [1, 2]}},
            {"applist": {"apps": [{"name": "No id"}]}},
            {"applist": {"apps": [{"appid": "1", "name": "String id"}]}},
            {"applist": {"apps": [{"appid": 1, "name": 7}]}},
        ],
    )
    def test_malformed(self, payload: Any) -> None:
        with pytest.raises(DataError):
            parse_app_list(payload)


class TestHttpClientService:
    """Single-attempt GET requests and their failure modes."""

    @pytest.mark.asyncio
    async def test_get_json(self) -> None:
        async with make_client(json_response({"ok": True})) as client:
            assert await client.get_json("https://example.com/api") == {"ok": True}

    @pytest.mark.asyncio
    async def test_timeout_is_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        async with make_client(handler, timeout=15.0) as client:
            with pytest.raises(FetchError, match="timed out after 15s"):
                await client.get("https://example.com/api")

    @pytest.mark.asyncio
    async def test_slow_body_hits_overall_deadline(self) -> None:
        async def trickle():
            for _ in range(50):
                await asyncio.sleep(0.02)
                yield b" "

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=trickle())

        async with make_client(handler, timeout=0.1) as client:
            with pytest.raises(FetchError, match="timed out after 0.1s") as exc_info:
                await client.get("https://example.com/api")

        assert isinstance(exc_info.value.original_error, asyncio.TimeoutError)
        assert exc_info.value.url == "https://example.com/api"

    @pytest.mark.asyncio
    async def test_connect_error_is_fetch_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with make_client(handler) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.get("https://example.com/api")

        assert isinstance(exc_info.value.original_error, httpx.ConnectError)
        assert exc_info.value.url == "https://example.com/api"

    @pytest.mark.asyncio
    async def test_error_status_is_fetch_error(self) -> None:
        async with make_client(json_response({}, status_code=503)) as client:
            with pytest.raises(FetchError) as exc_info:
                await client.get("https://example.com/api")

        assert exc_info.value.status_code == 503

    @pytest.mark.asyncio
    async def test_request_is_attempted_once(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(500)

        async with make_client(handler) as client:
            with pytest.raises(FetchError):
                await client.get("https://example.com/api")

        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_invalid_json_is_data_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=b"<html>Access Denied</html>")

        async with make_client(handler) as client:
            with pytest.raises(DataError):
                await client.get_json("https://example.com/api")


class TestSteamApiService:
    """The two Steam endpoints, end to end through a mock transport."""

    @pytest.mark.asyncio
    async def test_fetch_dlc_ids_queries_appid(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"440": {"success": True, "data": {"dlc": [10, 20]}}})

        async with make_client(handler) as client:
            dlc_ids = await SteamApiService(client).fetch_dlc_ids("440")

        assert dlc_ids == [10, 20]
        assert seen[0].host == "store.steampowered.com"
        assert seen[0].path == "/api/appdetails"
        assert seen[0].params["appids"] == "440"

    @pytest.mark.asyncio
    async def test_fetch_app_list(self) -> None:
        seen: list[httpx.URL] = []
        body = {"applist": {"apps": [{"appid": 10, "name": "Ten"}]}}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, content=json.dumps(body).encode())

        async with make_client(handler) as client:
            apps = await SteamApiService(client).fetch_app_list()

        assert apps == [AppListEntry(appid=10, name="Ten")]
        assert str(seen[0]) == "https://api.steampowered.com/ISteamApps/GetAppList/v2/"

    @pytest.mark.asyncio
    async def test_unsuccessful_details_is_data_error(self) -> None:
        async with make_client(json_response({"440": {"success": False}})) as client:
            with pytest.raises(DataError):
                await SteamApiService(client).fetch_dlc_ids("440")

    @pytest.mark.asyncio
    async def test_null_details_is_data_error(self) -> None:
        # appdetails answers a literal null for some invalid ids
        async with make_client(lambda request: httpx.Response(200, content=b"null")) as client:
            with pytest.raises(DataError):
                await SteamApiService(client).fetch_dlc_ids("0")
