from __future__ import annotations

import hashlib
import hmac
from collections.abc import Mapping
from typing import Any

import pytest

from fakehelp._crypto.hashing import md5_hex
from fakehelp._crypto.signing import build_auth_headers
from fakehelp.client import ComlinkClient
from fakehelp.config import HelpConfig
from fakehelp.exceptions import HelpApiError, HelpError, HelpNotFoundError, HelpTransportError


class _StaticTransport:
    def __init__(self, replies: dict[str, Any]) -> None:
        self._replies = replies
        self.posted: list[tuple[str, Mapping[str, Any]]] = []

    async def post_json(self, endpoint: str, body: Mapping[str, Any]) -> Any:
        self.posted.append((endpoint, body))
        reply = self._replies[endpoint]
        if isinstance(reply, Exception):
            raise reply
        return reply

    async def get_json(self, endpoint: str) -> Any:
        return self._replies[endpoint]


def _error(code: int | None, status: int = 400) -> HelpTransportError:
    body = {"code": code, "message": "upstream says no"} if code is not None else None
    return HelpTransportError("HTTP error", status_code=status, endpoint="/player", body=body)


def test_auth_headers_sign_time_method_path_and_body_hash() -> None:
    body = '{"payload":{},"enums":false}'

    headers = build_auth_headers("access", "secret", "post", "/metadata", body, now_ms=1700000000000)

    expected = hmac.new(b"secret", digestmod=hashlib.sha256)
    for part in ("1700000000000", "POST", "/metadata", hashlib.md5(body.encode()).hexdigest()):
        expected.update(part.encode())
    assert headers["X-Date"] == "1700000000000"
    assert headers["Authorization"] == f"HMAC-SHA256 Credential=access,Signature={expected.hexdigest()}"


def test_md5_hex_is_lowercase() -> None:
    assert md5_hex("{}") == "99914b932bd37a50b983c5e7c90ae93b"


@pytest.mark.asyncio
async def test_client_requires_context_manager() -> None:
    client = ComlinkClient(HelpConfig())

    with pytest.raises(HelpError):
        await client.get_metadata()


@pytest.mark.asyncio
async def test_metadata_is_parsed() -> None:
    transport = _StaticTransport(
        {"/metadata": {"latestGamedataVersion": "0.34.1:AbCdEf", "latestLocalizationBundleVersion": "loc-1"}}
    )

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        metadata = await client.get_metadata()

    assert metadata.latest_gamedata_version == "0.34.1:AbCdEf"
    assert metadata.latest_localization_bundle_version == "loc-1"
    assert metadata.raw["latestGamedataVersion"] == "0.34.1:AbCdEf"


@pytest.mark.asyncio
async def test_segment_enum_preserves_upstream_order() -> None:
    transport = _StaticTransport({"/enums": {"GameDataSegment": {"SEGMENT_A": 1, "SEGMENT_B": 2, "UNKNOWN": 3}}})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        segments = await client.get_segment_enum()

    assert segments == [("SEGMENT_A", 1), ("SEGMENT_B", 2), ("UNKNOWN", 3)]


@pytest.mark.asyncio
async def test_game_data_request_carries_segment_and_version() -> None:
    transport = _StaticTransport({"/data": {"units": []}})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        await client.get_game_data("0.34.1:AbCdEf", True, 2)

    endpoint, body = transport.posted[0]
    assert endpoint == "/data"
    assert body["payload"] == {"version": "0.34.1:AbCdEf", "includePveUnits": True, "requestSegment": 2}
    assert body["enums"] is False


@pytest.mark.asyncio
async def test_guild_request_includes_recent_activity_flag() -> None:
    transport = _StaticTransport({"/guild": {"guild": {}}})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        await client.get_guild("g1")

    assert transport.posted[0][1]["payload"] == {"guildId": "g1", "includeRecentGuildActivityInfo": True}


@pytest.mark.asyncio
async def test_not_found_code_maps_to_not_found_error() -> None:
    transport = _StaticTransport({"/player": _error(32)})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        with pytest.raises(HelpNotFoundError) as exc_info:
            await client.get_player(ally_code="123456789")

    assert exc_info.value.code == 32
    assert exc_info.value.endpoint == "/player"


@pytest.mark.asyncio
async def test_other_codes_map_to_api_error() -> None:
    transport = _StaticTransport({"/player": _error(7, status=500)})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        with pytest.raises(HelpApiError) as exc_info:
            await client.get_player(ally_code="123456789")

    assert not isinstance(exc_info.value, HelpNotFoundError)
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_errors_without_code_stay_transport_errors() -> None:
    transport = _StaticTransport({"/player": _error(None, status=502)})

    async with ComlinkClient(HelpConfig(), transport=transport) as client:
        with pytest.raises(HelpTransportError):
            await client.get_player(ally_code="123456789")


@pytest.mark.asyncio
async def test_player_request_needs_an_identifier() -> None:
    async with ComlinkClient(HelpConfig(), transport=_StaticTransport({})) as client:
        with pytest.raises(ValueError):
            await client.get_player()
