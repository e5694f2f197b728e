"""Game data and localization bundle endpoints."""

from __future__ import annotations

from typing import Any

from fakehelp._api._common import build_body, expect_dict, post_json
from fakehelp._transport import Transport


async def fetch_game_data(
    transport: Transport,
    version: str,
    *,
    include_pve_units: bool = True,
    segment: int | None = None,
) -> dict[str, Any]:
    """Fetch game data collections (all of them, or a single segment)."""
    payload: dict[str, Any] = {
        "version": version,
        "includePveUnits": include_pve_units,
    }
    if segment is not None:
        payload["requestSegment"] = segment
    endpoint = "/data"
    return expect_dict(endpoint, await post_json(transport, endpoint, build_body(payload)))


async def fetch_localization_bundle(transport: Transport, version: str, *, unzip: bool) -> dict[str, Any]:
    """Fetch the localization bundle.

    With ``unzip=False`` Comlink answers ``{"localizationBundle": <base64 zip>}``;
    with ``unzip=True`` it answers ``{"Loc_ENG_US.txt": <text>, ...}``.
    """
    endpoint = "/localization"
    body = build_body({"id": version}, unzip=unzip)
    return expect_dict(endpoint, await post_json(transport, endpoint, body))
