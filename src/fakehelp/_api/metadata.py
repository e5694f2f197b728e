"""Metadata and enum endpoints."""

from __future__ import annotations

from typing import Any

from fakehelp._api._common import build_body, expect_dict, post_json, raise_for_error_body
from fakehelp._transport import Transport
from fakehelp.exceptions import HelpTransportError
from fakehelp.models.metadata import Metadata


async def fetch_metadata(transport: Transport) -> Metadata:
    """Fetch the latest game data and localization versions."""
    endpoint = "/metadata"
    decoded = expect_dict(endpoint, await post_json(transport, endpoint, build_body()))
    return Metadata.from_api(decoded)


async def fetch_segment_enum(transport: Transport) -> list[tuple[str, int]]:
    """Return the declared ``GameDataSegment`` entries in upstream order."""
    endpoint = "/enums"
    try:
        decoded = expect_dict(endpoint, await transport.get_json(endpoint))
    except HelpTransportError as exc:
        raise_for_error_body(exc)
    segments: Any = decoded.get("GameDataSegment") or {}
    if not isinstance(segments, dict):
        return []
    return [(str(name), int(value)) for name, value in segments.items()]
