"""Player, guild and event endpoints."""

from __future__ import annotations

from typing import Any

from fakehelp._api._common import build_body, expect_dict, post_json
from fakehelp._transport import Transport


async def fetch_player(
    transport: Transport,
    *,
    ally_code: str | None = None,
    player_id: str | None = None,
) -> dict[str, Any]:
    """Fetch a raw player profile by ally code or player id."""
    if ally_code:
        payload = {"allyCode": str(ally_code)}
    elif player_id:
        payload = {"playerId": str(player_id)}
    else:
        raise ValueError("Either ally_code or player_id is required")
    endpoint = "/player"
    return expect_dict(endpoint, await post_json(transport, endpoint, build_body(payload)))


async def fetch_guild(transport: Transport, guild_id: str, *, include_recent_activity: bool = True) -> dict[str, Any]:
    """Fetch a raw guild profile including its member list."""
    payload = {
        "guildId": str(guild_id),
        "includeRecentGuildActivityInfo": include_recent_activity,
    }
    endpoint = "/guild"
    return expect_dict(endpoint, await post_json(transport, endpoint, build_body(payload)))


async def fetch_events(transport: Transport) -> dict[str, Any]:
    """Fetch the raw game event schedule."""
    endpoint = "/getEvents"
    return expect_dict(endpoint, await post_json(transport, endpoint, build_body()))
