"""Async client for the SWGOH Comlink API."""

from __future__ import annotations

import logging
from typing import Any, Protocol

import aiohttp

from fakehelp._api import accounts as _accounts_api
from fakehelp._api import gamedata as _gamedata_api
from fakehelp._api import metadata as _metadata_api
from fakehelp._transport import HttpTransport, Transport
from fakehelp.config import HelpConfig
from fakehelp.exceptions import HelpError
from fakehelp.models.metadata import Metadata

_logger = logging.getLogger(__name__)


class Upstream(Protocol):
    """What the synchronization engine and the service need from upstream.

    :class:`ComlinkClient` is the production implementation; tests pass
    in-memory fakes.
    """

    async def get_metadata(self) -> Metadata:
        ...

    async def get_game_data(
        self,
        version: str,
        include_pve_units: bool = True,
        segment: int | None = None,
    ) -> dict[str, Any]:
        ...

    async def get_localization_bundle(self, version: str, unzip: bool) -> dict[str, Any]:
        ...

    async def get_segment_enum(self) -> list[tuple[str, int]]:
        ...

    async def get_player(self, ally_code: str | None = None, player_id: str | None = None) -> dict[str, Any]:
        ...

    async def get_guild(self, guild_id: str, include_recent_activity: bool = True) -> dict[str, Any]:
        ...

    async def get_events(self) -> dict[str, Any]:
        ...


class ComlinkClient:
    """Async client for a Comlink instance.

    Usage::

        async with ComlinkClient(config) as client:
            metadata = await client.get_metadata()
    """

    def __init__(
        self,
        config: HelpConfig,
        *,
        session: aiohttp.ClientSession | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: Transport | None = transport

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ComlinkClient:
        if self._transport is None:
            if self._http_session is None:
                self._http_session = aiohttp.ClientSession()
            self._transport = HttpTransport(self._config, self._http_session)
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
            self._transport = None

    def _require_transport(self) -> Transport:
        if self._transport is None:
            raise HelpError("Client not initialized. Use 'async with ComlinkClient(...) as client:'")
        return self._transport

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    async def get_metadata(self) -> Metadata:
        """Fetch the latest game data and localization versions."""
        return await _metadata_api.fetch_metadata(self._require_transport())

    async def get_segment_enum(self) -> list[tuple[str, int]]:
        return await _metadata_api.fetch_segment_enum(self._require_transport())

    async def get_game_data(
        self,
        version: str,
        include_pve_units: bool = True,
        segment: int | None = None,
    ) -> dict[str, Any]:
        """Fetch game data collections for *version*.

        When *segment* is given only that segment's collections are returned.
        """
        _logger.debug("Fetching game data %s (segment=%s)", version, segment)
        return await _gamedata_api.fetch_game_data(
            self._require_transport(),
            version,
            include_pve_units=include_pve_units,
            segment=segment,
        )

    async def get_localization_bundle(self, version: str, unzip: bool) -> dict[str, Any]:
        _logger.debug("Fetching localization bundle %s (unzip=%s)", version, unzip)
        return await _gamedata_api.fetch_localization_bundle(self._require_transport(), version, unzip=unzip)

    async def get_player(self, ally_code: str | None = None, player_id: str | None = None) -> dict[str, Any]:
        return await _accounts_api.fetch_player(self._require_transport(), ally_code=ally_code, player_id=player_id)

    async def get_guild(self, guild_id: str, include_recent_activity: bool = True) -> dict[str, Any]:
        return await _accounts_api.fetch_guild(
            self._require_transport(),
            guild_id,
            include_recent_activity=include_recent_activity,
        )

    async def get_events(self) -> dict[str, Any]:
        return await _accounts_api.fetch_events(self._require_transport())
