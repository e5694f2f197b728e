"""Request-serving facade over the synchronized data and the upstream API.

:class:`HelpService` wires together the sync engine, the self-healing
store, the player cache and the update poller. It is the object a web
layer (not part of this package) would hold on to.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Mapping, Sequence
from typing import Any

from fakehelp import query
from fakehelp._constants import GAME_DATA_VERSION_RE
from fakehelp.cache import TtlCache
from fakehelp.client import Upstream
from fakehelp.config import HelpConfig
from fakehelp.exceptions import NotInGuildError, UnknownCollectionError, UnknownLanguageError
from fakehelp.models.metadata import Metadata
from fakehelp.models.version import VersionState
from fakehelp.parallel import execute_in_parallel
from fakehelp.storage import FileStore, SelfHealingStore
from fakehelp.sync.engine import SyncEngine
from fakehelp.sync.poller import UpdatePoller

_logger = logging.getLogger(__name__)

AllyCodes = str | int | Sequence[str | int]


def _now_ms() -> int:
    return int(time.time() * 1000)


def _ally_code_list(ally_codes: AllyCodes | None) -> list[str]:
    if ally_codes is None or ally_codes == "" or (isinstance(ally_codes, Sequence) and not ally_codes):
        raise ValueError("No ally code specified")
    if isinstance(ally_codes, (str, int)):
        return [str(ally_codes)]
    return [str(code) for code in ally_codes]


class HelpService:
    """Serve game data, players, guilds and events.

    Parameters
    ----------
    config : HelpConfig
        Service configuration.
    upstream : Upstream
        Comlink client (or a test double).
    store : FileStore, optional
        Defaults to a store rooted at ``config.data_path``.
    """

    def __init__(self, config: HelpConfig, upstream: Upstream, *, store: FileStore | None = None) -> None:
        self._config = config
        self._upstream = upstream
        self._store = store if store is not None else FileStore(config.data_path)
        self._engine = SyncEngine(config, upstream, self._store)
        self._healing = SelfHealingStore(self._store, self._engine)
        self._players = TtlCache(config.player_cache_ttl)
        self._poller = UpdatePoller(upstream, self._on_update, interval=config.update_interval_seconds)

    @property
    def engine(self) -> SyncEngine:
        return self._engine

    @property
    def player_cache(self) -> TtlCache:
        return self._players

    @property
    def poller(self) -> UpdatePoller:
        return self._poller

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def init(self) -> VersionState:
        return await self._engine.load()

    async def listen_for_updates(self) -> VersionState:
        """Start polling for new versions and catch up with the current ones."""
        baseline = await self._poller.start()
        return await self._engine.update_check(
            baseline.latest_gamedata_version,
            baseline.latest_localization_bundle_version,
        )

    async def close(self) -> None:
        await self._poller.stop()
        self._players.clear()

    async def _on_update(self, metadata: Metadata) -> None:
        try:
            await self._engine.update_check(
                metadata.latest_gamedata_version,
                metadata.latest_localization_bundle_version,
            )
        except Exception:
            _logger.error("Received a new version but failed to update game data", exc_info=True)

    async def force_update(self) -> VersionState:
        return await self._engine.update_check(force=True)

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    def _localize(self, source: Any, language: str | None) -> Any:
        if not language:
            return source
        language_map = self._engine.language_map(language)
        if language_map is None:
            raise UnknownLanguageError(f"Unable to find language: {language}")
        return query.localize(source, language_map)

    def _cache_player(self, player: dict[str, Any]) -> None:
        ally_code = player.get("allyCode")
        if ally_code:
            self._players.set(str(ally_code), player)
        self._players.set(player.get("playerId"), player)

    async def _get_player(self, ally_code: str | None = None, player_id: str | None = None) -> dict[str, Any]:
        player = self._players.get(ally_code) if ally_code else self._players.get(player_id)
        if player is None:
            player = await self._upstream.get_player(ally_code=ally_code, player_id=player_id)
            self._cache_player(player)
        return player

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def get_game_data(
        self,
        collection: str,
        *,
        match: Mapping[str, Any] | None = None,
        project: Mapping[str, Any] | None = None,
        language: str | None = None,
    ) -> Any:
        """Return a mirrored collection, filtered, projected and localized."""
        name = query.strip_list_suffix(collection)
        state = self._engine.version_state
        if name not in state.known_collections:
            raise UnknownCollectionError(f"{collection} is not a valid game data collection")

        records = await self._healing.read_validated(name, state.game_data_version)
        records = query.match(records, match)
        records = query.project(records, project)
        return self._localize(records, language)

    async def get_players(
        self,
        ally_codes: AllyCodes | None,
        *,
        project: Mapping[str, Any] | None = None,
        language: str | None = None,
    ) -> list[Any]:
        codes = _ally_code_list(ally_codes)
        if len(codes) == 1:
            players = [await self._get_player(ally_code=codes[0])]
        else:
            players = await execute_in_parallel(
                codes,
                self._config.concurrent_players,
                lambda code: self._get_player(ally_code=code),
            )
        return self._localize([query.project(player, project) for player in players], language)

    async def _get_guild(self, ally_code: str, projection: Mapping[str, Any] | None) -> Any:
        player = await self._get_player(ally_code=ally_code)
        guild_id = player.get("guildId")
        if not guild_id:
            raise NotInGuildError(f"Player {ally_code} is not in a guild")

        response = await self._upstream.get_guild(guild_id, True)
        guild = response.get("guild", response)
        members = guild.get("member") or []
        roster = await execute_in_parallel(
            [member["playerId"] for member in members if member.get("playerId")],
            self._config.concurrent_players,
            lambda player_id: self._get_player(player_id=player_id),
        )
        return query.project({"guild": guild, "roster": roster, "updated": _now_ms()}, projection)

    async def get_guilds(
        self,
        ally_codes: AllyCodes | None,
        *,
        project: Mapping[str, Any] | None = None,
        language: str | None = None,
    ) -> list[Any]:
        codes = _ally_code_list(ally_codes)
        if len(codes) == 1:
            guilds = [await self._get_guild(codes[0], project)]
        else:
            guilds = await execute_in_parallel(
                codes,
                self._config.concurrent_guilds,
                lambda code: self._get_guild(code, project),
            )
        return self._localize(guilds, language)

    async def get_events(
        self,
        *,
        project: Mapping[str, Any] | None = None,
        language: str | None = None,
    ) -> dict[str, Any]:
        response = await self._upstream.get_events()
        events = response.get("gameEvent") or []
        return self._localize({"events": query.project(events, project), "updated": _now_ms()}, language)

    async def get_version(self) -> dict[str, str]:
        """Return the client and localization versions, updating if they moved."""
        metadata = await self._upstream.get_metadata()
        game_version = metadata.latest_gamedata_version
        found = GAME_DATA_VERSION_RE.match(game_version)
        if found:
            game_version = found.group(1)

        await self._engine.update_check(
            metadata.latest_gamedata_version,
            metadata.latest_localization_bundle_version,
        )
        return {"game": game_version, "language": metadata.latest_localization_bundle_version}
