"""Versioned synchronization of game data and localization.

The engine owns the in-memory :class:`VersionState`, the derived
:class:`LookupTables` and the retained language maps. Every update writes
its documents first and commits the version record last, so an
interrupted update leaves the previous version in effect.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from enum import StrEnum
from typing import Any

from pydantic import ValidationError

from fakehelp._constants import (
    ABILITY_COLLECTION,
    EQUIP_MAP_FILE,
    EQUIPMENT_COLLECTION,
    GAME_DATA_VERSION_FILE,
    INCLUDE_PVE_UNITS,
    LOCALIZATION_VERSION_FILE,
    MOD_MAP_FILE,
    SEGMENT_SENTINEL_MARKER,
    SKILL_COLLECTION,
    SKILL_MAP_FILE,
    STAT_MOD_COLLECTION,
    UNIT_MAP_FILE,
    UNITS_COLLECTION,
)
from fakehelp.client import Upstream
from fakehelp.config import HelpConfig
from fakehelp.exceptions import CollectionUnavailableError, DocumentParseError, HelpError, HelpStoreError
from fakehelp.models.lookup import LookupTables
from fakehelp.models.version import VersionedDocument, VersionRecord, VersionState
from fakehelp.storage.files import FileStore
from fakehelp.sync.localization import parse_localization_bundle
from fakehelp.sync.lookup import build_lookup_tables
from fakehelp.sync.normalize import normalize_collection

_logger = logging.getLogger(__name__)


class Track(StrEnum):
    GAME_DATA = "gameData"
    LOCALIZATION = "localization"


class TrackStatus(StrEnum):
    FRESH = "fresh"
    STALE = "stale"
    UPDATING = "updating"


def select_segments(segments: list[tuple[str, int]]) -> list[tuple[str, int]]:
    """Drop segments with a falsy value and the trailing placeholder entry."""
    selected: list[tuple[str, int]] = []
    last = len(segments) - 1
    for index, (name, value) in enumerate(segments):
        if not value:
            continue
        if index == last and SEGMENT_SENTINEL_MARKER in name.upper():
            _logger.debug("Skipping placeholder segment %s", name)
            continue
        selected.append((name, value))
    return selected


class SyncEngine:
    """Keep the local data directory in step with the upstream versions.

    Parameters
    ----------
    config : HelpConfig
        Supplies the segment, unzip and localization switches and the
        language allow-list.
    upstream : Upstream
        Source of metadata, game data and localization bundles.
    store : FileStore
        Destination of the versioned documents.
    """

    def __init__(self, config: HelpConfig, upstream: Upstream, store: FileStore) -> None:
        self._config = config
        self._upstream = upstream
        self._store = store
        self._state = VersionState()
        self._lookup_tables = LookupTables()
        self._languages: dict[str, dict[str, str]] = {}
        self._status: dict[Track, TrackStatus] = {
            Track.GAME_DATA: TrackStatus.STALE,
            Track.LOCALIZATION: TrackStatus.STALE,
        }
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def version_state(self) -> VersionState:
        return self._state

    @property
    def lookup_tables(self) -> LookupTables:
        return self._lookup_tables

    @property
    def languages(self) -> tuple[str, ...]:
        return tuple(self._languages)

    def language_map(self, language: str) -> dict[str, str] | None:
        return self._languages.get(language.upper())

    def status(self, track: Track) -> TrackStatus:
        return self._status[track]

    # ------------------------------------------------------------------
    # Version checks
    # ------------------------------------------------------------------

    def needs_update(self, track: Track, remote_version: str, force: bool = False) -> bool:
        """Return True when *track* must be refreshed to *remote_version*.

        Versions are opaque: any difference counts, including a downgrade.
        """
        if force:
            return True
        if track is Track.GAME_DATA:
            return remote_version != self._state.game_data_version or not self._state.known_collections
        return remote_version != self._state.localization_version

    async def update_check(
        self,
        game_version: str | None = None,
        localization_version: str | None = None,
        force: bool = False,
    ) -> VersionState:
        """Bring both tracks to the given (or latest) upstream versions."""
        async with self._lock:
            if force or not game_version or not localization_version:
                metadata = await self._upstream.get_metadata()
                game_version = metadata.latest_gamedata_version
                localization_version = metadata.latest_localization_bundle_version

            if self.needs_update(Track.GAME_DATA, game_version, force):
                await self.update_game_data(game_version)
            else:
                _logger.debug("Game data is up to date at %s", game_version)

            if self.needs_update(Track.LOCALIZATION, localization_version, force):
                await self.update_localization_bundle(localization_version)
            else:
                _logger.debug("Localization is up to date at %s", localization_version)

            return self._state

    # ------------------------------------------------------------------
    # Game data
    # ------------------------------------------------------------------

    async def update_game_data(self, remote_version: str) -> VersionState:
        """Fetch, persist and commit game data at *remote_version*.

        On failure the track is marked stale, the previous state stays in
        effect and the error propagates.
        """
        self._status[Track.GAME_DATA] = TrackStatus.UPDATING
        _logger.info("Updating game data to version %s", remote_version)
        try:
            if self._config.use_segments:
                files = await self._fetch_segmented(remote_version)
            else:
                files = await self._fetch_whole(remote_version)
            tables = await self._rebuild_lookup_tables(remote_version, files)
            await self._commit_game_data(tables, VersionRecord(version_string=remote_version, files=files))
        except BaseException:
            self._status[Track.GAME_DATA] = TrackStatus.STALE
            _logger.warning("Game data update to %s failed", remote_version)
            raise

        self._state = self._state.model_copy(
            update={"game_data_version": remote_version, "known_collections": frozenset(files)}
        )
        self._lookup_tables = tables
        self._status[Track.GAME_DATA] = TrackStatus.FRESH
        _logger.info("Game data updated to version %s (%d collections)", remote_version, len(files))
        return self._state

    async def _persist_collections(self, version: str, game_data: dict[str, Any]) -> list[str]:
        written: list[str] = []
        for name, records in game_data.items():
            if not records:
                continue
            data = normalize_collection(records) if isinstance(records, list) else records
            await self._store.write(name, VersionedDocument(version=version, data=data))
            written.append(name)
        return written

    async def _fetch_whole(self, version: str) -> list[str]:
        game_data = await self._upstream.get_game_data(version, INCLUDE_PVE_UNITS)
        return await self._persist_collections(version, game_data)

    async def _fetch_segmented(self, version: str) -> list[str]:
        files: list[str] = []
        for name, value in select_segments(await self._upstream.get_segment_enum()):
            _logger.debug("Fetching game data segment %s", name)
            game_data = await self._upstream.get_game_data(version, INCLUDE_PVE_UNITS, value)
            for collection in await self._persist_collections(version, game_data):
                if collection not in files:
                    files.append(collection)
        return files

    async def _read_collection(self, name: str, version: str, files: list[str]) -> list[dict[str, Any]]:
        if name not in files:
            return []
        document = await self._store.read_document(name)
        if not document.is_current(version):
            raise CollectionUnavailableError(
                f"{name} is at version {document.version}, expected {version}",
                name=name,
            )
        return document.data

    async def _rebuild_lookup_tables(self, version: str, files: list[str]) -> LookupTables:
        _logger.debug("Rebuilding lookup tables for %s", version)
        return build_lookup_tables(
            units=await self._read_collection(UNITS_COLLECTION, version, files),
            skills=await self._read_collection(SKILL_COLLECTION, version, files),
            abilities=await self._read_collection(ABILITY_COLLECTION, version, files),
            equipment=await self._read_collection(EQUIPMENT_COLLECTION, version, files),
            mods=await self._read_collection(STAT_MOD_COLLECTION, version, files),
        )

    async def _commit_game_data(self, tables: LookupTables, record: VersionRecord) -> None:
        """Write the four maps as one unit, then the version record.

        If any write fails, the maps already replaced are put back to their
        previous contents so no mix of old and new tables stays on disk.
        """
        previous: dict[str, Any] = {}
        try:
            for name, mapping in tables.documents().items():
                try:
                    previous[name] = await self._store.read(name)
                except HelpStoreError:
                    previous[name] = None
                await self._store.write(name, mapping)
            await self._store.write(GAME_DATA_VERSION_FILE, record)
        except BaseException:
            await self._restore_lookup_files(previous)
            raise

    async def _restore_lookup_files(self, previous: dict[str, Any]) -> None:
        for name, content in previous.items():
            try:
                if content is None:
                    await self._store.remove(name)
                else:
                    await self._store.write(name, content)
            except Exception:
                _logger.error("Unable to restore %s after a failed update", name, exc_info=True)

    # ------------------------------------------------------------------
    # Localization
    # ------------------------------------------------------------------

    async def update_localization_bundle(self, remote_version: str) -> VersionState:
        if self._config.disable_localization:
            _logger.debug("Localization disabled, skipping bundle %s", remote_version)
            return self._state

        self._status[Track.LOCALIZATION] = TrackStatus.UPDATING
        _logger.info("Updating localization to version %s", remote_version)
        unzip = self._config.use_unzip
        try:
            bundle = await self._upstream.get_localization_bundle(remote_version, unzip)
            loop = asyncio.get_running_loop()
            languages = await loop.run_in_executor(
                None,
                functools.partial(parse_localization_bundle, bundle, self._config.languages, unzip=unzip),
            )
            missing = [language for language in self._config.languages if language not in languages]
            if missing:
                _logger.warning("Localization bundle %s has no %s", remote_version, ", ".join(missing))
            for language, mapping in languages.items():
                await self._store.write(language, VersionedDocument(version=remote_version, data=mapping))
            await self._store.write(
                LOCALIZATION_VERSION_FILE,
                VersionRecord(version_string=remote_version, files=list(languages)),
            )
        except BaseException:
            self._status[Track.LOCALIZATION] = TrackStatus.STALE
            _logger.warning("Localization update to %s failed", remote_version)
            raise

        self._languages = languages
        self._state = self._state.model_copy(update={"localization_version": remote_version})
        self._status[Track.LOCALIZATION] = TrackStatus.FRESH
        _logger.info("Localization updated to version %s (%s)", remote_version, ", ".join(languages) or "none")
        return self._state

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def _read_record(self, name: str) -> VersionRecord:
        payload = await self._store.read(name)
        try:
            return VersionRecord.model_validate(payload)
        except ValidationError as exc:
            raise DocumentParseError(f"Invalid version record {name}: {exc}", name=name) from exc

    async def _load_persisted(self) -> None:
        record = await self._read_record(GAME_DATA_VERSION_FILE)
        if not record.files:
            raise DocumentParseError("Game data version record lists no collections", name=GAME_DATA_VERSION_FILE)

        try:
            tables = LookupTables(
                units=await self._store.read(UNIT_MAP_FILE),
                equipment=await self._store.read(EQUIP_MAP_FILE),
                skills=await self._store.read(SKILL_MAP_FILE),
                mods=await self._store.read(MOD_MAP_FILE),
            )
        except ValidationError as exc:
            raise DocumentParseError(f"Invalid lookup tables: {exc}") from exc

        localization_version: str | None = None
        languages: dict[str, dict[str, str]] = {}
        if not self._config.disable_localization:
            localization_record = await self._read_record(LOCALIZATION_VERSION_FILE)
            localization_version = localization_record.version_string
            for language in self._config.languages:
                if localization_record.files is not None and language not in localization_record.files:
                    _logger.info("Language %s was not in localization bundle %s", language, localization_version)
                    continue
                document = await self._store.read_document(language)
                if not document.is_current(localization_version) or not isinstance(document.data, dict):
                    raise DocumentParseError(f"Language {language} is stale", name=language)
                languages[language] = document.data

        self._state = VersionState(
            game_data_version=record.version_string,
            localization_version=localization_version,
            known_collections=frozenset(record.files),
        )
        self._lookup_tables = tables
        self._languages = languages
        self._status[Track.GAME_DATA] = TrackStatus.FRESH
        if not self._config.disable_localization:
            self._status[Track.LOCALIZATION] = TrackStatus.FRESH

    async def load(self) -> VersionState:
        """Restore the persisted state, falling back to a forced update.

        The fallback's own errors propagate.
        """
        _logger.debug("Loading persisted game data")
        try:
            await self._load_persisted()
        except HelpError as exc:
            _logger.info("Persisted game data unusable (%s), forcing an update", exc)
            return await self.update_check(force=True)
        _logger.info(
            "Loaded game data %s and localization %s",
            self._state.game_data_version,
            self._state.localization_version,
        )
        return self._state
