"""Self-healing read path over :class:`FileStore`.

A missing, unreadable or stale collection triggers one forced full
synchronization and one retry. A second failure is terminal for that read
so a persistently broken upstream cannot cause an update loop.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from fakehelp.exceptions import CollectionUnavailableError, HelpStoreError
from fakehelp.storage.files import FileStore

if TYPE_CHECKING:
    from fakehelp.sync.engine import SyncEngine

_logger = logging.getLogger(__name__)


class SelfHealingStore:
    """Read versioned collections, resynchronizing once when they are stale."""

    def __init__(self, store: FileStore, engine: SyncEngine) -> None:
        self._store = store
        self._engine = engine

    async def _try_read(self, name: str, expected_version: str | None) -> tuple[bool, Any]:
        try:
            document = await self._store.read_document(name)
        except HelpStoreError as exc:
            _logger.debug("Reading %s failed: %s", name, exc)
            return False, None
        if not document.is_current(expected_version):
            _logger.debug("%s is at version %s, expected %s", name, document.version, expected_version)
            return False, None
        return True, document.data

    async def read_validated(self, name: str, expected_version: str | None) -> Any:
        """Return the data of collection *name* if it is stored at *expected_version*.

        Raises
        ------
        CollectionUnavailableError
            When the collection is still missing or stale after one forced
            synchronization.
        """
        ok, data = await self._try_read(name, expected_version)
        if ok:
            return data

        _logger.warning("There was an error reading %s, updating game data to resolve it", name)
        await self._engine.update_check(force=True)

        ok, data = await self._try_read(name, expected_version)
        if ok:
            return data
        raise CollectionUnavailableError(f"Unable to load game data collection {name}", name=name)
