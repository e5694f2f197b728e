"""Periodic upstream version polling.

The poller owns the "has anything changed upstream" loop; what to do about
a change is left to the ``on_update`` callback (normally
:meth:`SyncEngine.update_check`).
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from fakehelp.client import Upstream
from fakehelp.models.metadata import Metadata

_logger = logging.getLogger(__name__)


class UpdatePoller:
    """Compare upstream versions with a baseline every *interval* seconds.

    Polls never overlap: the loop awaits each poll, including the
    callback, before sleeping again. Stopping only ends the sleep; a poll
    already running is allowed to finish.
    """

    def __init__(
        self,
        upstream: Upstream,
        on_update: Callable[[Metadata], Awaitable[None]],
        *,
        interval: float,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self._upstream = upstream
        self._on_update = on_update
        self._interval = interval
        self._baseline: Metadata | None = None
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def baseline(self) -> Metadata | None:
        return self._baseline

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> Metadata:
        """Record the baseline versions and schedule the polling loop.

        Errors fetching the initial metadata propagate and nothing is
        scheduled.
        """
        if self.is_running:
            raise RuntimeError("Update poller already running")
        self._baseline = await self._upstream.get_metadata()
        _logger.info(
            "Listening for updates every %ss (game %s, localization %s)",
            self._interval,
            self._baseline.latest_gamedata_version,
            self._baseline.latest_localization_bundle_version,
        )
        self._stopping = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="fakehelp-update-poller")
        return self._baseline

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        self._stopping.set()
        await task

    async def poll_once(self) -> bool:
        """Fetch metadata once; notify and return True when a version changed."""
        metadata = await self._upstream.get_metadata()
        if self._baseline is not None and metadata.same_versions(self._baseline):
            _logger.debug("No upstream version change")
            return False

        self._baseline = metadata
        _logger.info(
            "New upstream version: game %s, localization %s",
            metadata.latest_gamedata_version,
            metadata.latest_localization_bundle_version,
        )
        await self._on_update(metadata)
        return True

    async def _run(self) -> None:
        while True:
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self._interval)
            except TimeoutError:
                pass
            else:
                return
            try:
                await self.poll_once()
            except Exception:
                _logger.error("Update poll failed", exc_info=True)
