"""Game data and localization synchronization."""

from fakehelp.sync.engine import SyncEngine, Track, TrackStatus
from fakehelp.sync.lookup import build_lookup_tables
from fakehelp.sync.poller import UpdatePoller

__all__ = [
    "SyncEngine",
    "Track",
    "TrackStatus",
    "UpdatePoller",
    "build_lookup_tables",
]
