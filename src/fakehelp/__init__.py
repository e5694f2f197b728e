"""fakehelp - Versioned game data mirror for the SWGOH Comlink service."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("fakehelp")
except PackageNotFoundError:
    __version__ = "0+local"
from fakehelp.cache import TtlCache
from fakehelp.client import ComlinkClient, Upstream
from fakehelp.config import HelpConfig
from fakehelp.exceptions import (
    CollectionUnavailableError,
    DocumentNotFoundError,
    DocumentParseError,
    HelpApiError,
    HelpConfigError,
    HelpError,
    HelpNotFoundError,
    HelpStoreError,
    HelpTransportError,
    LocalizationBundleError,
    NotInGuildError,
    UnknownCollectionError,
    UnknownLanguageError,
)
from fakehelp.models import LookupTables, Metadata, VersionedDocument, VersionRecord, VersionState
from fakehelp.parallel import execute_in_parallel
from fakehelp.service import HelpService
from fakehelp.storage import FileStore, SelfHealingStore
from fakehelp.sync import SyncEngine, Track, TrackStatus, UpdatePoller, build_lookup_tables

__all__ = [
    "CollectionUnavailableError",
    "ComlinkClient",
    "DocumentNotFoundError",
    "DocumentParseError",
    "FileStore",
    "HelpApiError",
    "HelpConfig",
    "HelpConfigError",
    "HelpError",
    "HelpNotFoundError",
    "HelpService",
    "HelpStoreError",
    "HelpTransportError",
    "LocalizationBundleError",
    "LookupTables",
    "Metadata",
    "NotInGuildError",
    "SelfHealingStore",
    "SyncEngine",
    "Track",
    "TrackStatus",
    "TtlCache",
    "UnknownCollectionError",
    "UnknownLanguageError",
    "UpdatePoller",
    "Upstream",
    "VersionRecord",
    "VersionState",
    "VersionedDocument",
    "__version__",
    "build_lookup_tables",
    "execute_in_parallel",
]
