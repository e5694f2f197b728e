"""Data models for fakehelp."""

from fakehelp.models.lookup import LookupTables
from fakehelp.models.metadata import Metadata
from fakehelp.models.version import VersionedDocument, VersionRecord, VersionState

__all__ = [
    "LookupTables",
    "Metadata",
    "VersionRecord",
    "VersionState",
    "VersionedDocument",
]
