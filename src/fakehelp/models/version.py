"""Versioned documents and the synchronization version state."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fakehelp.models._base import HelpBaseModel


class VersionedDocument(BaseModel):
    """Unit of persistence for a collection or a language map.

    A document is only valid when ``version`` equals the version the
    caller currently expects; presence on disk alone means nothing.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    version: str
    data: Any

    def is_current(self, expected_version: str | None) -> bool:
        return expected_version is not None and self.version == expected_version

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class VersionRecord(HelpBaseModel):
    """Persisted ``gameDataVersion`` / ``localizationVersion`` record.

    On disk: ``{"versionString": "...", "files": [...]}``. ``files`` lists
    the persisted collections, or the persisted languages for the
    localization record. Records written without it load as ``None``.
    """

    version_string: str
    files: list[str] | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VersionState(HelpBaseModel):
    """In-memory version state owned by the synchronization engine.

    Parameters
    ----------
    game_data_version : str or None
        Version of the persisted game data collections.
    localization_version : str or None
        Version of the persisted language maps.
    known_collections : frozenset of str
        Collections actually persisted as of ``game_data_version``.
    """

    game_data_version: str | None = None
    localization_version: str | None = None
    known_collections: frozenset[str] = Field(default_factory=frozenset)
