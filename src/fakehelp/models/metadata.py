"""Comlink metadata model."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from fakehelp.models._base import HelpBaseModel


class Metadata(HelpBaseModel):
    """Latest upstream version identifiers.

    Parameters
    ----------
    latest_gamedata_version : str
        Game data version (e.g. ``"0.34.1:AbCdEf"``).
    latest_localization_bundle_version : str
        Localization bundle version.
    raw : dict
        Full metadata payload for access to additional fields.
    """

    latest_gamedata_version: str
    latest_localization_bundle_version: str
    raw: dict[str, Any] = Field(default_factory=dict, exclude=True)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> Metadata:
        return cls.model_validate({**payload, "raw": payload})

    def same_versions(self, other: Metadata) -> bool:
        return (
            self.latest_gamedata_version == other.latest_gamedata_version
            and self.latest_localization_bundle_version == other.latest_localization_bundle_version
        )
