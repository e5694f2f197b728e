"""Derived lookup tables rebuilt after every game data update."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fakehelp._constants import EQUIP_MAP_FILE, MOD_MAP_FILE, SKILL_MAP_FILE, UNIT_MAP_FILE


class LookupTables(BaseModel):
    """Unit, equipment, skill and mod definitions keyed by identifier.

    The four maps form one snapshot: they are built together and
    replaced together. Each is persisted as a bare mapping.
    """

    model_config = ConfigDict(frozen=True)

    units: dict[str, dict[str, Any]] = Field(default_factory=dict)
    equipment: dict[str, dict[str, Any]] = Field(default_factory=dict)
    skills: dict[str, dict[str, Any]] = Field(default_factory=dict)
    mods: dict[str, dict[str, Any]] = Field(default_factory=dict)

    def documents(self) -> dict[str, dict[str, dict[str, Any]]]:
        """File name -> mapping, in the order they are persisted."""
        return {
            UNIT_MAP_FILE: self.units,
            EQUIP_MAP_FILE: self.equipment,
            SKILL_MAP_FILE: self.skills,
            MOD_MAP_FILE: self.mods,
        }

    @property
    def is_empty(self) -> bool:
        return not (self.units or self.equipment or self.skills or self.mods)
