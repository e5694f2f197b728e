"""Lookup table derivation from normalized game data collections."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from fakehelp.models.lookup import LookupTables

_logger = logging.getLogger(__name__)

Record = dict[str, Any]


def _identified(records: Iterable[Record], key: str, kind: str) -> Iterator[tuple[str, Record]]:
    """Yield (id, record) pairs, skipping records without an identifier."""
    for record in records:
        identifier = record.get(key)
        if identifier is None or identifier == "":
            _logger.warning("Skipping %s record without %s", kind, key)
            continue
        yield str(identifier), record


def _unit_map(units: Iterable[Record]) -> dict[str, Record]:
    result: dict[str, Record] = {}
    for base_id, unit in _identified(units, "baseId", "unit"):
        if unit.get("obtainable") is not True or unit.get("rarity") != 7:
            continue
        result[base_id] = {
            "nameKey": unit.get("nameKey"),
            "combatType": unit.get("combatType"),
            "crew": unit.get("crewList") or [],
        }
    return result


def _equipment_map(equipment: Iterable[Record]) -> dict[str, Record]:
    return {
        gear_id: {"nameKey": gear.get("nameKey")}
        for gear_id, gear in _identified(equipment, "id", "equipment")
    }


def _skill_map(skills: Iterable[Record], abilities: Iterable[Record]) -> dict[str, Record]:
    ability_names = {ability.get("id"): ability.get("nameKey") for ability in abilities}
    result: dict[str, Record] = {}
    for skill_id, skill in _identified(skills, "id", "skill"):
        ability_id = skill.get("abilityReference")
        result[skill_id] = {
            "nameKey": ability_names.get(ability_id),
            "isZeta": skill.get("isZeta"),
            "tiers": len(skill.get("tierList") or []),
            "abilityId": ability_id,
        }
    return result


def _mod_map(mods: Iterable[Record]) -> dict[str, Record]:
    return {
        mod_id: {
            "pips": mod.get("rarity"),
            "set": mod.get("setId"),
            "slot": mod.get("slot"),
        }
        for mod_id, mod in _identified(mods, "id", "mod")
    }


def build_lookup_tables(
    units: Iterable[Record],
    skills: Iterable[Record],
    abilities: Iterable[Record],
    equipment: Iterable[Record],
    mods: Iterable[Record],
) -> LookupTables:
    """Build the unit, equipment, skill and mod maps as one snapshot.

    Only obtainable 7-star unit records are kept, so each ``baseId`` maps to
    exactly one definition. Skill names come from the referenced ability.
    """
    return LookupTables(
        units=_unit_map(units),
        equipment=_equipment_map(equipment),
        skills=_skill_map(skills, abilities),
        mods=_mod_map(mods),
    )
