from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import pytest

from fakehelp.config import HelpConfig
from fakehelp.models.metadata import Metadata
from fakehelp.storage.files import FileStore


def sample_game_data() -> dict[str, list[dict[str, Any]]]:
    return {
        "units": [
            {
                "baseId": "VADER",
                "obtainable": True,
                "rarity": 7,
                "nameKey": "UNIT_VADER_NAME",
                "combatType": 1,
                "crew": [],
            },
            {
                "baseId": "VADER",
                "obtainable": True,
                "rarity": 1,
                "nameKey": "UNIT_VADER_NAME",
                "combatType": 1,
                "crew": [],
            },
            {
                "baseId": "TIEADVANCED",
                "obtainable": True,
                "rarity": 7,
                "nameKey": "UNIT_TIEADVANCED_NAME",
                "combatType": 2,
                "crew": [{"unitId": "VADER", "slot": 0}],
            },
        ],
        "skill": [
            {
                "id": "basicskill_VADER",
                "abilityReference": "basicability_VADER",
                "isZeta": False,
                "tier": [{"powerOverrideTag": "a"}, {"powerOverrideTag": "b"}],
            }
        ],
        "ability": [{"id": "basicability_VADER", "nameKey": "ABILITY_VADER_BASIC"}],
        "equipment": [{"id": "001", "nameKey": "EQUIP_001"}],
        "statMod": [{"id": "mod-1", "rarity": 5, "setId": 2, "slot": 3}],
        "material": [],
    }


def sample_bundle() -> dict[str, str]:
    return {
        "Loc_ENG_US.txt": "# comment\nUNIT_VADER_NAME|Darth Vader\nABILITY_VADER_BASIC | Saber Throw\n",
        "Loc_GER_DE.txt": "UNIT_VADER_NAME|Darth Vader (DE)\n",
    }


class FakeUpstream:
    """In-memory stand-in for the Comlink client."""

    def __init__(
        self,
        *,
        game_version: str = "0.34.1:AbCdEf",
        localization_version: str = "loc-1",
        game_data: dict[str, Any] | None = None,
        bundle: dict[str, Any] | None = None,
    ) -> None:
        self.game_version = game_version
        self.localization_version = localization_version
        self.game_data = game_data if game_data is not None else sample_game_data()
        self.bundle = bundle if bundle is not None else sample_bundle()
        self.segments: list[tuple[str, int]] = []
        self.segment_data: dict[int, dict[str, Any]] = {}
        self.players: dict[str, dict[str, Any]] = {}
        self.guilds: dict[str, dict[str, Any]] = {}
        self.events: dict[str, Any] = {"gameEvent": []}
        self.metadata_error: Exception | None = None
        self.game_data_error: Exception | None = None
        self.calls: list[tuple[Any, ...]] = []

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    async def get_metadata(self) -> Metadata:
        self.calls.append(("metadata",))
        if self.metadata_error is not None:
            raise self.metadata_error
        return Metadata(
            latest_gamedata_version=self.game_version,
            latest_localization_bundle_version=self.localization_version,
        )

    async def get_game_data(
        self,
        version: str,
        include_pve_units: bool = True,
        segment: int | None = None,
    ) -> dict[str, Any]:
        self.calls.append(("game_data", version, segment))
        if self.game_data_error is not None:
            raise self.game_data_error
        source = self.game_data if segment is None else self.segment_data[segment]
        return copy.deepcopy(source)

    async def get_localization_bundle(self, version: str, unzip: bool) -> dict[str, Any]:
        self.calls.append(("localization", version, unzip))
        return dict(self.bundle)

    async def get_segment_enum(self) -> list[tuple[str, int]]:
        self.calls.append(("segments",))
        return list(self.segments)

    async def get_player(self, ally_code: str | None = None, player_id: str | None = None) -> dict[str, Any]:
        self.calls.append(("player", ally_code, player_id))
        for player in self.players.values():
            if (ally_code and player["allyCode"] == ally_code) or (player_id and player["playerId"] == player_id):
                return player
        raise LookupError(ally_code or player_id)

    async def get_guild(self, guild_id: str, include_recent_activity: bool = True) -> dict[str, Any]:
        self.calls.append(("guild", guild_id, include_recent_activity))
        return self.guilds[guild_id]

    async def get_events(self) -> dict[str, Any]:
        self.calls.append(("events",))
        return self.events


class RecordingStore(FileStore):
    """FileStore that remembers the names it wrote, in order."""

    def __init__(self, data_path: str | Path) -> None:
        super().__init__(data_path)
        self.writes: list[str] = []

    async def write(self, name: str, document: Any) -> None:
        self.writes.append(name)
        await super().write(name, document)


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def store(tmp_path: Path) -> RecordingStore:
    return RecordingStore(tmp_path / "data")


@pytest.fixture
def config(tmp_path: Path) -> HelpConfig:
    return HelpConfig(data_path=str(tmp_path / "data"), use_unzip=True, languages=("ENG_US",))
