"""Internal constants shared across the library."""

from __future__ import annotations

import re

DEFAULT_CLIENT_URL = "http://localhost:3000"
USER_AGENT = "fakehelp/python"

# Comlink error codes that mean "the thing you asked for does not exist".
NOT_FOUND_CODES: frozenset[int] = frozenset({32, 33})

# Human readable descriptions for the Comlink error codes we know about.
ERROR_DESCRIPTIONS: dict[int, str] = {
    2: "Error",
    3: "Server Error",
    7: "Server Unavailable",
    13: "Server Outage",
    20: "Network Unavailable",
    32: "Could not find any players affiliated with these allycodes",
    33: "Event not found",
}

# ------------------------------------------------------------------
# Persisted file names
# ------------------------------------------------------------------

FILE_EXTENSION = ".json"
GAME_DATA_VERSION_FILE = "gameDataVersion"
LOCALIZATION_VERSION_FILE = "localizationVersion"
UNIT_MAP_FILE = "unitMap"
EQUIP_MAP_FILE = "equipMap"
SKILL_MAP_FILE = "skillMap"
MOD_MAP_FILE = "modMap"

# ------------------------------------------------------------------
# Game data
# ------------------------------------------------------------------

INCLUDE_PVE_UNITS = True

UNITS_COLLECTION = "units"
SKILL_COLLECTION = "skill"
ABILITY_COLLECTION = "ability"
EQUIPMENT_COLLECTION = "equipment"
STAT_MOD_COLLECTION = "statMod"

# "0.34.1:Abc123" -> "Abc123"
GAME_DATA_VERSION_RE = re.compile(r"^[0-9]+\.[0-9]+\.[0-9]+:(.*)")
# "unitsList" -> "units"
COLLECTION_LIST_RE = re.compile(r"(.*)List$")

# Numeric-string fields the legacy format exposes as numbers.
NUMBER_KEYS: frozenset[str] = frozenset(
    {
        "galacticScoreRequirement",
        "obtainableTime",
        "raidDuration",
        "scalar",
        "statValueDecimal",
        "uiDisplayOverrideValue",
        "unscaledDecimalValue",
    }
)

# ------------------------------------------------------------------
# Localization
# ------------------------------------------------------------------

LOCALIZATION_BUNDLE_KEY = "localizationBundle"
LOCALIZATION_COMMENT = "#"
LOCALIZATION_SEPARATOR = "|"
LOCALIZATION_FILE_RE = re.compile(r"(Loc_)|(\.txt)", re.IGNORECASE)

# Name fragment identifying the trailing placeholder entry of GameDataSegment.
SEGMENT_SENTINEL_MARKER = "UNKNOWN"
