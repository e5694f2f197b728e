from __future__ import annotations

from fakehelp.query import localize, match, project, strip_list_suffix


def test_strip_list_suffix() -> None:
    assert strip_list_suffix("unitsList") == "units"
    assert strip_list_suffix("units") == "units"


def test_match_filters_on_every_criterion() -> None:
    records = [
        {"baseId": "VADER", "rarity": 7},
        {"baseId": "VADER", "rarity": 1},
        {"baseId": "PALPATINE", "rarity": 7},
    ]

    assert match(records, {"baseId": "VADER", "rarity": 7}) == [{"baseId": "VADER", "rarity": 7}]
    assert match(records, None) == records


def test_project_keeps_selected_fields_and_zero_values() -> None:
    source = {"id": "A", "rarity": 0, "name": "", "skip": True, "nested": {"x": 1, "y": 2}}

    assert project(source, {"id": 1, "rarity": 1, "name": 1, "nested": {"y": 1}}) == {
        "id": "A",
        "rarity": 0,
        "nested": {"y": 2},
    }


def test_project_applies_to_every_list_element() -> None:
    assert project([{"a": 1, "b": 2}, {"a": 3}], {"a": 1}) == [{"a": 1}, {"a": 3}]


def test_empty_projection_returns_source() -> None:
    source = {"a": 1}
    assert project(source, {}) is source
    assert project(source, None) is source


def test_localize_replaces_known_keys_recursively() -> None:
    language = {"UNIT_VADER_NAME": "Darth Vader"}
    source = {"nameKey": "UNIT_VADER_NAME", "crew": [{"nameKey": "UNIT_VADER_NAME"}], "rarity": 7, "other": "X"}

    assert localize(source, language) == {
        "nameKey": "Darth Vader",
        "crew": [{"nameKey": "Darth Vader"}],
        "rarity": 7,
        "other": "X",
    }
    assert localize(source, None) is source
