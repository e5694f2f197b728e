"""Filtering, projection and localization of served records."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from fakehelp._constants import COLLECTION_LIST_RE


def _present(value: Any) -> bool:
    # Zero is a real value; None, "" and False are not.
    return bool(value) or (value == 0 and value is not False)


def strip_list_suffix(collection: str) -> str:
    """``"unitsList"`` -> ``"units"``; other names are returned unchanged."""
    found = COLLECTION_LIST_RE.match(collection)
    return found.group(1) if found else collection


def match(records: Iterable[dict[str, Any]], criteria: Mapping[str, Any] | None) -> list[dict[str, Any]]:
    """Keep the records whose fields equal every value in *criteria*."""
    if not criteria:
        return list(records)
    return [record for record in records if all(record.get(key) == value for key, value in criteria.items())]


def project(source: Any, projection: Mapping[str, Any] | None) -> Any:
    """Return *source* reduced to the truthy keys of *projection*.

    Nested mappings in *projection* project nested objects; lists are
    projected element by element. An empty projection returns *source*.
    Fields that are missing or empty in *source* are omitted.
    """
    if not source or not projection:
        return source
    if isinstance(source, list):
        return [project(item, projection) for item in source]
    if not isinstance(source, Mapping):
        return source

    result: dict[str, Any] = {}
    for key, wanted in projection.items():
        value = source.get(key)
        if isinstance(value, (dict, list)) and isinstance(wanted, Mapping):
            result[key] = project(value, wanted)
        elif wanted and _present(value):
            result[key] = value
    return result


def localize(source: Any, language_map: Mapping[str, str] | None) -> Any:
    """Replace every string value that is a localization key with its text."""
    if not language_map or source is None:
        return source
    if isinstance(source, list):
        return [localize(item, language_map) for item in source]
    if isinstance(source, Mapping):
        return {key: localize(value, language_map) for key, value in source.items()}
    if isinstance(source, str):
        return language_map.get(source) or source
    return source
