"""Normalization of raw Comlink collections into the legacy record shape.

Comlink returns repeated fields as bare names (``crew``, ``tier``); the
persisted collections expose them with a ``List`` suffix and cast a handful
of numeric-string fields to numbers.
"""

from __future__ import annotations

from typing import Any

from fakehelp._constants import NUMBER_KEYS


def to_number(value: Any) -> Any:
    """Cast a numeric string to ``int`` or ``float``; other values pass through."""
    if not isinstance(value, str):
        return value
    text = value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return float(text)
    except ValueError:
        return value


def to_legacy_format(value: Any, key: str | None = None) -> Any:
    """Return a normalized copy of *value*.

    Every mapping key holding a list gets a ``List`` suffix, recursively.
    Truthy values under one of ``NUMBER_KEYS`` are cast to numbers.
    """
    if not value:
        return value
    if isinstance(value, list):
        return [to_legacy_format(item) for item in value]
    if isinstance(value, dict):
        return {
            (f"{name}List" if isinstance(item, list) else name): to_legacy_format(item, name)
            for name, item in value.items()
        }
    if key in NUMBER_KEYS:
        return to_number(value)
    return value


def normalize_collection(records: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [to_legacy_format(record) for record in records]
