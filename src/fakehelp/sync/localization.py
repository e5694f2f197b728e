"""Localization bundle decoding.

A bundle arrives either as a base64 zip archive (``localizationBundle``)
or, when Comlink unzips it for us, as a ``{fileName: content}`` mapping.
Each file holds one language as ``key|value`` lines.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import zipfile
from collections.abc import Iterable, Mapping
from typing import Any

from fakehelp._constants import (
    LOCALIZATION_BUNDLE_KEY,
    LOCALIZATION_COMMENT,
    LOCALIZATION_FILE_RE,
    LOCALIZATION_SEPARATOR,
)
from fakehelp.exceptions import LocalizationBundleError

_logger = logging.getLogger(__name__)


def language_from_filename(file_name: str) -> str:
    """``"Loc_ENG_US.txt"`` -> ``"ENG_US"``."""
    return LOCALIZATION_FILE_RE.sub("", file_name).upper()


def parse_localization_line(line: str) -> tuple[str, str] | None:
    """Split one ``key | value`` line; return ``None`` for comments and malformed lines."""
    if line.startswith(LOCALIZATION_COMMENT):
        return None
    parts = line.split(LOCALIZATION_SEPARATOR)
    if len(parts) < 2:
        return None
    key, value = parts[0].strip(), parts[1].strip()
    if not key or not value:
        return None
    return key, value


def parse_lines(lines: Iterable[str]) -> dict[str, str]:
    mapping: dict[str, str] = {}
    for line in lines:
        parsed = parse_localization_line(line)
        if parsed is not None:
            mapping[parsed[0]] = parsed[1]
    return mapping


def _parse_archive(encoded: str, languages: frozenset[str]) -> dict[str, dict[str, str]]:
    try:
        raw = base64.b64decode(encoded)
        archive = zipfile.ZipFile(io.BytesIO(raw))
    except (binascii.Error, zipfile.BadZipFile, ValueError) as exc:
        raise LocalizationBundleError(f"Invalid localization archive: {exc}") from exc

    result: dict[str, dict[str, str]] = {}
    with archive:
        for info in archive.infolist():
            if info.is_dir():
                continue
            language = language_from_filename(info.filename)
            if language not in languages:
                _logger.debug("Skipping localization file %s", info.filename)
                continue
            with archive.open(info) as member:
                # Stream line by line; the archive members are large.
                stream = io.TextIOWrapper(member, encoding="utf-8", errors="replace")
                result[language] = parse_lines(stream)
    return result


def _parse_mapping(files: Mapping[str, Any], languages: frozenset[str]) -> dict[str, dict[str, str]]:
    result: dict[str, dict[str, str]] = {}
    for file_name, content in files.items():
        language = language_from_filename(file_name)
        if language not in languages or not isinstance(content, str):
            continue
        result[language] = parse_lines(content.splitlines())
    return result


def parse_localization_bundle(
    bundle: Mapping[str, Any],
    languages: Iterable[str],
    *,
    unzip: bool,
) -> dict[str, dict[str, str]]:
    """Decode *bundle* into ``{language: {key: text}}`` for the allowed *languages*.

    Blocking; callers on the event loop run it in an executor.
    """
    allowed = frozenset(language.upper() for language in languages)
    if unzip:
        return _parse_mapping(bundle, allowed)

    encoded = bundle.get(LOCALIZATION_BUNDLE_KEY)
    if not isinstance(encoded, str):
        raise LocalizationBundleError(f"Localization bundle has no {LOCALIZATION_BUNDLE_KEY!r} archive")
    return _parse_archive(encoded, allowed)
