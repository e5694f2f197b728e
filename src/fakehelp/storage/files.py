"""JSON file store: one file per collection, language or record.

Writes fully replace the previous file. There is no partial-write
protection beyond what a single-file overwrite gives on the medium, and
a single writer per name is assumed.
"""

from __future__ import annotations

import asyncio
import functools
import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from fakehelp._constants import FILE_EXTENSION
from fakehelp.exceptions import DocumentNotFoundError, DocumentParseError
from fakehelp.models.version import VersionedDocument, VersionRecord

_logger = logging.getLogger(__name__)


class FileStore:
    """Read and write JSON documents under ``data_path``.

    Blocking file I/O runs in the loop's default executor so that large
    collections do not stall the event loop.
    """

    def __init__(self, data_path: str | Path) -> None:
        self._root = Path(data_path)

    @property
    def root(self) -> Path:
        return self._root

    def path_for(self, name: str) -> Path:
        return self._root / f"{name}{FILE_EXTENSION}"

    async def write(self, name: str, document: VersionedDocument | VersionRecord | dict[str, Any]) -> None:
        """Serialize *document* to ``<name>.json``, replacing prior contents."""
        payload = document if isinstance(document, dict) else document.to_document()
        loop = asyncio.get_running_loop()
        size = await loop.run_in_executor(None, self._write_json, self.path_for(name), payload)
        _logger.debug("Wrote %s (%d bytes)", name, size)

    async def read(self, name: str) -> Any:
        """Return the decoded contents of ``<name>.json``.

        Raises
        ------
        DocumentNotFoundError
            If the file does not exist.
        DocumentParseError
            If the file is not valid JSON.
        """
        path = self.path_for(name)
        loop = asyncio.get_running_loop()
        try:
            text = await loop.run_in_executor(None, path.read_text, "utf-8")
        except FileNotFoundError as exc:
            raise DocumentNotFoundError(f"No stored document named {name!r}", name=name) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentParseError(f"Unable to read stored document {name!r}: {exc}", name=name) from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise DocumentParseError(f"Stored document {name!r} is not valid JSON: {exc}", name=name) from exc

    async def read_document(self, name: str) -> VersionedDocument:
        """Read ``<name>.json`` as a ``{version, data}`` document."""
        raw = await self.read(name)
        try:
            return VersionedDocument.model_validate(raw)
        except ValidationError as exc:
            raise DocumentParseError(f"Stored document {name!r} is not a versioned document", name=name) from exc

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    async def remove(self, name: str) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, functools.partial(self.path_for(name).unlink, missing_ok=True))
        _logger.debug("Removed %s", name)

    def _write_json(self, path: Path, payload: Any) -> int:
        text = json.dumps(payload, separators=(",", ":"), ensure_ascii=False)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return len(text)
