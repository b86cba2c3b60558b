"""Local JSON-file store for saved scripts, images and audio.

Layout under ``root``::

    scripts.json   [SavedScript, ...]
    images.json    [SavedImage, ...]
    audio.json     [SavedAudio, ...]

Listing is always newest first. Writes go to a temp file in the same
directory followed by ``os.replace``, so a crash never leaves a half-written
collection behind.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

from pydantic import BaseModel, ValidationError

from promptstudio.core.library.models import RECORD_TYPES, LibraryKind, SavedRecord, kind_of

logger = logging.getLogger(__name__)


class LibraryError(Exception):
    """A collection file exists but cannot be read."""


class LibraryStore:
    """CRUD over the three library collections.

    Args:
        root: Directory holding the collection files (created on first write)

    Example:
        >>> store = LibraryStore("data/library")
        >>> store.add(script_record(prompt, result))
        >>> for saved in store.list(LibraryKind.SCRIPTS):
        ...     print(saved.title)
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    def path_for(self, kind: LibraryKind) -> Path:
        return self.root / f"{kind.value}.json"

    def _read(self, kind: LibraryKind) -> list[Any]:
        path = self.path_for(kind)
        if not path.exists():
            return []
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except ValueError as e:
            raise LibraryError(f"Invalid JSON in {path}: {e}") from e
        if not isinstance(raw, list):
            raise LibraryError(f"Expected a JSON list in {path}, got {type(raw).__name__}")

        record_type = RECORD_TYPES[kind]
        try:
            return [record_type.model_validate(item) for item in raw]
        except ValidationError as e:
            raise LibraryError(f"Invalid {kind.value} record in {path}: {e}") from e

    def _write(self, kind: LibraryKind, records: list[BaseModel]) -> None:
        path = self.path_for(kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            [record.model_dump(mode="json") for record in records],
            indent=2,
            ensure_ascii=False,
        )

        with NamedTemporaryFile(
            mode="w", encoding="utf-8", dir=path.parent, suffix=".tmp", delete=False
        ) as tmp:
            tmp.write(payload)
            tmp_path = tmp.name
        try:
            os.replace(tmp_path, path)
        except OSError:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(records)} {kind.value} record(s) to {path}")

    def add(self, record: SavedRecord) -> SavedRecord:
        """Insert a record, replacing any existing record with the same id."""
        kind = kind_of(record)
        records = [r for r in self._read(kind) if r.id != record.id]
        records.append(record)
        self._write(kind, records)
        logger.info(f"Saved {kind.value} record {record.id}")
        return record

    def list(self, kind: LibraryKind) -> list[Any]:
        """All records of ``kind``, newest first."""
        return sorted(self._read(kind), key=lambda r: r.created_at, reverse=True)

    def get(self, kind: LibraryKind, record_id: str) -> Any | None:
        """Record by id, or None."""
        return next((r for r in self._read(kind) if r.id == record_id), None)

    def delete(self, kind: LibraryKind, record_id: str) -> bool:
        """Remove a record by id.

        Returns:
            True if a record was removed
        """
        records = self._read(kind)
        kept = [r for r in records if r.id != record_id]
        if len(kept) == len(records):
            return False
        self._write(kind, kept)
        logger.info(f"Deleted {kind.value} record {record_id}")
        return True

    def clear(self, kind: LibraryKind) -> None:
        """Remove every record of ``kind``."""
        self._write(kind, [])
