"""Keyed store of published project files.

Published files are kept in memory and, when a directory is given,
mirrored to one ``{id}.json`` file per record so they survive a restart.
"""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

from ..core.model import Document
from .parser import dumps

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PublishedFile:
    """A published snapshot of a project.

    Attributes:
        id: Store-assigned identifier.
        name: Project name at publish time.
        timestamp: ISO 8601 publish time.
        unit_count: Number of template instances in the project.
        app_state: The serialized project JSON.
    """

    id: str
    name: str
    timestamp: str
    unit_count: int
    app_state: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "timestamp": self.timestamp,
            "unitCount": self.unit_count,
            "appState": self.app_state,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PublishedFile":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            timestamp=str(data["timestamp"]),
            unit_count=int(data["unitCount"]),
            app_state=str(data["appState"]),
        )


class FileStore:
    """In-memory store of PublishedFile records, optionally directory-backed."""

    def __init__(self, directory: str | Path | None = None):
        self._files: Dict[str, PublishedFile] = {}
        self._directory = Path(directory) if directory is not None else None

        if self._directory is not None:
            self._directory.mkdir(parents=True, exist_ok=True)
            self._load()

    def _load(self) -> None:
        for path in sorted(self._directory.glob("*.json")):
            try:
                with open(path, encoding="utf-8") as f:
                    record = PublishedFile.from_dict(json.load(f))
            except (OSError, KeyError, TypeError, ValueError) as e:
                LOGGER.warning("Skipping unreadable published file %s: %s", path, e)
                continue
            self._files[record.id] = record
        LOGGER.debug("Loaded %d published files from %s", len(self._files), self._directory)

    def _path(self, file_id: str) -> Path:
        return self._directory / f"{file_id}.json"

    def _write(self, record: PublishedFile) -> None:
        if self._directory is None:
            return
        with open(self._path(record.id), "w", encoding="utf-8") as f:
            json.dump(record.to_dict(), f, indent=2)

    def create(self, name: str, timestamp: str, unit_count: int, app_state: str) -> PublishedFile:
        """Store a new record under a fresh id.

        Raises:
            ValueError: If a required field is missing.
        """
        if not name or not timestamp or unit_count is None or not app_state:
            raise ValueError("Missing required fields")

        record = PublishedFile(
            id=str(uuid.uuid4()),
            name=name,
            timestamp=timestamp,
            unit_count=int(unit_count),
            app_state=app_state,
        )
        self._files[record.id] = record
        self._write(record)
        LOGGER.info("Published '%s' as %s", name, record.id)
        return record

    def get(self, file_id: str) -> Optional[PublishedFile]:
        return self._files.get(file_id)

    def list_all(self) -> List[PublishedFile]:
        return list(self._files.values())

    def update(self, file_id: str, **changes) -> Optional[PublishedFile]:
        """Update fields of a record; returns None when the id is unknown."""
        existing = self._files.get(file_id)
        if existing is None:
            return None

        changes.pop("id", None)
        updated = replace(existing, **changes)
        self._files[file_id] = updated
        self._write(updated)
        return updated

    def delete(self, file_id: str) -> bool:
        if file_id not in self._files:
            return False

        del self._files[file_id]
        if self._directory is not None:
            self._path(file_id).unlink(missing_ok=True)
        return True


def publish_document(store: FileStore, document: Document) -> PublishedFile:
    """Publish the committed state of a document to a store."""
    return store.create(
        name=document.file_name,
        timestamp=datetime.now(timezone.utc).isoformat(),
        unit_count=len(document.instances),
        app_state=dumps(document, indent=None),
    )

