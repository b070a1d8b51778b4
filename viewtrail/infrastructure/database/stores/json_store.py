"""Single JSON document store.

The whole collection lives in one file holding an array of entry objects.
Every mutation runs read -> mutate -> persist while holding the store lock,
and persistence goes through a temp file that is renamed over the target, so
readers only ever see a complete document.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any

from viewtrail.domain.entities.entry import ImageEntry, ViewRecord
from viewtrail.domain.errors import DuplicateId, StoreUnavailable
from viewtrail.domain.services.store import EntryStore
from viewtrail.infrastructure.database.stores.codec import entry_to_row, row_to_entry, view_to_row

logger = logging.getLogger(__name__)


class JsonFileStore(EntryStore):
    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        # one lock per store; a second process writing the same file is not supported
        self._lock = threading.Lock()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        if not self.path.exists():
            self._write_rows([])

    def _read_rows(self) -> list[dict[str, Any]]:
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                rows = json.load(fh)
        except (OSError, ValueError) as exc:
            raise StoreUnavailable(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(rows, list):
            raise StoreUnavailable(f"Corrupt database {self.path}: expected a JSON array")
        return rows

    def _write_rows(self, rows: list[dict[str, Any]]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(rows, fh, indent=2, allow_nan=False)
                fh.flush()
                os.fsync(fh.fileno())
            os.replace(tmp_name, self.path)
        except (OSError, ValueError) as exc:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise StoreUnavailable(f"Cannot write {self.path}: {exc}") from exc

    def load(self) -> list[ImageEntry]:
        with self._lock:
            rows = self._read_rows()
        try:
            return [row_to_entry(row) for row in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise StoreUnavailable(f"Corrupt entry in {self.path}: {exc}") from exc

    def append(self, entry: ImageEntry) -> None:
        with self._lock:
            rows = self._read_rows()
            if any(row.get("id") == entry.id for row in rows):
                raise DuplicateId(entry.id)
            rows.append(entry_to_row(entry))
            self._write_rows(rows)

    def append_view(self, entry_id: str, view: ViewRecord) -> bool:
        with self._lock:
            rows = self._read_rows()
            for row in rows:
                if row.get("id") == entry_id:
                    row.setdefault("views", []).append(view_to_row(view))
                    self._write_rows(rows)
                    return True
            return False

    def close(self) -> None:
        # Every mutation is already on disk; wait for one in flight to finish.
        with self._lock:
            logger.debug("Closed JSON store at %s", self.path)
