from __future__ import annotations

import threading

from viewtrail.domain.entities.entry import ImageEntry, ViewRecord
from viewtrail.domain.errors import DuplicateId
from viewtrail.domain.services.store import EntryStore


class MemoryStore(EntryStore):
    """Process-local store for tests and throwaway demo runs."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        # dicts keep insertion order, which is upload order
        self._entries: dict[str, ImageEntry] = {}

    def load(self) -> list[ImageEntry]:
        with self._lock:
            return list(self._entries.values())

    def append(self, entry: ImageEntry) -> None:
        with self._lock:
            if entry.id in self._entries:
                raise DuplicateId(entry.id)
            self._entries[entry.id] = entry

    def append_view(self, entry_id: str, view: ViewRecord) -> bool:
        with self._lock:
            entry = self._entries.get(entry_id)
            if entry is None:
                return False
            self._entries[entry_id] = entry.with_view(view)
            return True

    def get(self, entry_id: str) -> ImageEntry | None:
        with self._lock:
            return self._entries.get(entry_id)
