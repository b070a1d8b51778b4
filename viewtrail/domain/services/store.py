from __future__ import annotations

from abc import ABC, abstractmethod

from viewtrail.domain.entities.entry import ImageEntry, ViewRecord


class EntryStore(ABC):
    """Durable custodian of the ImageEntry collection.

    Implementations must serialize mutations: ``append`` and ``append_view``
    never interleave their read-modify-write cycles, so no view or entry is
    lost to a concurrent overwrite.
    """

    @abstractmethod
    def load(self) -> list[ImageEntry]:
        """Return the full collection.

        Raises:
            StoreUnavailable: If the backing medium cannot be read.
        """

    @abstractmethod
    def append(self, entry: ImageEntry) -> None:
        """Add a new entry.

        Raises:
            DuplicateId: If an entry with the same id already exists.
        """

    @abstractmethod
    def append_view(self, entry_id: str, view: ViewRecord) -> bool:
        """Append ``view`` to the entry's history; False if the id is unknown."""

    def get(self, entry_id: str) -> ImageEntry | None:
        for entry in self.load():
            if entry.id == entry_id:
                return entry
        return None

    def close(self) -> None:
        return None
