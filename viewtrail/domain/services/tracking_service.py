from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable

from viewtrail.domain.entities.entry import DEFAULT_SENDER, ImageEntry, ViewRecord
from viewtrail.domain.entities.stored_file import StoredFile
from viewtrail.domain.errors import DuplicateId, NoFileProvided
from viewtrail.domain.services.ids import new_entry_id
from viewtrail.domain.services.store import EntryStore

logger = logging.getLogger(__name__)

ID_ATTEMPTS = 3


@dataclass(frozen=True)
class UploadResult:
    id: str
    link: str


def view_link(entry_id: str) -> str:
    return f"/view/{entry_id}"


@dataclass
class TrackingService:
    """Maps validated upload/view requests onto store operations.

    The service holds no state of its own; the store passed in at startup is
    the single source of truth for every entry and its view history.
    """

    store: EntryStore
    id_factory: Callable[[], str] = field(default=new_entry_id)
    clock: Callable[[], datetime] = field(default=lambda: datetime.now(UTC))

    def handle_upload(self, file_meta: StoredFile | None, sender_name: str | None = None) -> UploadResult:
        if file_meta is None:
            raise NoFileProvided()
        sender = (sender_name or "").strip() or DEFAULT_SENDER
        uploaded_at = self.clock()

        attempt = 0
        while True:
            attempt += 1
            entry = ImageEntry(
                id=self.id_factory(),
                stored_file_name=file_meta.stored_name,
                original_file_name=file_meta.original_name,
                sender_name=sender,
                uploaded_at=uploaded_at,
                file_size=file_meta.size,
                views=(),
            )
            try:
                self.store.append(entry)
                break
            except DuplicateId:
                logger.error("Id collision on upload (attempt %d/%d): %s", attempt, ID_ATTEMPTS, entry.id)
                if attempt >= ID_ATTEMPTS:
                    raise
        logger.info("Stored entry %s from %s (%s)", entry.id, sender, file_meta.original_name)
        return UploadResult(id=entry.id, link=view_link(entry.id))

    def handle_track_view(
        self,
        entry_id: str,
        latitude: float | None = None,
        longitude: float | None = None,
        user_agent: str | None = None,
        fallback_user_agent: str | None = None,
    ) -> bool:
        """Record one open of the tracking link.

        Returns False when ``entry_id`` is unknown; the collection is left
        untouched in that case.
        """
        view = ViewRecord(
            timestamp=self.clock(),
            latitude=latitude,
            longitude=longitude,
            user_agent=user_agent or fallback_user_agent,
        )
        found = self.store.append_view(entry_id, view)
        if found:
            logger.info("Recorded view on %s", entry_id)
        else:
            logger.debug("View for unknown entry %s ignored", entry_id)
        return found

    def get_entry(self, entry_id: str) -> ImageEntry | None:
        return self.store.get(entry_id)

    def list_all(self) -> list[ImageEntry]:
        # Whole collection per call, no paging; fine for the expected scale.
        return self.store.load()
