from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from viewtrail.domain.errors import TrackingError
from viewtrail.domain.services.tracking_service import TrackingService, UploadResult
from viewtrail.infrastructure.storage.upload_storage import LocalUploadStorage


@dataclass
class UploadImageUseCase:
    storage: LocalUploadStorage
    tracking: TrackingService

    def execute(
        self,
        stream: BinaryIO | None,
        original_filename: str | None,
        *,
        sender_name: str | None = None,
    ) -> UploadResult:
        """
        Store the uploaded binary and register a new tracked entry.

        A missing file is passed through as ``None`` so the tracking service
        raises ``NoFileProvided``. If the entry cannot be stored, the binary
        written for it is removed again.
        """
        if stream is None or not original_filename:
            return self.tracking.handle_upload(None, sender_name)
        stored = self.storage.save(stream, original_filename)
        try:
            return self.tracking.handle_upload(stored, sender_name)
        except TrackingError:
            self.storage.delete(stored.stored_name)
            raise
