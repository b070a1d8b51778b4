from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime

DEFAULT_SENDER = "Anonymous"


@dataclass(frozen=True)
class ViewRecord:
    timestamp: datetime
    latitude: float | None = None
    longitude: float | None = None
    user_agent: str | None = None


@dataclass(frozen=True)
class ImageEntry:
    id: str
    stored_file_name: str  # name inside the upload directory
    original_file_name: str
    sender_name: str
    uploaded_at: datetime
    file_size: int | None = None  # bytes
    # insertion order is chronological, never reordered
    views: tuple[ViewRecord, ...] = field(default_factory=tuple)

    def with_view(self, view: ViewRecord) -> ImageEntry:
        return replace(self, views=self.views + (view,))
