"""Mapping between domain entries and their persisted JSON objects."""
from __future__ import annotations

from datetime import datetime
from typing import Any

from viewtrail.domain.entities.entry import DEFAULT_SENDER, ImageEntry, ViewRecord


def _parse_ts(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        return value
    # older documents carry JavaScript style "...Z" timestamps
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def view_to_row(view: ViewRecord) -> dict[str, Any]:
    return {
        "timestamp": view.timestamp.isoformat(),
        "latitude": view.latitude,
        "longitude": view.longitude,
        "userAgent": view.user_agent,
    }


def row_to_view(row: dict[str, Any]) -> ViewRecord:
    return ViewRecord(
        timestamp=_parse_ts(row["timestamp"]),
        latitude=row.get("latitude"),
        longitude=row.get("longitude"),
        user_agent=row.get("userAgent"),
    )


def entry_to_row(entry: ImageEntry) -> dict[str, Any]:
    return {
        "id": entry.id,
        "filename": entry.stored_file_name,
        "originalName": entry.original_file_name,
        "senderName": entry.sender_name,
        "uploadedAt": entry.uploaded_at.isoformat(),
        "fileSize": entry.file_size,
        "views": [view_to_row(v) for v in entry.views],
    }


def row_to_entry(row: dict[str, Any]) -> ImageEntry:
    return ImageEntry(
        id=str(row["id"]),
        stored_file_name=row["filename"],
        original_file_name=row.get("originalName", row["filename"]),
        sender_name=row.get("senderName") or DEFAULT_SENDER,
        uploaded_at=_parse_ts(row["uploadedAt"]),
        file_size=row.get("fileSize"),
        views=tuple(row_to_view(v) for v in row.get("views", [])),
    )
