from __future__ import annotations

import logging
from typing import Any

from viewtrail.domain.entities.entry import DEFAULT_SENDER, ImageEntry, ViewRecord
from viewtrail.domain.errors import DuplicateId
from viewtrail.domain.services.store import EntryStore
from viewtrail.infrastructure.database.postgres_client import PostgresClient

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS entries (
    seq BIGSERIAL UNIQUE,
    id TEXT PRIMARY KEY,
    filename TEXT NOT NULL,
    original_name TEXT NOT NULL,
    sender_name TEXT NOT NULL,
    uploaded_at TIMESTAMPTZ NOT NULL,
    file_size BIGINT
);
CREATE TABLE IF NOT EXISTS entry_views (
    entry_id TEXT NOT NULL REFERENCES entries(id),
    position INTEGER NOT NULL,
    viewed_at TIMESTAMPTZ NOT NULL,
    latitude DOUBLE PRECISION,
    longitude DOUBLE PRECISION,
    user_agent TEXT,
    PRIMARY KEY (entry_id, position)
);
"""


class PostgresStore(EntryStore):
    """Transactional store; row locks on the owning entry serialize view appends."""

    def __init__(self, client: PostgresClient) -> None:
        self.client = client
        with self.client.transaction() as cur:
            cur.execute(SCHEMA)

    def _row_to_view(self, row: dict[str, Any]) -> ViewRecord:
        return ViewRecord(
            timestamp=row["viewed_at"],
            latitude=row.get("latitude"),
            longitude=row.get("longitude"),
            user_agent=row.get("user_agent"),
        )

    def _row_to_entity(self, row: dict[str, Any], views: list[ViewRecord]) -> ImageEntry:
        return ImageEntry(
            id=row["id"],
            stored_file_name=row["filename"],
            original_file_name=row["original_name"],
            sender_name=row.get("sender_name") or DEFAULT_SENDER,
            uploaded_at=row["uploaded_at"],
            file_size=row.get("file_size"),
            views=tuple(views),
        )

    def load(self) -> list[ImageEntry]:
        with self.client.transaction() as cur:
            cur.execute("SELECT * FROM entries ORDER BY seq")
            entry_rows = cur.fetchall()
            cur.execute("SELECT * FROM entry_views ORDER BY entry_id, position")
            view_rows = cur.fetchall()
        views: dict[str, list[ViewRecord]] = {}
        for row in view_rows:
            views.setdefault(row["entry_id"], []).append(self._row_to_view(row))
        return [self._row_to_entity(row, views.get(row["id"], [])) for row in entry_rows]

    def get(self, entry_id: str) -> ImageEntry | None:
        with self.client.transaction() as cur:
            cur.execute("SELECT * FROM entries WHERE id = %s", (entry_id,))
            row = cur.fetchone()
            if row is None:
                return None
            cur.execute("SELECT * FROM entry_views WHERE entry_id = %s ORDER BY position", (entry_id,))
            view_rows = cur.fetchall()
        return self._row_to_entity(row, [self._row_to_view(v) for v in view_rows])

    def append(self, entry: ImageEntry) -> None:
        with self.client.transaction() as cur:
            cur.execute(
                """
                INSERT INTO entries (id, filename, original_name, sender_name, uploaded_at, file_size)
                VALUES (%s, %s, %s, %s, %s, %s)
                ON CONFLICT (id) DO NOTHING
                RETURNING id
                """,
                (
                    entry.id,
                    entry.stored_file_name,
                    entry.original_file_name,
                    entry.sender_name,
                    entry.uploaded_at,
                    entry.file_size,
                ),
            )
            if cur.fetchone() is None:
                raise DuplicateId(entry.id)

    def append_view(self, entry_id: str, view: ViewRecord) -> bool:
        with self.client.transaction() as cur:
            cur.execute("SELECT id FROM entries WHERE id = %s FOR UPDATE", (entry_id,))
            if cur.fetchone() is None:
                return False
            cur.execute(
                "SELECT COALESCE(MAX(position) + 1, 0) AS next FROM entry_views WHERE entry_id = %s",
                (entry_id,),
            )
            position = cur.fetchone()["next"]
            cur.execute(
                """
                INSERT INTO entry_views (entry_id, position, viewed_at, latitude, longitude, user_agent)
                VALUES (%s, %s, %s, %s, %s, %s)
                """,
                (entry_id, position, view.timestamp, view.latitude, view.longitude, view.user_agent),
            )
        return True

    def close(self) -> None:
        logger.debug("Closing PostgreSQL pool")
        self.client.close()
