"""Domain errors shared by the store, the tracking service and the API layer."""
from __future__ import annotations


class TrackingError(Exception):
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NoFileProvided(TrackingError):
    status_code = 400

    def __init__(self, message: str = "No image uploaded") -> None:
        super().__init__(message)


class EntryNotFound(TrackingError):
    """Unknown id. Expected for stale or guessed links, not a fault."""

    status_code = 404

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class StoreUnavailable(TrackingError):
    status_code = 503

    def __init__(self, message: str = "Store unavailable") -> None:
        super().__init__(message)


class DuplicateId(TrackingError):
    status_code = 500

    def __init__(self, entry_id: str) -> None:
        super().__init__(f"Duplicate entry id: {entry_id}")
        self.entry_id = entry_id
