from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StoredFile:
    """An uploaded binary already written to the content directory."""

    stored_name: str
    original_name: str
    size: int
