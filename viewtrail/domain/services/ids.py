from __future__ import annotations

import uuid


def new_entry_id() -> str:
    # uuid4 is random per call, so ids stay distinct within the same millisecond
    return uuid.uuid4().hex
