from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path
from typing import BinaryIO

from viewtrail.domain.entities.stored_file import StoredFile
from viewtrail.domain.errors import StoreUnavailable

logger = logging.getLogger(__name__)


class LocalUploadStorage:
    """Writes uploaded binaries into the content directory under random names."""

    def __init__(self, upload_dir: str | Path) -> None:
        self.upload_dir = Path(upload_dir)
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def save(self, stream: BinaryIO, original_name: str) -> StoredFile:
        """Copy ``stream`` into the upload directory.

        Raises:
            StoreUnavailable: If the copy fails; no partial file is left behind.
        """
        ext = Path(original_name).suffix.lower()
        stored_name = f"{uuid.uuid4().hex}{ext}"
        full_path = self.upload_dir / stored_name
        try:
            with full_path.open("wb") as out:
                shutil.copyfileobj(stream, out)
            size = full_path.stat().st_size
        except OSError as exc:
            full_path.unlink(missing_ok=True)
            raise StoreUnavailable(f"Cannot store upload {original_name}: {exc}") from exc
        logger.debug("Saved upload %s as %s (%d bytes)", original_name, stored_name, size)
        return StoredFile(stored_name=stored_name, original_name=original_name, size=size)

    def delete(self, stored_name: str) -> None:
        full_path = self.upload_dir / stored_name
        if full_path.exists():
            full_path.unlink()
