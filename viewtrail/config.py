from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

STORE_BACKENDS = ("json", "memory", "postgres")


@dataclass(frozen=True)
class Settings:
    env: str = "development"
    store_backend: str = "json"
    data_dir: Path = Path("data")
    database_file: str = "database.json"
    upload_dir: Path = Path("uploads")
    public_dir: Path = Path("public")
    log_level: str = "INFO"

    @property
    def database_path(self) -> Path:
        return self.data_dir / self.database_file

    @classmethod
    def from_env(cls) -> Settings:
        backend = os.getenv("STORE_BACKEND", "json").lower()
        if backend not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}")
        return cls(
            env=os.getenv("ENV", "development"),
            store_backend=backend,
            data_dir=Path(os.getenv("DATA_DIR", "data")),
            database_file=os.getenv("DATABASE_FILE", "database.json"),
            upload_dir=Path(os.getenv("UPLOAD_DIR", "uploads")),
            public_dir=Path(os.getenv("PUBLIC_DIR", "public")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
