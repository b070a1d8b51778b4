import os
import sys
import tempfile
from datetime import UTC, datetime
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure project root is on sys.path so 'viewtrail' is importable during tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# importing viewtrail.main builds a module level app; keep its directories out of the repo
_SESSION_DIR = Path(tempfile.mkdtemp(prefix="viewtrail-tests-"))
os.environ.setdefault("STORE_BACKEND", "json")
os.environ.setdefault("DATA_DIR", str(_SESSION_DIR / "data"))
os.environ.setdefault("UPLOAD_DIR", str(_SESSION_DIR / "uploads"))
os.environ.setdefault("PUBLIC_DIR", str(ROOT / "public"))


@pytest.fixture()
def settings(tmp_path):
    from viewtrail.config import Settings

    return Settings(
        store_backend="json",
        data_dir=tmp_path / "data",
        upload_dir=tmp_path / "uploads",
        public_dir=ROOT / "public",
        log_level="DEBUG",
    )


@pytest.fixture()
def client(settings):
    # lazy import after env configured
    from viewtrail.main import create_app

    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def fixed_clock():
    moment = datetime(2026, 10, 18, 12, 0, 0, 123000, tzinfo=UTC)
    return lambda: moment


@pytest.fixture()
def make_entry():
    from viewtrail.domain.entities.entry import ImageEntry

    def _make(entry_id: str = "entry-1", **overrides) -> ImageEntry:
        fields = {
            "id": entry_id,
            "stored_file_name": f"{entry_id}.png",
            "original_file_name": "photo.png",
            "sender_name": "Alice",
            "uploaded_at": datetime(2026, 10, 18, 9, 30, tzinfo=UTC),
            "file_size": 42,
        }
        fields.update(overrides)
        return ImageEntry(**fields)

    return _make


@pytest.fixture()
def make_view():
    from viewtrail.domain.entities.entry import ViewRecord

    def _make(n: int = 0, **overrides) -> ViewRecord:
        fields = {
            "timestamp": datetime(2026, 10, 18, 10, 0, n % 60, tzinfo=UTC),
            "latitude": 1.5,
            "longitude": 2.5,
            "user_agent": f"agent-{n}",
        }
        fields.update(overrides)
        return ViewRecord(**fields)

    return _make
