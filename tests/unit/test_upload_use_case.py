import io
from unittest.mock import MagicMock

import pytest

from viewtrail.application.use_cases.upload_image import UploadImageUseCase
from viewtrail.domain.errors import NoFileProvided, StoreUnavailable
from viewtrail.domain.services.tracking_service import TrackingService
from viewtrail.infrastructure.database.stores.memory_store import MemoryStore
from viewtrail.infrastructure.storage.upload_storage import LocalUploadStorage


@pytest.fixture()
def storage(tmp_path):
    return LocalUploadStorage(tmp_path / "uploads")


def test_upload_stores_binary_under_random_name(storage, fixed_clock):
    tracking = TrackingService(store=MemoryStore(), clock=fixed_clock)
    uc = UploadImageUseCase(storage=storage, tracking=tracking)

    result = uc.execute(io.BytesIO(b"fake-bytes"), "Holiday.JPG", sender_name="Alice")

    entry = tracking.get_entry(result.id)
    assert entry.original_file_name == "Holiday.JPG"
    assert entry.stored_file_name.endswith(".jpg")
    assert entry.file_size == len(b"fake-bytes")
    assert (storage.upload_dir / entry.stored_file_name).read_bytes() == b"fake-bytes"


@pytest.mark.parametrize("stream,name", [(None, None), (io.BytesIO(b"x"), ""), (None, "a.png")])
def test_missing_file_raises_without_writing(storage, stream, name):
    uc = UploadImageUseCase(storage=storage, tracking=TrackingService(store=MemoryStore()))
    with pytest.raises(NoFileProvided):
        uc.execute(stream, name)
    assert list(storage.upload_dir.iterdir()) == []


def test_binary_removed_when_store_fails(storage):
    tracking = MagicMock(spec=TrackingService)
    tracking.handle_upload.side_effect = StoreUnavailable("disk gone")
    uc = UploadImageUseCase(storage=storage, tracking=tracking)

    with pytest.raises(StoreUnavailable):
        uc.execute(io.BytesIO(b"data"), "a.png")

    assert list(storage.upload_dir.iterdir()) == []


class _BrokenStream(io.RawIOBase):
    def __init__(self):
        self.calls = 0

    def readable(self):
        return True

    def read(self, size=-1):
        self.calls += 1
        if self.calls > 1:
            raise OSError("connection reset")
        return b"partial"


def test_failed_copy_leaves_no_partial_file(storage):
    with pytest.raises(StoreUnavailable):
        storage.save(_BrokenStream(), "a.png")

    assert list(storage.upload_dir.iterdir()) == []


def test_failed_copy_registers_no_entry(storage):
    tracking = TrackingService(store=MemoryStore())
    uc = UploadImageUseCase(storage=storage, tracking=tracking)

    with pytest.raises(StoreUnavailable):
        uc.execute(_BrokenStream(), "a.png")

    assert tracking.list_all() == []
