import os

import pytest

from services.storage_service import FileStorage, filter_photos, validate_photos
from utils.errors import StorageError, ValidationError


def test_store_returns_public_path(storage, tmp_path):
    path = storage.store(b"receipt-bytes", "bank slip.png", "receipts")

    assert path.startswith("/uploads/receipts/")
    assert path.endswith("_bank slip.png")
    stored = tmp_path / "receipts" / os.path.basename(path)
    assert stored.read_bytes() == b"receipt-bytes"


def test_store_with_explicit_name(storage, tmp_path):
    path = storage.store(b"img", "IMG_0001.jpg", "apartments/7", name="photo1.jpg")

    assert path == "/uploads/apartments/7/photo1.jpg"
    assert (tmp_path / "apartments" / "7" / "photo1.jpg").exists()


def test_delete_and_delete_folder(storage, tmp_path):
    path = storage.store(b"img", "a.jpg", "apartments/3")

    assert storage.delete(path) is True
    assert storage.delete(path) is False
    assert storage.delete_folder("apartments/3") is True
    assert not (tmp_path / "apartments" / "3").exists()
    assert storage.delete_folder("apartments/3") is False


def test_paths_outside_root_are_refused(storage):
    with pytest.raises(StorageError):
        storage.delete("/uploads/../../etc/passwd")


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / "blocked"
    blocker.write_text("not a directory")
    storage = FileStorage(str(blocker))

    with pytest.raises(StorageError):
        storage.store(b"data", "file.txt", "receipts")


def test_filter_photos_drops_unsupported_formats():
    photos = [("front.jpg", b"1"), ("back.HEIC", b"2"), ("side.avif", b"3")]

    assert filter_photos(photos) == [("front.jpg", b"1")]


def test_validate_photos():
    validate_photos([("front.jpg", b"1")])
    validate_photos([], required=False)

    with pytest.raises(ValidationError):
        validate_photos([])
    with pytest.raises(ValidationError):
        validate_photos([("notes.txt", b"hello")])
    with pytest.raises(ValidationError):
        validate_photos([("huge.png", b"0" * (5 * 1024 * 1024 + 1))])


def test_sibling_directory_with_shared_prefix_is_refused(tmp_path):
    root = tmp_path / "up"
    root.mkdir()
    sibling = tmp_path / "up-evil"
    sibling.mkdir()
    (sibling / "x.txt").write_text("keep me")
    storage = FileStorage(str(root))

    with pytest.raises(StorageError):
        storage.delete("/uploads/../up-evil/x.txt")
    with pytest.raises(StorageError):
        storage.delete_folder("../up-evil")
    assert (sibling / "x.txt").exists()
