import logging
import mimetypes
import os
import shutil
from typing import List, Tuple

from config import UPLOAD_DIR, MAX_PHOTO_BYTES
from utils.errors import StorageError, ValidationError
from utils.id_generator import generate_upload_name

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/uploads"
IGNORED_PHOTO_EXTENSIONS = (".avif", ".heic")


class FileStorage:
    """
    Local-disk blob store.

    Files live under ``root/<folder>/`` and are addressed by public paths of
    the form ``/uploads/<folder>/<name>``, which is where ``main`` mounts the
    upload directory.
    """

    def __init__(self, root: str = UPLOAD_DIR):
        self.root = root

    def _physical_path(self, public_path: str) -> str:
        relative = public_path
        if relative.startswith(PUBLIC_PREFIX + "/"):
            relative = relative[len(PUBLIC_PREFIX) + 1:]
        relative = relative.lstrip("/")
        root = os.path.abspath(self.root)
        full_path = os.path.abspath(os.path.join(root, relative))
        if os.path.commonpath([full_path, root]) != root:
            raise StorageError(f"Path {public_path} is outside the upload directory")
        return full_path

    def store(self, content: bytes, filename: str, folder: str, name: str = None) -> str:
        """
        Write ``content`` to ``folder`` and return its public path.

        Args:
            content: Raw file bytes
            filename: Original file name, kept as a suffix of the stored name
            folder: Logical folder (e.g. "receipts", "apartments/7")
            name: Exact stored name; a unique one is generated when omitted

        Raises:
            StorageError: If the file could not be written
        """
        stored_name = name or generate_upload_name(filename)
        directory = os.path.join(self.root, folder)
        file_path = os.path.join(directory, stored_name)
        try:
            os.makedirs(directory, exist_ok=True)
            with open(file_path, "wb") as buffer:
                buffer.write(content)
        except OSError as e:
            logger.error("Failed to write upload %s: %s", file_path, e)
            if os.path.exists(file_path):
                os.remove(file_path)
            raise StorageError(f"Could not save file {filename}") from e

        return f"{PUBLIC_PREFIX}/{folder}/{stored_name}"

    def delete(self, public_path: str) -> bool:
        """Remove a stored file; returns False when it was already gone."""
        file_path = self._physical_path(public_path)
        if not os.path.exists(file_path):
            return False
        try:
            os.remove(file_path)
        except OSError as e:
            logger.error("Failed to delete upload %s: %s", file_path, e)
            raise StorageError(f"Could not delete file {public_path}") from e
        return True

    def delete_folder(self, folder: str) -> bool:
        directory = self._physical_path(folder)
        if not os.path.isdir(directory):
            return False
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.error("Failed to delete upload folder %s: %s", directory, e)
            raise StorageError(f"Could not delete folder {folder}") from e
        return True


def filter_photos(photos: List[Tuple[str, bytes]]) -> List[Tuple[str, bytes]]:
    """Drop formats browsers cannot display before validating the rest"""
    return [
        (filename, content)
        for filename, content in photos
        if not filename.lower().endswith(IGNORED_PHOTO_EXTENSIONS)
    ]


def validate_photos(photos: List[Tuple[str, bytes]], required: bool = True):
    if required and not photos:
        raise ValidationError("At least 1 photo is required.", field="photos")

    for filename, content in photos:
        if not content or len(content) > MAX_PHOTO_BYTES:
            raise ValidationError(
                f"Each photo must be less than {MAX_PHOTO_BYTES // (1024 * 1024)}MB.",
                field="photos",
            )
        mime_type = mimetypes.guess_type(filename)[0]
        if not mime_type or not mime_type.startswith("image/"):
            raise ValidationError("Only image files are allowed.", field="photos")


storage = FileStorage()


def get_storage() -> FileStorage:
    return storage
