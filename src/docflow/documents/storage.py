"""File storage port and the local-directory adapter.

Documents only keep a reference URL to their file. The port hides where the
bytes actually live so the document services never touch the filesystem.
"""

import os
import re
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

from ..config import get_settings
from ..errors import BadRequestError
from ..observability.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class StoredFile:
    """Result of storing an upload.

    Attributes:
        url: Public reference URL saved on the document as url_doc
        default_name: Display name to use when the caller gave none
        size_bytes: Number of bytes written
    """
    url: str
    default_name: str
    size_bytes: int


class FileStoragePort(ABC):
    """Port interface for persisting uploaded document files."""

    @abstractmethod
    def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Persist an upload and return where it can be found.

        Raises:
            BadRequestError: If the upload is empty, nameless or too large
        """

    @abstractmethod
    def delete_file(self, url: str) -> bool:
        """Remove a previously stored file. Returns False if there was nothing to remove."""


def sanitize_filename(filename: str) -> str:
    """Strip path components and characters unsafe in a stored file name.

    Example:
        >>> sanitize_filename('../../report (final).pdf')
        'report_final_.pdf'
    """
    filename = os.path.basename(filename.replace("\\", "/"))
    filename = re.sub(r'[^\w\s.-]', '_', filename)
    filename = re.sub(r'[\s_]+', '_', filename)

    if len(filename) > 200:
        name, ext = os.path.splitext(filename)
        filename = name[:200 - len(ext)] + ext

    return filename


class LocalFileStorage(FileStoragePort):
    """Writes uploads into a local directory as <epoch-ms>-<original name>."""

    def __init__(self, upload_dir: str, public_base_url: str, max_size_bytes: int):
        self.upload_dir = upload_dir
        self.public_base_url = public_base_url.rstrip("/")
        self.max_size_bytes = max_size_bytes

    def store_file(self, content: bytes, filename: str) -> StoredFile:
        if not filename:
            raise BadRequestError("File is required")

        size_bytes = len(content)
        if size_bytes == 0:
            raise BadRequestError("File is empty (0 bytes)")
        if size_bytes > self.max_size_bytes:
            raise BadRequestError(
                f"File exceeds maximum size of {self.max_size_bytes} bytes (got {size_bytes} bytes)"
            )

        original_name = os.path.basename(filename.replace("\\", "/"))
        stored_name = f"{int(time.time() * 1000)}-{sanitize_filename(original_name)}"

        os.makedirs(self.upload_dir, exist_ok=True)
        with open(os.path.join(self.upload_dir, stored_name), "wb") as fh:
            fh.write(content)

        logger.info(f"Stored upload {stored_name} ({size_bytes} bytes)")

        return StoredFile(
            url=f"{self.public_base_url}/uploads/{stored_name}",
            default_name=original_name,
            size_bytes=size_bytes,
        )

    def delete_file(self, url: str) -> bool:
        prefix = f"{self.public_base_url}/uploads/"
        if not url or not url.startswith(prefix):
            return False

        path = os.path.join(self.upload_dir, sanitize_filename(url[len(prefix):]))
        if not os.path.isfile(path):
            return False

        try:
            os.remove(path)
        except OSError as e:
            logger.warning(f"Could not delete stored upload {path}: {e}")
            return False

        logger.info(f"Deleted stored upload {os.path.basename(path)}")
        return True


@contextmanager
def discard_on_failure(storage: FileStoragePort, url: Optional[str]) -> Iterator[None]:
    """Delete a freshly stored file if the block that records it fails.

    Usage:
        with discard_on_failure(storage, stored.url):
            db.commit()
    """
    try:
        yield
    except Exception:
        if url:
            storage.delete_file(url)
        raise


def get_storage() -> FileStoragePort:
    """Dependency for the file storage adapter, configured from settings"""
    settings = get_settings()
    return LocalFileStorage(
        upload_dir=settings.UPLOAD_DIR,
        public_base_url=settings.PUBLIC_BASE_URL,
        max_size_bytes=settings.MAX_UPLOAD_SIZE_BYTES,
    )
