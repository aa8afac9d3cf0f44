"""
Local filesystem blob store for project and task documents.

Security Features:
- Path traversal protection (resolve + prefix validation)
- Server-chosen file names (cuid2), only the sanitized extension is kept
- Atomic writes (temp file + atomic rename)
- File permissions (0o640 files, 0o750 dirs)
"""

import os
import re
import tempfile
from pathlib import Path
from typing import BinaryIO

import aiofiles

from src.infrastructure.exceptions import (StoragePermissionError,
                                           StorageQuotaExceededError,
                                           StorageUploadError)
from src.shared.telemetry.logging import get_logger
from src.shared.utils.generators import generate_cuid

logger = get_logger(__name__)

URL_PREFIX = "/uploads"
_EXTENSION = re.compile(r"^\.[A-Za-z0-9]{1,10}$")


class LocalStorageService:
    """
    Stores uploads under ``{storage_root}/{folder}/{unique_name}``.

    Returned paths are stable and relative: ``/uploads/{folder}/{unique_name}``.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB chunks for streaming

    def __init__(self, storage_root: str, max_upload_size: int | None = None) -> None:
        """
        Args:
            storage_root: Base directory for all file storage
            max_upload_size: Largest accepted file in bytes (None: unlimited)
        """
        self.storage_root = Path(storage_root).resolve()
        self.max_upload_size = max_upload_size

        # Create storage root if it doesn't exist
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, relative_path: str) -> Path:
        """
        Get full filesystem path with security validation.

        Raises:
            StoragePermissionError: If path traversal detected
        """
        full_path = (self.storage_root / relative_path).resolve()

        # Security check: ensure path is within storage root
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(relative_path, "path_validation") from e

        return full_path

    @staticmethod
    def _unique_name(filename: str) -> str:
        extension = Path(filename).suffix.lower()
        if not _EXTENSION.match(extension):
            extension = ""
        return f"{generate_cuid()}{extension}"

    async def save(self, file_data: BinaryIO, folder: str, filename: str) -> str:
        """
        Write an upload atomically and return its stable relative path.

        Raises:
            StoragePermissionError: folder escapes the storage root
            StorageQuotaExceededError: file larger than max_upload_size
            StorageUploadError: the write failed
        """
        name = self._unique_name(filename)
        relative_path = f"{folder.strip('/')}/{name}"
        target_path = self._get_full_path(relative_path)

        file_content = file_data.read()
        file_size = len(file_content)
        if self.max_upload_size is not None and file_size > self.max_upload_size:
            raise StorageQuotaExceededError(file_size, self.max_upload_size)

        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)

            # Write to temp file first (atomic write pattern)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent, prefix=".tmp_", suffix=target_path.suffix
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(file_content)
                os.chmod(temp_path, 0o640)
                os.replace(temp_path, target_path)
            finally:
                # Clean up temp file if the rename did not happen
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            logger.error("Failed to store upload %s: %s", relative_path, e)
            raise StorageUploadError(relative_path, type(e).__name__) from e

        logger.info("Stored upload %s (%d bytes)", relative_path, file_size)
        return f"{URL_PREFIX}/{relative_path}"

    async def read(self, stored_path: str) -> bytes:
        """Read back a file by the path ``save`` returned"""
        relative_path = stored_path.removeprefix(URL_PREFIX).lstrip("/")
        file_path = self._get_full_path(relative_path)
        async with aiofiles.open(file_path, "rb") as f:
            return await f.read()
