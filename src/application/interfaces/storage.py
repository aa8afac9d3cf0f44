"""Blob storage port."""

from __future__ import annotations

from typing import BinaryIO, Protocol


class IStorageService(Protocol):
    """Protocol for file blob storage (DIP)"""

    async def save(self, file_data: BinaryIO, folder: str, filename: str) -> str:
        """
        Persist a file under a logical folder.

        Returns:
            str: Stable relative path, e.g. "/uploads/tasks/<unique>.pdf"

        Raises:
            StorageException: If the file cannot be written
        """
        ...
