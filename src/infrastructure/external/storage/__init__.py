"""Blob storage implementations for uploaded documents."""

from src.infrastructure.external.storage.local_storage import \
    LocalStorageService

__all__ = ["LocalStorageService"]
