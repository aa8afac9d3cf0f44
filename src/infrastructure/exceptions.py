"""
Infrastructure exceptions for the Workboard application.

This module defines infrastructure-level exceptions related to
storage, database, and external service operations.
"""

from src.domain.exceptions import WorkboardException


# Storage Exceptions
class StorageException(WorkboardException):
    """Base exception for storage operations (database or file system)."""

    status_code = 500


class StorageUploadError(StorageException):
    """File upload failed."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            f"Failed to upload file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Insufficient permissions for storage operation."""

    def __init__(self, file_path: str, operation: str):
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )


class StorageQuotaExceededError(StorageException):
    """Upload larger than the configured limit."""

    status_code = 413

    def __init__(self, used: int, quota: int):
        super().__init__(
            f"File too large: {used}/{quota} bytes",
            "STORAGE_QUOTA_EXCEEDED",
            {"used": used, "quota": quota},
        )


class TransactionError(StorageException):
    """A database write failed; the surrounding transaction is rolled back."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            f"Storage failure during {operation}",
            "STORAGE_TRANSACTION_ERROR",
            {"operation": operation, "reason": reason},
        )


class CorruptRecordError(StorageException):
    """A stored value is unusable (e.g. a malformed email on a credential)."""

    def __init__(self, resource_type: str, field: str):
        super().__init__(
            f"Stored {resource_type} has an invalid {field}",
            "STORAGE_CORRUPT_RECORD",
            {"resource_type": resource_type, "field": field},
        )
