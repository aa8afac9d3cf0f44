"""
Domain exceptions for the Workboard application.

This module defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns; the presentation layer
maps each one to an HTTP status through its ``status_code`` attribute.
"""

from typing import Any


class WorkboardException(Exception):
    """
    Base exception for all Workboard application errors.

    All custom exceptions should inherit from this class to allow
    for consistent error handling and logging.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error code for API responses
        details: Additional error context
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(WorkboardException):
    """Raised when input validation fails."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class AuthenticationException(WorkboardException):
    """Raised when authentication fails."""

    status_code = 401

    def __init__(self, message: str = "Authentication failed"):
        super().__init__(message, "AUTHENTICATION_ERROR")


class InvalidTokenException(AuthenticationException):
    """
    Raised when a presented token is malformed, forged or no longer redeemable.

    Surfaces as 400: the request itself carries a bad token, as opposed to a
    refresh session that went stale (plain AuthenticationException, 401).
    """

    status_code = 400

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)
        self.error_code = "INVALID_TOKEN"


class AuthorizationException(WorkboardException):
    """Raised when the caller's role, company or membership does not cover the target."""

    status_code = 403

    def __init__(self, resource: str, action: str, reason: str | None = None):
        message = reason or f"Permission denied: {action} on {resource}"
        super().__init__(
            message,
            "AUTHORIZATION_ERROR",
            {"resource": resource, "action": action},
        )


class ResourceNotFoundException(WorkboardException):
    """Raised when a requested resource is not found (or is invisible to the caller)."""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: Any):
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class ConflictException(WorkboardException):
    """Raised on duplicate unique values or rows still referenced elsewhere."""

    status_code = 409

    def __init__(self, message: str, resource_type: str | None = None):
        details = {"resource_type": resource_type} if resource_type else {}
        super().__init__(message, "CONFLICT", details)
