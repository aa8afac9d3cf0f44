"""Security middleware for HTTP security headers and request size limits"""
import logging
from collections.abc import Callable

from fastapi import Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from src.infrastructure.config.settings import get_settings
from src.presentation.api.exception_handlers import error_response

logger = logging.getLogger(__name__)

# Swagger UI and ReDoc need inline scripts and the jsdelivr CDN
_DOCS_PATHS = frozenset({"/docs", "/redoc", "/openapi.json"})

_DOCS_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://cdn.jsdelivr.net; "
    "img-src 'self' data: https:; "
    "font-src 'self' data: https://cdn.jsdelivr.net; "
    "frame-ancestors 'none';"
)

_API_CSP = (
    "default-src 'none'; "
    "img-src 'self' data:; "
    "frame-ancestors 'none'; "
    "form-action 'self'; "
    "base-uri 'none';"
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Add security headers to all HTTP responses.

    Headers added:
    - X-Frame-Options / frame-ancestors: Prevents clickjacking
    - X-Content-Type-Options: Prevents MIME type sniffing
    - Referrer-Policy: Controls referrer information
    - Permissions-Policy: Disables browser features the API never needs
    - Strict-Transport-Security: Forces HTTPS (https requests and production)
    - Content-Security-Policy: Restricts resource loading
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        response = await call_next(request)

        response.headers["X-Frame-Options"] = "DENY"
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = (
            "camera=(), geolocation=(), microphone=(), payment=(), usb=()"
        )

        if request.url.scheme == "https" or get_settings().environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=63072000; includeSubDomains"

        response.headers["Content-Security-Policy"] = (
            _DOCS_CSP if request.url.path in _DOCS_PATHS else _API_CSP
        )

        # Remove server header if present (information disclosure)
        if "server" in response.headers:
            del response.headers["server"]

        return response


class RequestSizeLimitMiddleware(BaseHTTPMiddleware):
    """
    Reject requests whose Content-Length exceeds the limit (default 10MB).

    Uploads are also bounded by the blob store's own max_upload_size check.
    """

    def __init__(self, app, max_request_size: int = 10 * 1024 * 1024) -> None:
        super().__init__(app)
        self.max_request_size = max_request_size

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        content_length = request.headers.get("content-length")

        if content_length:
            try:
                size = int(content_length)
            except ValueError:
                logger.warning("Invalid Content-Length header: %s", content_length)
                return error_response(400, "Invalid Content-Length header", "INVALID_CONTENT_LENGTH")

            if size > self.max_request_size:
                logger.warning(
                    "Request size %d exceeds limit %d from %s",
                    size,
                    self.max_request_size,
                    request.client.host if request.client else "unknown",
                )
                return error_response(
                    413,
                    f"Request body too large. Maximum size: {self.max_request_size} bytes",
                    "PAYLOAD_TOO_LARGE",
                    {"max_size": self.max_request_size, "received_size": size},
                )

        return await call_next(request)
