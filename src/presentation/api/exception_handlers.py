"""
Map exceptions to the JSON error envelope.

Every error body carries: message, status ("error"), status_code, error, details.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.domain.exceptions import WorkboardException

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred."


def error_response(
    status_code: int,
    message: str,
    error: str,
    details: dict | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "message": message,
            "status": "error",
            "status_code": status_code,
            "error": error,
            "details": details or {},
        },
        headers=headers,
    )


async def workboard_exception_handler(request: Request, exc: WorkboardException) -> JSONResponse:
    if exc.status_code >= 500:
        # Internal failures are logged in full but reported without their details
        logger.error(
            "%s on %s %s: %s %s",
            exc.error_code,
            request.method,
            request.url.path,
            exc.message,
            exc.details,
        )
        return error_response(exc.status_code, exc.message, exc.error_code)

    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc.status_code, exc.message, exc.error_code, exc.details, headers)


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, "HTTP_ERROR", headers=exc.headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed.",
        "VALIDATION_ERROR",
        {"errors": errors},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, GENERIC_ERROR, "INTERNAL_SERVER_ERROR"
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(WorkboardException, workboard_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
