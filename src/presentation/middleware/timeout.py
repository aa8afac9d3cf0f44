"""Request timeout middleware."""

import asyncio
import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.presentation.api.exception_handlers import error_response

logger = logging.getLogger(__name__)


class TimeoutMiddleware(BaseHTTPMiddleware):
    """
    Enforce a per-request deadline.

    A request that runs past it is answered with 504; its pending work is cancelled.
    """

    def __init__(self, app, timeout: float = 30.0):
        super().__init__(app)
        self.timeout = timeout

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()

        try:
            response = await asyncio.wait_for(call_next(request), timeout=self.timeout)
        except TimeoutError:
            elapsed = time.perf_counter() - start_time
            logger.warning("Request %s %s timed out after %.2fs", request.method, request.url.path, elapsed)
            return error_response(
                504, f"Request timeout after {elapsed:.2f} seconds", "REQUEST_TIMEOUT"
            )

        response.headers["X-Process-Time"] = f"{time.perf_counter() - start_time:.4f}"
        return response
