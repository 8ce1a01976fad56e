# crudsql/logging/middleware.py
import logging
import time
from typing import Callable, Sequence

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)

EXCLUDED_PATHS = ("/api/docs", "/api/redoc", "/api/openapi.json")


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs method, path, status and duration of every request."""

    def __init__(self, app: ASGIApp, excluded_paths: Sequence[str] = EXCLUDED_PATHS):
        super().__init__(app)
        self.excluded_paths = tuple(excluded_paths)

    async def dispatch(self, request: Request, call_next: Callable):
        # Skip logging for excluded paths
        if request.url.path.startswith(self.excluded_paths):
            return await call_next(request)

        start_time = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start_time) * 1000

        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s%s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            f"?{request.url.query}" if request.url.query else "",
            response.status_code,
            duration_ms,
        )
        return response
