# crudsql/logging/exception_handlers.py

import logging

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from crudsql.core.exceptions import CrudError

logger = logging.getLogger(__name__)


async def crud_exception_handler(request: Request, exc: CrudError):
    """Compilation failures: bad request, invalid record, not found."""
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle request validation errors"""
    logger.warning("%s %s: request validation failed", request.method, request.url.path)

    # Convert errors to a safe format for JSON response
    def convert_error(error):
        if isinstance(error, dict):
            return {k: convert_error(v) for k, v in error.items()}
        elif isinstance(error, list):
            return [convert_error(item) for item in error]
        else:
            return str(error)

    return JSONResponse(status_code=422, content={"detail": convert_error(exc.errors())})


async def http_exception_handler(request: Request, exc: HTTPException):
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.detail)
    elif exc.status_code >= 400:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def general_exception_handler(request: Request, exc: Exception):
    """Unhandled errors, including execution failures passed through from the database."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
