"""FastAPI application entry point for crudsql."""

from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from crudsql.core.config import Settings
from crudsql.core.dependencies import get_settings
from crudsql.core.exceptions import CrudError
from crudsql.core.router import register_routes
from crudsql.logging.config import configure_logging
from crudsql.logging.exception_handlers import (
    crud_exception_handler,
    general_exception_handler,
    http_exception_handler,
    request_validation_exception_handler,
)
from crudsql.logging.middleware import LoggingMiddleware


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    explicit = settings is not None
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="crudsql",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
    )

    # Add request logger middleware
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(CrudError, crud_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_routes(app)

    if explicit:
        app.dependency_overrides[get_settings] = lambda: settings

    return app
