# crudsql/core/router.py
"""
Module for registering routes in the FastAPI application.
"""

from fastapi import FastAPI

from crudsql.crud.router import router as crud_router


def register_routes(app: FastAPI) -> None:
    """
    Registers all the routes for the FastAPI application.

    Args:
        app (FastAPI): The FastAPI application instance.
    """
    app.include_router(crud_router, prefix="/api")
