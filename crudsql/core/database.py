# crudsql/core/database.py
"""Database engine and session factory for the execution boundary."""

from functools import lru_cache

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from crudsql.core.config import Settings


def build_engine(database_url: str) -> Engine:
    return create_engine(
        database_url,
        pool_pre_ping=True,
        connect_args={"check_same_thread": False} if database_url.startswith("sqlite") else {},
    )


@lru_cache(maxsize=None)
def session_factory(database_url: str) -> sessionmaker:
    """One engine and session factory per database URL, created on first use."""
    return sessionmaker(autocommit=False, autoflush=False, bind=build_engine(database_url))


def session_generator(settings: Settings):
    """Yield a session, always closed afterwards."""
    db = session_factory(settings.database_url)()
    try:
        yield db
    finally:
        db.close()
