# crudsql/core/dependencies.py
"""FastAPI dependencies: settings, model registry, session and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from crudsql.core.config import Settings
from crudsql.core.database import session_generator
from crudsql.dictionary.registry import ModelRegistry


@lru_cache(maxsize=None)
def get_settings() -> Settings:
    """Settings are read once per process."""
    return Settings.from_env()


SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache(maxsize=None)
def _load_registry(settings: Settings) -> ModelRegistry:
    registry = ModelRegistry(settings)
    registry.load_directory(settings.models_dir)
    return registry


def get_registry(settings: SettingsDep) -> ModelRegistry:
    """The model registry is populated once and shared read-only."""
    return _load_registry(settings)


def get_db(settings: SettingsDep):
    """Get database session."""
    yield from session_generator(settings)


SessionDep = Annotated[Session, Depends(get_db)]
RegistryDep = Annotated[ModelRegistry, Depends(get_registry)]
