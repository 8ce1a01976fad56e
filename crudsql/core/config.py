# crudsql/core/config.py
"""Startup configuration read once from the environment."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from crudsql.core.exceptions import ConfigurationError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ConfigurationError(f"{name} must be positive, got {value}")
    return value


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    """Immutable settings handed to every compiler component."""

    database_url: str = "postgresql://localhost/evolutility"
    schema: str = "evolutility"
    page_size: int = 50
    lov_size: int = 100
    csv_size: int = 1000
    csv_header: str = "label"  # "label" or "id"
    models_dir: str = "models"
    timestamps: bool = False
    who_is: bool = False
    log_level: str = "INFO"

    def __post_init__(self):
        if self.csv_header not in ("label", "id"):
            raise ConfigurationError(f"csv_header must be 'label' or 'id', got {self.csv_header!r}")

    @property
    def quoted_schema(self) -> str:
        return f'"{self.schema}"'

    def qualified_table(self, table: str) -> str:
        """Schema-qualified, quoted table name."""
        return f'{self.quoted_schema}."{table}"'

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "Settings":
        load_dotenv(env_file)
        return cls(
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            schema=os.getenv("CRUDSQL_SCHEMA", cls.schema),
            page_size=_env_int("CRUDSQL_PAGE_SIZE", cls.page_size),
            lov_size=_env_int("CRUDSQL_LOV_SIZE", cls.lov_size),
            csv_size=_env_int("CRUDSQL_CSV_SIZE", cls.csv_size),
            csv_header=os.getenv("CRUDSQL_CSV_HEADER", cls.csv_header),
            models_dir=os.getenv("CRUDSQL_MODELS_DIR", cls.models_dir),
            timestamps=_env_bool("CRUDSQL_TIMESTAMPS"),
            who_is=_env_bool("CRUDSQL_WHO_IS"),
            log_level=os.getenv("CRUDSQL_LOG_LEVEL", cls.log_level).upper(),
        )
