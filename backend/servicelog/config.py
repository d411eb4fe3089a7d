from pathlib import Path

from pydantic_settings import BaseSettings
from functools import lru_cache

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "Service Log Portal API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    database_url: str = "sqlite:///data/service_log.db"
    database_echo: bool = False
    cors_origins: list[str] = ["http://localhost:3000"]

    # SQLite tuning
    sqlite_wal: bool = True

    # Pagination — limit is always clamped server-side to [1, max_page_size]
    default_page_size: int = 20
    max_page_size: int = 100

    # Reporting projection — 0 disables the periodic refresh
    reporting_refresh_interval_seconds: int = 0

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_repository: str = "INFO"       # repository mutations and audit failures

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
