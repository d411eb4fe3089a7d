"""Logging setup for the service log API.

The root level comes from ``LOG_LEVEL``; SQL, server and repository loggers
each follow their own setting so SQL echo can be turned up while
investigating a slow report without flooding the rest of the output.
"""

import logging
import sys

from servicelog.config import Settings, get_settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

# Settings field, then the loggers whose level it controls.
LOGGER_CATEGORIES: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("log_level_sql", ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")),
    ("log_level_uvicorn", ("uvicorn", "uvicorn.access", "uvicorn.error")),
    (
        "log_level_repository",
        (
            "servicelog.infrastructure.database.repositories",
            "servicelog.infrastructure.database.reporting_projection",
            "servicelog.application.services.reporting_refresher",
        ),
    ),
)


def level_from_name(name: str | None) -> int:
    """``"debug"`` -> ``logging.DEBUG``; anything unrecognised falls back to INFO."""
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(settings: Settings | None = None) -> dict[str, int]:
    """Apply the configured levels and return them keyed by logger name."""
    settings = settings or get_settings()
    root = logging.getLogger()
    root.setLevel(level_from_name(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)

    applied: dict[str, int] = {}
    for field_name, logger_names in LOGGER_CATEGORIES:
        level = level_from_name(getattr(settings, field_name, None))
        for logger_name in logger_names:
            logging.getLogger(logger_name).setLevel(level)
            applied[logger_name] = level

    logging.getLogger(__name__).debug("Log levels applied: %s", applied)
    return applied
