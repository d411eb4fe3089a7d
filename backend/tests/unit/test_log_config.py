"""Unit tests for per-category log levels."""

import logging

import pytest

from servicelog.config import Settings
from servicelog.infrastructure.logging.log_config import level_from_name, setup_logging


@pytest.fixture
def restore_levels():
    names = ["", "sqlalchemy.engine", "uvicorn.access", "servicelog.infrastructure.database.repositories"]
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_level_from_name():
    assert level_from_name("debug") == logging.DEBUG
    assert level_from_name("WARNING") == logging.WARNING
    assert level_from_name("loud") == logging.INFO
    assert level_from_name(None) == logging.INFO


def test_setup_logging_applies_each_category(restore_levels):
    settings = Settings(
        _env_file=None,
        log_level="WARNING",
        log_level_sql="ERROR",
        log_level_uvicorn="DEBUG",
        log_level_repository="nonsense",
    )

    applied = setup_logging(settings)

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert applied["uvicorn.access"] == logging.DEBUG
    assert applied["servicelog.infrastructure.database.repositories"] == logging.INFO
