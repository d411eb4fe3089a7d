from .base import Base, ReportingBase
from .session import engine, async_session_factory, build_engine, build_session_factory, get_db_session
from .schema import create_schema, drop_schema, ensure_sqlite_directory

__all__ = [
    "Base",
    "ReportingBase",
    "engine",
    "async_session_factory",
    "build_engine",
    "build_session_factory",
    "get_db_session",
    "create_schema",
    "drop_schema",
    "ensure_sqlite_directory",
]
