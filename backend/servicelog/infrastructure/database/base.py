"""SQLAlchemy ORM bases and shared column mixins."""

from sqlalchemy import String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models created by the schema bootstrap."""

    pass


class ReportingBase(DeclarativeBase):
    """Separate registry for derived tables.

    Tables declared here are not part of ``Base.metadata`` and therefore do
    not exist until their owner creates them explicitly.
    """

    pass


class LifecycleColumns:
    """``created_at`` / ``updated_at`` / ``deleted_at`` stored as ISO-8601 text.

    A row whose ``deleted_at`` is neither NULL nor '' is soft-deleted.
    """

    created_at: Mapped[str] = mapped_column(String(32), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(32), nullable=False)
    deleted_at: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
