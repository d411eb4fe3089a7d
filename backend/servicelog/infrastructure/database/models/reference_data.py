"""SQLAlchemy ORM models for reference data — clients, activities and outcomes."""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from servicelog.infrastructure.database.base import Base, LifecycleColumns


class ReferenceDataColumns(LifecycleColumns):
    """Columns shared by every reference-data table."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_active: Mapped[int] = mapped_column(Integer, nullable=False, default=1, index=True)

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id}, name='{self.name}')>"


class ClientModel(ReferenceDataColumns, Base):
    """ORM model — maps to the 'clients' table."""

    __tablename__ = "clients"
    __table_args__ = {"sqlite_autoincrement": True}


class ActivityModel(ReferenceDataColumns, Base):
    """ORM model — maps to the 'activities' table."""

    __tablename__ = "activities"
    __table_args__ = {"sqlite_autoincrement": True}


class OutcomeModel(ReferenceDataColumns, Base):
    """ORM model — maps to the 'outcomes' table."""

    __tablename__ = "outcomes"
    __table_args__ = {"sqlite_autoincrement": True}
