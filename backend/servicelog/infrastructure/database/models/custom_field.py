"""SQLAlchemy ORM models for custom form fields and their choices."""

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from servicelog.infrastructure.database.base import Base, LifecycleColumns


class CustomFieldModel(LifecycleColumns, Base):
    """ORM model — maps to the 'custom_fields' table.

    ``client_id`` NULL means the field is global.
    """

    __tablename__ = "custom_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    field_label: Mapped[str] = mapped_column(String(255), nullable=False)
    field_type: Mapped[str] = mapped_column(String(20), nullable=False)
    field_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_active: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    client_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("clients.id"), nullable=True,
    )

    __table_args__ = (
        CheckConstraint(
            "field_type IN ('text', 'number', 'checkbox', 'dropdown')",
            name="ck_custom_fields_type",
        ),
        Index("ix_custom_fields_client", "client_id"),
        Index("ix_custom_fields_client_active", "client_id", "is_active", "field_order"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<CustomFieldModel(id={self.id}, label='{self.field_label}', "
            f"type='{self.field_type}', client_id={self.client_id})>"
        )


class FieldChoiceModel(LifecycleColumns, Base):
    """ORM model — maps to the 'field_choices' table."""

    __tablename__ = "field_choices"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    field_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("custom_fields.id", ondelete="CASCADE"), nullable=False,
    )
    choice_text: Mapped[str] = mapped_column(String(255), nullable=False)
    choice_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        Index("ix_field_choices_field_order", "field_id", "choice_order"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<FieldChoiceModel(id={self.id}, field_id={self.field_id}, text='{self.choice_text}')>"
