"""Domain entities for configurable form fields and their dropdown choices."""

from dataclasses import dataclass, field
from enum import Enum

from servicelog.domain.clock import utc_now_iso


class FieldType(str, Enum):
    """Input types a custom field can render as."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    DROPDOWN = "dropdown"


@dataclass
class FieldChoice:
    """One selectable option of a dropdown field.

    Choice text is unique (case-insensitive) within its field.
    """

    field_id: str
    choice_text: str
    choice_order: int = 0
    id: str | None = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None


@dataclass
class CustomField:
    """A form field shown on the service log form.

    ``client_id`` scopes the field to one client; ``None`` makes it global.
    Labels are unique within their scope only, so a client field may reuse a
    label that exists globally or for another client.
    """

    field_label: str
    field_type: FieldType = FieldType.TEXT
    field_order: int = 0
    id: str | None = None
    client_id: str | None = None
    is_active: bool = True
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None
    choices: list[FieldChoice] = field(default_factory=list)

    @property
    def is_global(self) -> bool:
        return self.client_id is None

    @property
    def requires_choices(self) -> bool:
        return self.field_type == FieldType.DROPDOWN
