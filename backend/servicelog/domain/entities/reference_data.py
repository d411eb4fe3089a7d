"""Domain entities for reference data — clients (sites), activities and outcomes.

All three share the same shape: a name that is unique among live rows, an
active flag that hides the item from pickers without deleting it, and the
usual lifecycle timestamps.
"""

from dataclasses import dataclass, field

from servicelog.domain.clock import utc_now_iso


@dataclass
class ReferenceItem:
    """Common shape of every reference-data record."""

    name: str
    id: str | None = None
    is_active: bool = True
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None

    @property
    def is_deleted(self) -> bool:
        return bool(self.deleted_at)


@dataclass
class Client(ReferenceItem):
    """A hospital or site that services are delivered for."""


@dataclass
class Activity(ReferenceItem):
    """A specialty or activity performed during a service."""


@dataclass
class Outcome(ReferenceItem):
    """The outcome recorded against a patient appointment."""


@dataclass
class ReferenceItemUsage:
    """A reference item together with how often live service data uses it."""

    item: ReferenceItem
    usage_count: int = 0
    last_used_at: str | None = None
