"""Domain entities for service logs and the patient appointments recorded on them."""

from dataclasses import dataclass, field
from enum import Enum

from servicelog.domain.clock import utc_now_iso


class AppointmentType(str, Enum):
    """Kinds of patient appointment counted in reports."""

    NEW = "new"
    FOLLOWUP = "followup"
    DNA = "dna"  # did not attend


@dataclass
class PatientEntry:
    """A single patient appointment belonging to a service log."""

    service_log_id: str
    appointment_type: AppointmentType
    outcome_id: str
    id: str | None = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None


@dataclass
class ServiceLog:
    """A record of services delivered by one user for one client and activity.

    Lifecycle: draft → submitted → draft → ... ``submitted_at`` is set exactly
    when the log leaves the draft state and cleared when it goes back.
    """

    user_id: str
    client_id: str
    activity_id: str
    service_date: str
    patient_count: int = 0
    is_draft: bool = False
    submitted_at: str | None = None
    id: str | None = None
    created_at: str = field(default_factory=utc_now_iso)
    updated_at: str = field(default_factory=utc_now_iso)
    deleted_at: str | None = None

    @property
    def is_submitted(self) -> bool:
        return not self.is_draft


@dataclass
class PatientEntryDetails:
    """A patient entry with its outcome name resolved."""

    entry: PatientEntry
    outcome_name: str | None = None


@dataclass
class ServiceLogDetails:
    """A service log with its related names and patient entries."""

    service_log: ServiceLog
    client_name: str | None = None
    activity_name: str | None = None
    user_first_name: str | None = None
    user_last_name: str | None = None
    patient_entries: list[PatientEntryDetails] = field(default_factory=list)
