"""Domain objects for service log reporting — filters, summaries and statistics."""

from dataclasses import dataclass, field


@dataclass
class ServiceLogFilters:
    """Filter set shared by the filtered list and the statistics queries.

    Dates are inclusive ``YYYY-MM-DD`` bounds on ``service_date``.
    """

    user_id: str | None = None
    client_id: str | None = None
    activity_id: str | None = None
    is_draft: bool | None = None
    start_date: str | None = None
    end_date: str | None = None


@dataclass
class AppointmentBreakdown:
    """Patient appointment counts per type for one service log."""

    new: int = 0
    followup: int = 0
    dna: int = 0
    total: int = 0


@dataclass
class ServiceLogSummary:
    """A denormalised service log row as used by reports.

    The reporting projection and the live join both produce this shape.
    """

    id: str
    user_id: str
    client_id: str
    activity_id: str
    service_date: str
    patient_count: int
    is_draft: bool
    submitted_at: str | None
    created_at: str
    updated_at: str
    client_name: str | None = None
    activity_name: str | None = None
    user_first_name: str | None = None
    user_last_name: str | None = None
    appointments: AppointmentBreakdown = field(default_factory=AppointmentBreakdown)


@dataclass
class NamedCount:
    """A grouped count keyed by a reference item."""

    id: str
    name: str | None
    count: int


@dataclass
class ServiceLogStatistics:
    """Aggregate figures over a filtered set of service logs."""

    total_logs: int = 0
    total_drafts: int = 0
    total_submitted: int = 0
    total_patients: int = 0
    average_patients_per_log: float = 0.0
    logs_by_client: list[NamedCount] = field(default_factory=list)
    logs_by_activity: list[NamedCount] = field(default_factory=list)
