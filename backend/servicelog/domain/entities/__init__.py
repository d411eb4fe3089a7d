from .user import User, UserRole
from .reference_data import Activity, Client, Outcome, ReferenceItem, ReferenceItemUsage
from .custom_field import CustomField, FieldChoice, FieldType
from .service_log import (
    AppointmentType,
    PatientEntry,
    PatientEntryDetails,
    ServiceLog,
    ServiceLogDetails,
)
from .audit_log import AuditAction, AuditLogEntry
from .pagination import Page, clamp_page
from .reporting import (
    AppointmentBreakdown,
    NamedCount,
    ServiceLogFilters,
    ServiceLogStatistics,
    ServiceLogSummary,
)

__all__ = [
    "User",
    "UserRole",
    "Activity",
    "Client",
    "Outcome",
    "ReferenceItem",
    "ReferenceItemUsage",
    "CustomField",
    "FieldChoice",
    "FieldType",
    "AppointmentType",
    "PatientEntry",
    "PatientEntryDetails",
    "ServiceLog",
    "ServiceLogDetails",
    "AuditAction",
    "AuditLogEntry",
    "Page",
    "clamp_page",
    "AppointmentBreakdown",
    "NamedCount",
    "ServiceLogFilters",
    "ServiceLogStatistics",
    "ServiceLogSummary",
]
