from .crud_repository import CrudRepository
from .audit_log_repository import AuditLogRepository
from .user_repository import UserRepository
from .reference_data_repository import ReferenceDataRepository
from .custom_field_repository import CustomFieldRepository, FieldChoiceRepository
from .service_log_repository import PatientEntryRepository, ServiceLogRepository
from .reporting_projection import ReportingProjection

__all__ = [
    "CrudRepository",
    "AuditLogRepository",
    "UserRepository",
    "ReferenceDataRepository",
    "CustomFieldRepository",
    "FieldChoiceRepository",
    "PatientEntryRepository",
    "ServiceLogRepository",
    "ReportingProjection",
]
