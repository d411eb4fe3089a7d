from .audit_log_repository import SQLAlchemyAuditLogRepository
from .base_repository import SQLAlchemyBaseRepository
from .user_repository import SQLAlchemyUserRepository
from .reference_data_repository import (
    SQLAlchemyActivityRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyOutcomeRepository,
    SQLAlchemyReferenceDataRepository,
)
from .field_choice_repository import SQLAlchemyFieldChoiceRepository
from .custom_field_repository import SQLAlchemyCustomFieldRepository
from .patient_entry_repository import SQLAlchemyPatientEntryRepository
from .service_log_repository import SQLAlchemyServiceLogRepository

__all__ = [
    "SQLAlchemyAuditLogRepository",
    "SQLAlchemyBaseRepository",
    "SQLAlchemyUserRepository",
    "SQLAlchemyActivityRepository",
    "SQLAlchemyClientRepository",
    "SQLAlchemyOutcomeRepository",
    "SQLAlchemyReferenceDataRepository",
    "SQLAlchemyFieldChoiceRepository",
    "SQLAlchemyCustomFieldRepository",
    "SQLAlchemyPatientEntryRepository",
    "SQLAlchemyServiceLogRepository",
]
