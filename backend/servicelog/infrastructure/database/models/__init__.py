from .user import UserModel
from .reference_data import ActivityModel, ClientModel, OutcomeModel
from .custom_field import CustomFieldModel, FieldChoiceModel
from .service_log import PatientEntryModel, ServiceLogModel
from .audit_log import AuditLogModel
from .reporting_view import ServiceLogReportingViewModel

__all__ = [
    "UserModel",
    "ActivityModel",
    "ClientModel",
    "OutcomeModel",
    "CustomFieldModel",
    "FieldChoiceModel",
    "PatientEntryModel",
    "ServiceLogModel",
    "AuditLogModel",
    "ServiceLogReportingViewModel",
]
