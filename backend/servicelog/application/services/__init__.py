from .user_service import UserService
from .reference_data_service import ReferenceDataService
from .custom_field_service import CustomFieldService
from .service_log_service import ServiceLogService
from .reporting_service import ReportingService
from .audit_log_service import AuditLogService
from .reporting_refresher import ReportingRefresher

__all__ = [
    "UserService",
    "ReferenceDataService",
    "CustomFieldService",
    "ServiceLogService",
    "ReportingService",
    "AuditLogService",
    "ReportingRefresher",
]
