from .common import OrderItem, PageResponse, ReorderRequest
from .user import UserCreate, UserResponse, UserUpdate
from .reference_data import (
    ReferenceItemBulkCreate,
    ReferenceItemCreate,
    ReferenceItemResponse,
    ReferenceItemUpdate,
    ReferenceItemUsageResponse,
)
from .custom_field import (
    CustomFieldCreate,
    CustomFieldResponse,
    CustomFieldUpdate,
    FieldChoiceCreate,
    FieldChoiceResponse,
    FieldChoiceUpdate,
)
from .service_log import (
    PatientEntryCreate,
    PatientEntryDetailsResponse,
    PatientEntryResponse,
    ServiceLogCreate,
    ServiceLogDetailsResponse,
    ServiceLogResponse,
    ServiceLogUpdate,
)
from .reporting import (
    AppointmentBreakdownResponse,
    NamedCountResponse,
    ProjectionRefreshResponse,
    ProjectionStatusResponse,
    ServiceLogStatisticsResponse,
    ServiceLogSummaryResponse,
)
from .audit_log import AuditLogEntryResponse
