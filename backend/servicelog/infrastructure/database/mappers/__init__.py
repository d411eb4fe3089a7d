from .base import EntityMapper, StorageConversionError
from .user import UserMapper
from .reference_data import ActivityMapper, ClientMapper, OutcomeMapper, ReferenceDataMapper
from .custom_field import CustomFieldMapper, FieldChoiceMapper
from .service_log import PatientEntryMapper, ServiceLogMapper

__all__ = [
    "EntityMapper",
    "StorageConversionError",
    "UserMapper",
    "ActivityMapper",
    "ClientMapper",
    "OutcomeMapper",
    "ReferenceDataMapper",
    "CustomFieldMapper",
    "FieldChoiceMapper",
    "PatientEntryMapper",
    "ServiceLogMapper",
]
