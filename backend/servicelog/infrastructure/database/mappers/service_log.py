"""Mappers for 'service_logs' and 'patient_entries'."""

from servicelog.domain.entities import AppointmentType, PatientEntry, ServiceLog
from servicelog.infrastructure.database.models import PatientEntryModel, ServiceLogModel

from .base import (
    EntityMapper,
    bool_from_storage,
    bool_to_storage,
    date_from_storage,
    date_to_storage,
    enum_to_storage,
    id_from_storage,
    int_id_to_storage,
    passthrough,
)


class ServiceLogMapper(EntityMapper[ServiceLog, ServiceLogModel]):
    converters = {
        "id": passthrough,
        "user_id": passthrough,
        "client_id": int_id_to_storage,
        "activity_id": int_id_to_storage,
        "service_date": passthrough,
        "patient_count": passthrough,
        "is_draft": bool_to_storage,
        "submitted_at": date_to_storage,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: ServiceLogModel) -> ServiceLog:
        return ServiceLog(
            id=row.id,
            user_id=row.user_id,
            client_id=id_from_storage(row.client_id),
            activity_id=id_from_storage(row.activity_id),
            service_date=row.service_date,
            patient_count=row.patient_count,
            is_draft=bool_from_storage(row.is_draft),
            submitted_at=date_from_storage(row.submitted_at),
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )


class PatientEntryMapper(EntityMapper[PatientEntry, PatientEntryModel]):
    converters = {
        "id": passthrough,
        "service_log_id": passthrough,
        "appointment_type": enum_to_storage,
        "outcome_id": int_id_to_storage,
        "created_at": passthrough,
        "updated_at": passthrough,
        "deleted_at": date_to_storage,
    }

    def from_storage(self, row: PatientEntryModel) -> PatientEntry:
        return PatientEntry(
            id=row.id,
            service_log_id=row.service_log_id,
            appointment_type=AppointmentType(row.appointment_type),
            outcome_id=id_from_storage(row.outcome_id),
            created_at=row.created_at,
            updated_at=row.updated_at,
            deleted_at=date_from_storage(row.deleted_at),
        )
