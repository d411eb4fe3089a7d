"""Pydantic DTOs for service log reports."""

from pydantic import BaseModel


class AppointmentBreakdownResponse(BaseModel):
    new: int
    followup: int
    dna: int
    total: int

    model_config = {"from_attributes": True}


class ServiceLogSummaryResponse(BaseModel):
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
    client_name: str | None
    activity_name: str | None
    user_first_name: str | None
    user_last_name: str | None
    appointments: AppointmentBreakdownResponse

    model_config = {"from_attributes": True}


class NamedCountResponse(BaseModel):
    id: str
    name: str | None
    count: int

    model_config = {"from_attributes": True}


class ServiceLogStatisticsResponse(BaseModel):
    total_logs: int
    total_drafts: int
    total_submitted: int
    total_patients: int
    average_patients_per_log: float
    logs_by_client: list[NamedCountResponse]
    logs_by_activity: list[NamedCountResponse]

    model_config = {"from_attributes": True}


class ProjectionStatusResponse(BaseModel):
    available: bool
    last_refreshed_at: str | None


class ProjectionRefreshResponse(BaseModel):
    rows: int
    refreshed_at: str | None
