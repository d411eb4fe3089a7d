"""Pydantic DTOs for service logs and patient entries."""

from pydantic import BaseModel, Field, field_validator

from servicelog.domain.entities import AppointmentType

_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"


class PatientEntryCreate(BaseModel):
    appointment_type: AppointmentType
    outcome_id: str


class ServiceLogCreate(BaseModel):
    """Schema for recording services; the author is the acting user."""

    client_id: str
    activity_id: str
    service_date: str = Field(..., pattern=_DATE_PATTERN, examples=["2025-03-14"])
    patient_count: int = Field(0, ge=0)
    is_draft: bool = False
    patient_entries: list[PatientEntryCreate] = Field(default_factory=list)


class ServiceLogUpdate(BaseModel):
    """Schema for editing a log — all fields optional. Drafting is a separate action."""

    client_id: str | None = None
    activity_id: str | None = None
    service_date: str | None = Field(None, pattern=_DATE_PATTERN)
    patient_count: int | None = Field(None, ge=0)

    @field_validator("client_id", "activity_id", "service_date", "patient_count")
    @classmethod
    def reject_null(cls, v):
        """Omit a field to leave it unchanged; null would clear a required column."""
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ServiceLogResponse(BaseModel):
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

    model_config = {"from_attributes": True}


class PatientEntryResponse(BaseModel):
    id: str
    service_log_id: str
    appointment_type: AppointmentType
    outcome_id: str
    created_at: str
    updated_at: str

    model_config = {"from_attributes": True}


class PatientEntryDetailsResponse(BaseModel):
    entry: PatientEntryResponse
    outcome_name: str | None

    model_config = {"from_attributes": True}


class ServiceLogDetailsResponse(BaseModel):
    service_log: ServiceLogResponse
    client_name: str | None
    activity_name: str | None
    user_first_name: str | None
    user_last_name: str | None
    patient_entries: list[PatientEntryDetailsResponse]

    model_config = {"from_attributes": True}
