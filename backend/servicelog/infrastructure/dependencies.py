"""FastAPI dependency injection — wires infrastructure to application layer."""

from collections.abc import AsyncGenerator

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.application.services import (
    AuditLogService,
    CustomFieldService,
    ReferenceDataService,
    ReportingService,
    ServiceLogService,
    UserService,
)
from servicelog.infrastructure.database.reporting_projection import ServiceLogReportingProjection
from servicelog.infrastructure.database.repositories import (
    SQLAlchemyActivityRepository,
    SQLAlchemyAuditLogRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyCustomFieldRepository,
    SQLAlchemyFieldChoiceRepository,
    SQLAlchemyOutcomeRepository,
    SQLAlchemyServiceLogRepository,
    SQLAlchemyUserRepository,
)
from servicelog.infrastructure.database.session import get_db_session


async def get_current_actor(
    x_user_id: str | None = Header(None, description="Id of the acting user"),
) -> str:
    """Acting user id, as established by the authentication layer in front of the API."""
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="X-User-Id header is required",
        )
    return x_user_id.strip()


async def get_user_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[UserService, None]:
    """Provides a UserService instance with its repository wired up."""
    yield UserService(SQLAlchemyUserRepository(session))


async def get_client_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ReferenceDataService, None]:
    yield ReferenceDataService(SQLAlchemyClientRepository(session), "Client")


async def get_activity_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ReferenceDataService, None]:
    yield ReferenceDataService(SQLAlchemyActivityRepository(session), "Activity")


async def get_outcome_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ReferenceDataService, None]:
    yield ReferenceDataService(SQLAlchemyOutcomeRepository(session), "Outcome")


async def get_custom_field_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[CustomFieldService, None]:
    """Provides a CustomFieldService whose field and choice repositories share one audit trail."""
    audit = SQLAlchemyAuditLogRepository(session)
    choices = SQLAlchemyFieldChoiceRepository(session, audit=audit)
    fields = SQLAlchemyCustomFieldRepository(session, audit=audit, choices=choices)
    yield CustomFieldService(fields, choices)


async def get_service_log_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ServiceLogService, None]:
    yield ServiceLogService(SQLAlchemyServiceLogRepository(session))


async def get_reporting_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[ReportingService, None]:
    projection = ServiceLogReportingProjection(session)
    repository = SQLAlchemyServiceLogRepository(session, projection=projection)
    yield ReportingService(repository, projection)


async def get_audit_log_service(
    session: AsyncSession = Depends(get_db_session),
) -> AsyncGenerator[AuditLogService, None]:
    yield AuditLogService(SQLAlchemyAuditLogRepository(session))
