"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from servicelog.presentation.api.v1.endpoints.health import router as health_router
from servicelog.presentation.api.v1.endpoints.users import router as users_router
from servicelog.presentation.api.v1.endpoints.reference_data import (
    activities_router,
    clients_router,
    outcomes_router,
)
from servicelog.presentation.api.v1.endpoints.custom_fields import router as custom_fields_router
from servicelog.presentation.api.v1.endpoints.service_logs import router as service_logs_router
from servicelog.presentation.api.v1.endpoints.reports import router as reports_router
from servicelog.presentation.api.v1.endpoints.audit_log import router as audit_log_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(users_router)
router.include_router(clients_router)
router.include_router(activities_router)
router.include_router(outcomes_router)
router.include_router(custom_fields_router)
router.include_router(service_logs_router)
router.include_router(reports_router)
router.include_router(audit_log_router)
