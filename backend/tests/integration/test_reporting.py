"""Integration tests for the reporting projection and the queries that read it."""

import pytest
import pytest_asyncio

from servicelog.domain.entities import ServiceLogFilters
from servicelog.domain.exceptions import DomainValidationError
from servicelog.infrastructure.database.reporting_projection import ServiceLogReportingProjection
from servicelog.infrastructure.database.repositories import SQLAlchemyServiceLogRepository


@pytest_asyncio.fixture
async def projection(session) -> ServiceLogReportingProjection:
    return ServiceLogReportingProjection(session)


@pytest_asyncio.fixture
async def logs(session, audit_repo, projection) -> SQLAlchemyServiceLogRepository:
    return SQLAlchemyServiceLogRepository(session, audit=audit_repo, projection=projection)


@pytest_asyncio.fixture
async def dataset(logs, reference_data) -> dict:
    """Four live logs across two users, clients and activities, plus one deleted log."""
    u1, u2 = reference_data["u1"].id, reference_data["u2"].id
    outcome = reference_data["outcome"].id

    def entry(kind):
        return {"appointment_type": kind, "outcome_id": outcome}

    def data(user, client, activity, service_date, **extra):
        return {
            "user_id": user,
            "client_id": reference_data[client].id,
            "activity_id": reference_data[activity].id,
            "service_date": service_date,
            **extra,
        }

    first = await logs.create_with_entries(
        data(u1, "client_a", "activity_a", "2025-01-10"), [entry("new"), entry("new"), entry("dna")], u1,
    )
    second = await logs.create_with_entries(
        data(u1, "client_a", "activity_b", "2025-02-10"), [entry("followup")], u1,
    )
    draft = await logs.create(data(u1, "client_b", "activity_a", "2025-03-10", is_draft=True), u1)
    third = await logs.create_with_entries(
        data(u2, "client_b", "activity_b", "2025-02-20"), [entry("new"), entry("followup")], u2,
    )
    removed = await logs.create_with_entries(
        data(u2, "client_a", "activity_a", "2025-02-01"), [entry("dna")], u2,
    )
    await logs.soft_delete(removed.id, u2)
    return {"first": first, "second": second, "draft": draft, "third": third, "removed": removed}


FILTER_CASES = [
    ServiceLogFilters(),
    ServiceLogFilters(is_draft=False),
    ServiceLogFilters(client_id="1"),
    ServiceLogFilters(activity_id="2", start_date="2025-02-01", end_date="2025-02-28"),
    ServiceLogFilters(client_id="abc"),
]


@pytest.mark.asyncio
async def test_projection_is_absent_until_first_refresh(projection, logs, dataset):
    assert await projection.is_available() is False
    assert await projection.last_refreshed_at() is None

    page = await logs.find_with_filters(ServiceLogFilters())
    assert page.total == 4
    assert dataset["removed"].id not in {item.id for item in page.items}


@pytest.mark.asyncio
async def test_refresh_creates_projection_with_live_rows(projection, dataset):
    assert await projection.refresh() == 4

    assert await projection.is_available() is True
    assert await projection.last_refreshed_at() is not None


@pytest.mark.asyncio
async def test_refresh_is_idempotent(projection, logs, dataset):
    await projection.refresh()
    before = await logs.find_with_filters(ServiceLogFilters())

    assert await projection.refresh() == 4
    assert await logs.find_with_filters(ServiceLogFilters()) == before


@pytest.mark.asyncio
@pytest.mark.parametrize("filters", FILTER_CASES)
async def test_projection_and_live_paths_agree(projection, logs, dataset, filters):
    await projection.refresh()

    for order_by in ("service_date", "patient_count", "client_name"):
        via_projection = await logs.find_with_filters(filters, order_by=order_by)
        live = await logs.find_with_filters(filters, order_by=order_by, use_projection=False)
        assert via_projection == live

    assert await logs.get_statistics(filters) == await logs.get_statistics(filters, use_projection=False)


@pytest.mark.asyncio
async def test_summary_carries_names_and_appointment_counts(logs, dataset):
    page = await logs.find_with_filters(ServiceLogFilters(), order_by="service_date", order_direction="ASC")

    first = page.items[0]
    assert first.id == dataset["first"].id
    assert (first.client_name, first.activity_name) == ("Main Hospital", "Cardiology")
    assert (first.user_first_name, first.user_last_name) == ("Una", "One")
    assert (first.appointments.new, first.appointments.dna, first.appointments.total) == (2, 1, 3)
    assert page.items[-1].is_draft is True


@pytest.mark.asyncio
async def test_statistics(logs, dataset):
    stats = await logs.get_statistics(ServiceLogFilters())

    assert stats.total_logs == 4
    assert stats.total_drafts == 1
    assert stats.total_submitted == 3
    assert stats.total_patients == 6
    assert stats.average_patients_per_log == 1.5
    assert [(c.name, c.count) for c in stats.logs_by_client] == [("Main Hospital", 2), ("North Clinic", 2)]
    assert [(a.name, a.count) for a in stats.logs_by_activity] == [("Cardiology", 2), ("Dermatology", 2)]


@pytest.mark.asyncio
async def test_statistics_of_empty_selection(logs, dataset):
    stats = await logs.get_statistics(ServiceLogFilters(user_id="nobody"))

    assert stats.total_logs == 0
    assert stats.average_patients_per_log == 0.0
    assert stats.logs_by_client == []


@pytest.mark.asyncio
async def test_projection_is_stale_until_refreshed(projection, logs, dataset):
    await projection.refresh()
    await logs.soft_delete(dataset["third"].id, dataset["third"].user_id)

    assert (await logs.find_with_filters(ServiceLogFilters())).total == 4
    assert (await logs.find_with_filters(ServiceLogFilters(), use_projection=False)).total == 3

    await projection.refresh()
    assert (await logs.find_with_filters(ServiceLogFilters())).total == 3


@pytest.mark.asyncio
async def test_find_with_filters_pages_and_validates_ordering(logs, dataset):
    page = await logs.find_with_filters(ServiceLogFilters(), page=2, limit=3)
    assert page.total == 4
    assert len(page.items) == 1

    with pytest.raises(DomainValidationError):
        await logs.find_with_filters(ServiceLogFilters(), order_by="deleted_at")
    with pytest.raises(DomainValidationError):
        await logs.find_with_filters(ServiceLogFilters(), order_direction="sideways")
