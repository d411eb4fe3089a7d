"""Integration tests for service logs, their patient entries and the draft lifecycle."""

from datetime import datetime

import pytest
import pytest_asyncio

from servicelog.domain.entities import AppointmentType
from servicelog.domain.exceptions import (
    DomainValidationError,
    InvalidStateTransitionError,
    PermissionDeniedError,
)
from servicelog.infrastructure.database.repositories import (
    SQLAlchemyPatientEntryRepository,
    SQLAlchemyServiceLogRepository,
)


@pytest_asyncio.fixture
async def entries(session, audit_repo) -> SQLAlchemyPatientEntryRepository:
    return SQLAlchemyPatientEntryRepository(session, audit=audit_repo)


@pytest_asyncio.fixture
async def logs(session, audit_repo, entries) -> SQLAlchemyServiceLogRepository:
    return SQLAlchemyServiceLogRepository(session, audit=audit_repo, entries=entries)


@pytest.fixture
def log_data(reference_data):
    def _build(user="u1", **extra):
        return {
            "user_id": reference_data[user].id,
            "client_id": reference_data["client_a"].id,
            "activity_id": reference_data["activity_a"].id,
            "service_date": "2025-03-14",
            **extra,
        }

    return _build


def _is_iso_timestamp(value: str) -> bool:
    return datetime.fromisoformat(value.replace("Z", "+00:00")).tzinfo is not None


@pytest.mark.asyncio
async def test_only_the_author_can_submit_a_draft(logs, log_data, reference_data):
    u1 = reference_data["u1"].id
    u2 = reference_data["u2"].id
    draft = await logs.create(log_data(is_draft=True), u1)
    assert draft.is_draft is True
    assert draft.submitted_at is None

    with pytest.raises(PermissionDeniedError):
        await logs.submit_draft(draft.id, u2)
    assert (await logs.find_by_id(draft.id)).is_draft is True

    submitted = await logs.submit_draft(draft.id, u1)
    assert submitted.is_draft is False
    assert _is_iso_timestamp(submitted.submitted_at)


@pytest.mark.asyncio
async def test_submit_then_convert_back_to_draft(logs, log_data, reference_data):
    u1 = reference_data["u1"].id
    draft = await logs.create(log_data(is_draft=True), u1)
    await logs.submit_draft(draft.id, u1)

    reverted = await logs.convert_to_draft(draft.id, u1)

    assert reverted.is_draft is True
    assert reverted.submitted_at is None


@pytest.mark.asyncio
async def test_invalid_transitions(logs, log_data, reference_data):
    u1 = reference_data["u1"].id
    submitted = await logs.create(log_data(), u1)
    draft = await logs.create(log_data(is_draft=True), u1)

    assert submitted.submitted_at is not None
    with pytest.raises(InvalidStateTransitionError):
        await logs.submit_draft(submitted.id, u1)
    with pytest.raises(InvalidStateTransitionError):
        await logs.convert_to_draft(draft.id, u1)


@pytest.mark.asyncio
async def test_create_with_entries_sets_patient_count(logs, log_data, reference_data, audit_repo):
    outcome = reference_data["outcome"].id
    log = await logs.create_with_entries(
        log_data(patient_count=99),
        [
            {"appointment_type": "new", "outcome_id": outcome},
            {"appointment_type": AppointmentType.FOLLOWUP, "outcome_id": outcome},
            {"appointment_type": "dna", "outcome_id": outcome},
        ],
        reference_data["u1"].id,
    )

    assert log.patient_count == 3
    stored = await logs.find_entries(log.id)
    assert sorted(e.appointment_type.value for e in stored) == ["dna", "followup", "new"]
    assert {e.service_log_id for e in stored} == {log.id}
    assert len((await audit_repo.find_all(table_name="patient_entries")).items) == 3


@pytest.mark.asyncio
async def test_create_with_entries_validates_before_writing(logs, log_data, reference_data):
    with pytest.raises(DomainValidationError):
        await logs.create_with_entries(
            log_data(),
            [{"appointment_type": "walk-in", "outcome_id": reference_data["outcome"].id}],
            reference_data["u1"].id,
        )
    with pytest.raises(DomainValidationError):
        await logs.create_with_entries(log_data(), [{"appointment_type": "new"}], reference_data["u1"].id)

    assert (await logs.find_by_user(reference_data["u1"].id)).total == 0


@pytest.mark.asyncio
async def test_create_with_entries_rejects_unknown_outcome(logs, log_data, reference_data):
    with pytest.raises(DomainValidationError):
        await logs.create_with_entries(
            log_data(), [{"appointment_type": "new", "outcome_id": "999"}], reference_data["u1"].id,
        )

    assert (await logs.find_by_user(reference_data["u1"].id)).total == 0


@pytest.mark.asyncio
async def test_create_rejects_inactive_or_unknown_references(logs, log_data, reference_data, clients, outcomes):
    u1 = reference_data["u1"].id
    await clients.toggle_active(reference_data["client_b"].id, "admin-1")
    await outcomes.soft_delete(reference_data["outcome"].id, "admin-1")

    with pytest.raises(DomainValidationError, match="inactive client"):
        await logs.create(log_data(client_id=reference_data["client_b"].id), u1)
    with pytest.raises(DomainValidationError, match="activity 'abc'"):
        await logs.create(log_data(activity_id="abc"), u1)
    with pytest.raises(DomainValidationError, match="outcome"):
        await logs.create_with_entries(
            log_data(), [{"appointment_type": "new", "outcome_id": reference_data["outcome"].id}], u1,
        )

    assert (await logs.find_by_user(u1)).total == 0


@pytest.mark.asyncio
async def test_update_checks_changed_references(logs, log_data, reference_data, clients):
    u1 = reference_data["u1"].id
    log = await logs.create(log_data(), u1)

    with pytest.raises(DomainValidationError):
        await logs.update(log.id, {"client_id": None}, u1)
    with pytest.raises(DomainValidationError):
        await logs.update(log.id, {"client_id": "999"}, u1)

    moved = await logs.update(log.id, {"client_id": reference_data["client_b"].id}, u1)
    assert moved.client_id == reference_data["client_b"].id

    # An unchanged reference is not re-checked once it has been deactivated.
    await clients.toggle_active(reference_data["client_b"].id, "admin-1")
    edited = await logs.update(
        log.id, {"client_id": reference_data["client_b"].id, "patient_count": 4}, u1,
    )
    assert edited.patient_count == 4


@pytest.mark.asyncio
async def test_find_by_id_with_details(logs, log_data, reference_data):
    log = await logs.create_with_entries(
        log_data(),
        [{"appointment_type": "new", "outcome_id": reference_data["outcome"].id}],
        reference_data["u1"].id,
    )

    details = await logs.find_by_id_with_details(log.id)

    assert details.service_log == log
    assert details.client_name == "Main Hospital"
    assert details.activity_name == "Cardiology"
    assert (details.user_first_name, details.user_last_name) == ("Una", "One")
    assert [d.outcome_name for d in details.patient_entries] == ["Discharged"]
    assert await logs.find_by_id_with_details("missing") is None


@pytest.mark.asyncio
async def test_lookups_by_user_client_and_activity(logs, log_data, reference_data):
    u1 = reference_data["u1"].id
    older = await logs.create(log_data(service_date="2025-01-01"), u1)
    newer = await logs.create(log_data(service_date="2025-02-01"), u1)
    other = await logs.create(
        log_data(user="u2", client_id=reference_data["client_b"].id, activity_id=reference_data["activity_b"].id),
        reference_data["u2"].id,
    )

    assert [log.id for log in (await logs.find_by_user(u1)).items] == [newer.id, older.id]
    assert [log.id for log in (await logs.find_by_client(reference_data["client_b"].id)).items] == [other.id]
    assert (await logs.find_by_activity(reference_data["activity_a"].id)).total == 2
    assert (await logs.find_by_client("not-an-id")).total == 0


@pytest.mark.asyncio
async def test_find_drafts_by_user(logs, log_data, reference_data):
    u1 = reference_data["u1"].id
    draft = await logs.create(log_data(is_draft=True), u1)
    await logs.create(log_data(), u1)
    await logs.create(log_data(user="u2", is_draft=True), reference_data["u2"].id)

    assert [log.id for log in await logs.find_drafts_by_user(u1)] == [draft.id]


@pytest.mark.asyncio
async def test_bulk_delete_by_user(logs, log_data, reference_data, audit_repo):
    u1 = reference_data["u1"].id
    first = await logs.create(log_data(), u1)
    await logs.create(log_data(is_draft=True), u1)
    kept = await logs.create(log_data(user="u2"), reference_data["u2"].id)

    assert await logs.bulk_delete_by_user(u1, "admin-1") == 2

    assert (await logs.find_by_user(u1)).total == 0
    assert await logs.find_by_id(kept.id) is not None
    actions = [e.action.value for e in await audit_repo.find_by_record("service_logs", first.id)]
    assert actions == ["INSERT", "DELETE"]


@pytest.mark.asyncio
async def test_find_by_outcome(logs, entries, log_data, reference_data):
    outcome = reference_data["outcome"].id
    await logs.create_with_entries(
        log_data(),
        [{"appointment_type": "new", "outcome_id": outcome}, {"appointment_type": "dna", "outcome_id": outcome}],
        reference_data["u1"].id,
    )

    assert (await entries.find_by_outcome(outcome)).total == 2
    assert (await entries.find_by_outcome("bogus")).total == 0


@pytest.mark.asyncio
async def test_find_entries_for_several_logs(logs, entries, log_data, reference_data):
    outcome = reference_data["outcome"].id
    u1 = reference_data["u1"].id
    first = await logs.create_with_entries(log_data(), [{"appointment_type": "new", "outcome_id": outcome}], u1)
    empty = await logs.create(log_data(), u1)

    grouped = await entries.find_by_service_log_ids([first.id, empty.id])

    assert [e.appointment_type for e in grouped[first.id]] == [AppointmentType.NEW]
    assert grouped[empty.id] == []
    assert await entries.find_by_service_log_ids([]) == {}
