"""Integration tests for the generic audited repository, exercised through the client table."""

import logging
import re

import pytest
from sqlalchemy import select, text

from servicelog.domain.entities import AuditAction
from servicelog.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    RepositoryError,
)
from servicelog.infrastructure.database.models import ClientModel
from servicelog.infrastructure.database.repositories import (
    SQLAlchemyClientRepository,
    SQLAlchemyPatientEntryRepository,
    SQLAlchemyServiceLogRepository,
)

ISO_TIMESTAMP = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


@pytest.mark.asyncio
async def test_create_assigns_id_timestamps_and_audits_insert(clients, audit_repo):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    assert client.id == "1"
    assert client.is_active is True
    assert client.deleted_at is None
    assert ISO_TIMESTAMP.match(client.created_at)
    assert client.created_at == client.updated_at

    entries = await audit_repo.find_by_record("clients", client.id)
    assert [e.action for e in entries] == [AuditAction.INSERT]
    assert entries[0].user_id == "admin-1"
    assert entries[0].old_values is None
    assert entries[0].decode_new()["name"] == "Main Hospital"


@pytest.mark.asyncio
async def test_soft_deleted_client_disappears_and_leaves_two_audit_rows(clients, audit_repo):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    page = await clients.find_all()
    assert [c.name for c in page.items] == ["Main Hospital"]

    assert await clients.soft_delete(client.id, "admin-1") is True

    assert await clients.find_by_id(client.id) is None
    assert (await clients.find_all()).total == 0
    assert await clients.count() == 0

    entries = await audit_repo.find_by_record("clients", client.id)
    assert [e.action for e in entries] == [AuditAction.INSERT, AuditAction.DELETE]
    deleted = entries[1]
    assert deleted.decode_old()["deleted_at"] is None
    assert ISO_TIMESTAMP.match(deleted.decode_new()["deleted_at"])


@pytest.mark.asyncio
async def test_soft_deleted_row_is_kept_in_storage(clients, session):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")
    await clients.soft_delete(client.id, "admin-1")

    row = (await session.execute(select(ClientModel).where(ClientModel.id == 1))).scalar_one()
    assert row.deleted_at


@pytest.mark.asyncio
async def test_soft_delete_missing_raises_not_found(clients):
    with pytest.raises(EntityNotFoundError):
        await clients.soft_delete("42", "admin-1")


@pytest.mark.asyncio
async def test_soft_delete_twice_raises_not_found(clients):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")
    await clients.soft_delete(client.id, "admin-1")
    with pytest.raises(EntityNotFoundError):
        await clients.soft_delete(client.id, "admin-1")


@pytest.mark.asyncio
async def test_hard_delete_is_idempotent_and_audited(clients, audit_repo, session):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    assert await clients.hard_delete(client.id, "admin-1") is True
    assert await clients.hard_delete(client.id, "admin-1") is False
    assert await clients.hard_delete("not-a-number", "admin-1") is False

    remaining = (await session.execute(select(ClientModel))).scalars().all()
    assert remaining == []

    entries = await audit_repo.find_by_record("clients", client.id)
    assert entries[-1].action == AuditAction.DELETE
    assert entries[-1].new_values is None
    assert entries[-1].decode_old()["name"] == "Main Hospital"


@pytest.mark.asyncio
async def test_update_writes_old_and_new_snapshots(clients, audit_repo):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    updated = await clients.update(client.id, {"name": "Main Hospital East"}, "admin-2")

    assert updated.name == "Main Hospital East"
    assert updated.created_at == client.created_at
    entries = await audit_repo.find_by_record("clients", client.id)
    assert [e.action for e in entries] == [AuditAction.INSERT, AuditAction.UPDATE]
    assert entries[1].user_id == "admin-2"
    assert entries[1].decode_old()["name"] == "Main Hospital"
    assert entries[1].decode_new()["name"] == "Main Hospital East"


@pytest.mark.asyncio
async def test_update_with_unchanged_values_is_a_no_op(clients, audit_repo):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    same = await clients.update(client.id, {"name": "Main Hospital", "is_active": True}, "admin-1")

    assert same.updated_at == client.updated_at
    entries = await audit_repo.find_by_record("clients", client.id)
    assert [e.action for e in entries] == [AuditAction.INSERT]


@pytest.mark.asyncio
async def test_update_ignores_protected_fields(clients, audit_repo):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")

    result = await clients.update(
        client.id,
        {"id": "99", "created_at": "1999-01-01T00:00:00.000Z", "deleted_at": "2000-01-01T00:00:00.000Z"},
        "admin-1",
    )

    assert result.id == client.id
    assert result.created_at == client.created_at
    assert result.deleted_at is None
    assert len(await audit_repo.find_by_record("clients", client.id)) == 1


@pytest.mark.asyncio
async def test_update_missing_or_deleted_raises_not_found(clients):
    client = await clients.create({"name": "Main Hospital"}, "admin-1")
    await clients.soft_delete(client.id, "admin-1")

    with pytest.raises(EntityNotFoundError):
        await clients.update(client.id, {"name": "Other"}, "admin-1")
    with pytest.raises(EntityNotFoundError):
        await clients.update("777", {"name": "Other"}, "admin-1")


@pytest.mark.asyncio
async def test_find_by_id_with_malformed_id_returns_none(clients):
    assert await clients.find_by_id("abc") is None


@pytest.mark.asyncio
async def test_find_all_paginates_and_clamps(session):
    repo = SQLAlchemyClientRepository(session, max_page_size=10)
    await repo.bulk_create([{"name": f"Client {i:02d}"} for i in range(25)], "admin-1")

    page = await repo.find_all(page=2, limit=10, order_by="name", order_direction="ASC")
    assert page.total == 25
    assert page.total_pages == 3
    assert [c.name for c in page.items] == [f"Client {i:02d}" for i in range(10, 20)]

    clamped = await repo.find_all(page=0, limit=1000)
    assert clamped.page == 1
    assert clamped.limit == 10
    assert len(clamped.items) == 10

    smallest = await repo.find_all(limit=0)
    assert smallest.limit == 1
    assert len(smallest.items) == 1

    last = await repo.find_all(page=3, limit=10)
    assert len(last.items) == 5


@pytest.mark.asyncio
async def test_find_all_on_empty_table(clients):
    page = await clients.find_all()
    assert page.items == []
    assert page.total == 0
    assert page.total_pages == 0


@pytest.mark.asyncio
async def test_find_all_applies_extra_filters(clients):
    await clients.create({"name": "Main Hospital"}, "admin-1")
    await clients.create({"name": "North Clinic", "is_active": False}, "admin-1")

    page = await clients.find_all(where=[ClientModel.is_active == 0])
    assert [c.name for c in page.items] == ["North Clinic"]


@pytest.mark.asyncio
async def test_find_all_rejects_unknown_order_column(clients):
    with pytest.raises(DomainValidationError):
        await clients.find_all(order_by="name; DROP TABLE clients")
    with pytest.raises(DomainValidationError):
        await clients.find_all(order_by="name", order_direction="sideways")


@pytest.mark.asyncio
async def test_count_only_includes_live_active_rows(clients):
    first = await clients.create({"name": "A"}, "admin-1")
    await clients.create({"name": "B"}, "admin-1")
    await clients.create({"name": "C", "is_active": False}, "admin-1")
    await clients.soft_delete(first.id, "admin-1")

    assert await clients.count() == 1


@pytest.mark.asyncio
async def test_bulk_create_is_all_or_nothing(clients, session):
    with pytest.raises(RepositoryError):
        await clients.bulk_create([{"name": "Fine"}, {"name": None}], "admin-1")

    rows = (await session.execute(select(ClientModel))).scalars().all()
    assert rows == []


@pytest.mark.asyncio
async def test_storage_failure_is_wrapped_with_cause(session, reference_data):
    repo = SQLAlchemyServiceLogRepository(session)
    data = {
        "user_id": "no-such-user",
        "client_id": reference_data["client_a"].id,
        "activity_id": reference_data["activity_a"].id,
        "service_date": "2025-03-14",
    }
    with pytest.raises(RepositoryError) as exc_info:
        await repo.create(data, "admin-1")

    assert exc_info.value.table_name == "service_logs"
    assert exc_info.value.operation == "create"
    assert exc_info.value.__cause__ is not None


@pytest.mark.asyncio
async def test_audit_failure_does_not_block_the_mutation(clients, session, caplog):
    await session.execute(text("DROP TABLE audit_log"))

    with caplog.at_level(logging.ERROR):
        client = await clients.create({"name": "Main Hospital"}, "admin-1")
        await clients.update(client.id, {"name": "Renamed"}, "admin-1")

    assert (await clients.find_by_id(client.id)).name == "Renamed"
    assert "Audit write failed" in caplog.text


@pytest.mark.asyncio
async def test_unconvertible_key_value_is_a_validation_error(session, audit_repo):
    repo = SQLAlchemyPatientEntryRepository(session, audit=audit_repo)

    with pytest.raises(DomainValidationError, match="invalid outcome_id 'abc'"):
        await repo.create(
            {"service_log_id": "no-such-log", "appointment_type": "new", "outcome_id": "abc"}, "admin-1",
        )

    assert (await audit_repo.find_all(table_name="patient_entries")).total == 0
