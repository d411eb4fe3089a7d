"""Integration tests for the user repository."""

import pytest

from servicelog.domain.entities import UserRole
from servicelog.domain.exceptions import DuplicateEntityError, EntityNotFoundError


@pytest.mark.asyncio
async def test_email_must_be_unique_among_live_users(new_user):
    await new_user("jane@example.org")

    with pytest.raises(DuplicateEntityError) as exc_info:
        await new_user("JANE@example.org")
    assert exc_info.value.field == "email"


@pytest.mark.asyncio
async def test_username_must_be_unique(new_user):
    await new_user("a@example.org", username="jdoe")

    with pytest.raises(DuplicateEntityError) as exc_info:
        await new_user("b@example.org", username="JDoe")
    assert exc_info.value.field == "username"


@pytest.mark.asyncio
async def test_deleted_user_releases_email(users, new_user):
    first = await new_user("jane@example.org")
    await users.soft_delete(first.id, "admin-1")

    second = await new_user("jane@example.org")
    assert second.id != first.id
    assert await users.find_by_email("jane@example.org") == second


@pytest.mark.asyncio
async def test_update_user_may_keep_own_email(users, new_user):
    jane = await new_user("jane@example.org")
    await new_user("john@example.org")

    updated = await users.update_user(jane.id, {"email": "jane@example.org", "first_name": "Janet"}, "admin-1")
    assert updated.first_name == "Janet"

    with pytest.raises(DuplicateEntityError):
        await users.update_user(jane.id, {"email": "john@example.org"}, "admin-1")


@pytest.mark.asyncio
async def test_update_missing_user_raises(users):
    with pytest.raises(EntityNotFoundError):
        await users.update_user("missing", {"first_name": "X"}, "admin-1")


@pytest.mark.asyncio
async def test_find_users_filters(users, new_user):
    await new_user("jane@example.org", "Jane", "Doe")
    await new_user("admin@example.org", "Ada", "Admin", role="admin")
    inactive = await new_user("old@example.org", "Olga", "Old")
    await users.toggle_active(inactive.id, "admin-1")

    admins = await users.find_users(role=UserRole.ADMIN)
    assert [u.email for u in admins.items] == ["admin@example.org"]

    active = await users.find_users(is_active=True)
    assert active.total == 2

    searched = await users.find_users(search="DOE")
    assert [u.first_name for u in searched.items] == ["Jane"]

    assert (await users.find_users(search="%")).total == 0
    assert (await users.find_users(search="j_ne")).total == 0


@pytest.mark.asyncio
async def test_update_last_login_is_not_audited(users, audit_repo, new_user):
    jane = await new_user("jane@example.org")

    await users.update_last_login(jane.id)

    assert (await users.find_by_id(jane.id)).last_login_at is not None
    assert len(await audit_repo.find_by_record("users", jane.id)) == 1


@pytest.mark.asyncio
async def test_password_hash_is_left_out_of_audit_snapshots(audit_repo, new_user):
    jane = await new_user("jane@example.org")

    entry = (await audit_repo.find_by_record("users", jane.id))[0]
    snapshot = entry.decode_new()
    assert snapshot["email"] == "jane@example.org"
    assert "password_hash" not in snapshot
