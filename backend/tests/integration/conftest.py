"""Shared fixtures for integration tests — one throwaway SQLite database per test."""

import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession

from servicelog.infrastructure.database import (
    build_engine,
    build_session_factory,
    create_schema,
    drop_schema,
)
from servicelog.infrastructure.database.repositories import (
    SQLAlchemyActivityRepository,
    SQLAlchemyAuditLogRepository,
    SQLAlchemyClientRepository,
    SQLAlchemyOutcomeRepository,
    SQLAlchemyUserRepository,
)

ADMIN_ID = "admin-1"


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'service_log_test.db'}")
    await create_schema(engine)
    yield engine
    await drop_schema(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def audit_repo(session) -> SQLAlchemyAuditLogRepository:
    return SQLAlchemyAuditLogRepository(session)


@pytest_asyncio.fixture
async def users(session) -> SQLAlchemyUserRepository:
    return SQLAlchemyUserRepository(session)


@pytest_asyncio.fixture
async def clients(session) -> SQLAlchemyClientRepository:
    return SQLAlchemyClientRepository(session)


@pytest_asyncio.fixture
async def activities(session) -> SQLAlchemyActivityRepository:
    return SQLAlchemyActivityRepository(session)


@pytest_asyncio.fixture
async def outcomes(session) -> SQLAlchemyOutcomeRepository:
    return SQLAlchemyOutcomeRepository(session)


def user_data(email: str, first_name: str = "Jane", last_name: str = "Doe", **extra) -> dict:
    return {
        "email": email,
        "password_hash": "hashed",
        "first_name": first_name,
        "last_name": last_name,
        "role": "candidate",
        **extra,
    }


@pytest_asyncio.fixture
async def reference_data(users, clients, activities, outcomes) -> dict:
    """Two candidates plus one client, activity and outcome of each kind needed by service logs."""
    u1 = await users.create_user(user_data("u1@example.org", "Una", "One"), ADMIN_ID)
    u2 = await users.create_user(user_data("u2@example.org", "Two", "Second"), ADMIN_ID)
    client_a = await clients.create_item({"name": "Main Hospital"}, ADMIN_ID)
    client_b = await clients.create_item({"name": "North Clinic"}, ADMIN_ID)
    activity_a = await activities.create_item({"name": "Cardiology"}, ADMIN_ID)
    activity_b = await activities.create_item({"name": "Dermatology"}, ADMIN_ID)
    outcome = await outcomes.create_item({"name": "Discharged"}, ADMIN_ID)
    return {
        "u1": u1,
        "u2": u2,
        "client_a": client_a,
        "client_b": client_b,
        "activity_a": activity_a,
        "activity_b": activity_b,
        "outcome": outcome,
    }


@pytest_asyncio.fixture
async def new_user(users):
    """Factory creating a live candidate account."""

    async def _create(email: str, first_name: str = "Jane", last_name: str = "Doe", **extra):
        return await users.create_user(user_data(email, first_name, last_name, **extra), ADMIN_ID)

    return _create
