"""Unit tests for the ReportingRefresher background task."""

import asyncio

import pytest

from servicelog.application.interfaces import ReportingProjection
from servicelog.application.services import ReportingRefresher


class FakeSession:
    def __init__(self):
        self.commits = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def commit(self):
        self.commits += 1


class FakeProjection(ReportingProjection):
    """Counts refreshes; optionally fails the first one."""

    refreshes = 0

    def __init__(self, session, fail_first=False):
        self._session = session
        self._fail_first = fail_first

    async def refresh(self) -> int:
        FakeProjection.refreshes += 1
        if self._fail_first and FakeProjection.refreshes == 1:
            raise RuntimeError("boom")
        return 4

    async def is_available(self) -> bool:
        return FakeProjection.refreshes > 0

    async def last_refreshed_at(self) -> str | None:
        return None


@pytest.fixture(autouse=True)
def reset_counter():
    FakeProjection.refreshes = 0


@pytest.mark.asyncio
async def test_refresh_once_commits_its_own_session():
    session = FakeSession()
    refresher = ReportingRefresher(lambda: session, FakeProjection, interval=0)

    assert await refresher.refresh_once() == 4
    assert session.commits == 1


@pytest.mark.asyncio
async def test_non_positive_interval_disables_the_loop():
    refresher = ReportingRefresher(FakeSession, FakeProjection, interval=0)

    await refresher.start()

    assert refresher.running is False
    assert FakeProjection.refreshes == 0
    await refresher.stop()


@pytest.mark.asyncio
async def test_loop_keeps_running_after_a_failed_refresh():
    refresher = ReportingRefresher(
        FakeSession, lambda session: FakeProjection(session, fail_first=True), interval=0.01,
    )

    await refresher.start()
    for _ in range(100):
        if FakeProjection.refreshes >= 2:
            break
        await asyncio.sleep(0.01)
    await refresher.stop()

    assert FakeProjection.refreshes >= 2
    assert refresher.running is False
