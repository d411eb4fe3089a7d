"""Transaction scoping shared by repositories and the reporting projection."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncIterator[None]:
    """Run a block all-or-nothing.

    Inside an open transaction the block gets a SAVEPOINT and the caller
    decides when to commit; otherwise a new transaction is opened and
    committed when the block exits.
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            yield
