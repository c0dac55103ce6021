import asyncio

import pytest
from helpers.fakes import DummySession
from sqlalchemy.exc import IntegrityError, OperationalError

from cinema.core.exceptions import NotFoundError, PersistenceError
from cinema.services.transaction import run_in_transaction


@pytest.mark.asyncio
async def test_commits_and_returns_action_result():
    session = DummySession()

    async def action(db):
        return "done"

    result = await run_in_transaction(session, action, operation="test")

    assert result == "done"
    assert session.commits == 1
    assert session.rollbacks == 0


@pytest.mark.asyncio
async def test_database_error_rolls_back_and_becomes_persistence_error():
    session = DummySession()

    async def action(db):
        raise IntegrityError("INSERT", {}, Exception("duplicate key"))

    with pytest.raises(PersistenceError) as exc_info:
        await run_in_transaction(session, action, operation="test")

    assert session.commits == 0
    assert session.rollbacks == 1
    # Internal driver text never reaches the client-facing message
    assert "duplicate key" not in exc_info.value.detail
    assert isinstance(exc_info.value.__cause__, IntegrityError)


@pytest.mark.asyncio
async def test_failed_commit_rolls_back():
    class FailingCommitSession(DummySession):
        async def commit(self):
            raise OperationalError("COMMIT", {}, Exception("connection lost"))

    session = FailingCommitSession()

    async def action(db):
        return None

    with pytest.raises(PersistenceError):
        await run_in_transaction(session, action, operation="test")

    assert session.rollbacks == 1


@pytest.mark.asyncio
async def test_domain_error_is_reraised_unchanged_after_rollback():
    session = DummySession()

    async def action(db):
        raise NotFoundError("Movie with ID x not found")

    with pytest.raises(NotFoundError):
        await run_in_transaction(session, action, operation="test")

    assert session.rollbacks == 1
    assert session.commits == 0


@pytest.mark.asyncio
async def test_cancellation_rolls_back():
    session = DummySession()

    async def action(db):
        raise asyncio.CancelledError()

    with pytest.raises(asyncio.CancelledError):
        await run_in_transaction(session, action, operation="test")

    assert session.rollbacks == 1
    assert session.commits == 0
