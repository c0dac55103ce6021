from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from cinema.core.exceptions import PersistenceError
from cinema.core.logging import get_structured_logger

logger = get_structured_logger(__name__)

T = TypeVar("T")


async def run_in_transaction(
    db: AsyncSession,
    action: Callable[[AsyncSession], Awaitable[T]],
    *,
    operation: str,
) -> T:
    """Run ``action`` and commit, or roll back everything it wrote.

    Storage failures surface as :class:`PersistenceError`; any other error,
    including task cancellation, is re-raised after the rollback.
    """
    try:
        result = await action(db)
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.error(
            "Transaction rolled back after database error",
            operation=operation,
            error=str(exc),
        )
        raise PersistenceError() from exc
    except BaseException:
        await db.rollback()
        logger.warning("Transaction rolled back", operation=operation)
        raise
    return result
