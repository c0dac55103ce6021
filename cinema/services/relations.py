"""Movie to actor relation synchronisation.

Every operation follows the same two phases:

1. read-only validation: the actor list is non-empty, the movie exists and
   every referenced actor exists. A failure here aborts before any write
   statement is issued.
2. a single transaction running the junction-table writes, committed only if
   every statement succeeds.

Relation membership is a set, so input order and duplicates do not matter.
Two writers on the same movie are ordered by commit, not arrival: a replace
whose delete commits after a concurrent add's insert drops the added pair.
"""

import uuid
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from cinema.core.exceptions import NotFoundError, ValidationFailedError
from cinema.core.logging import get_structured_logger
from cinema.crud.actor import actor as actor_crud
from cinema.crud.movie import movie as movie_crud
from cinema.services.transaction import run_in_transaction

logger = get_structured_logger(__name__)

RelationMutation = Callable[[AsyncSession, uuid.UUID, list[uuid.UUID]], Awaitable[None]]


async def ensure_movie_exists(db: AsyncSession, movie_id: uuid.UUID) -> None:
    if not await movie_crud.exists(db, movie_id):
        raise NotFoundError(f"Movie with ID {movie_id} not found")


async def ensure_actors_exist(db: AsyncSession, actor_ids: list[uuid.UUID]) -> None:
    missing = await actor_crud.find_missing_ids(db, actor_ids)
    if missing:
        raise NotFoundError(
            "One or more actors in the list do not exist",
            details=[
                {"field": "actor_ids", "message": f"Actor {actor_id} not found"}
                for actor_id in missing
            ],
        )


def _require_actor_ids(actor_ids: list[uuid.UUID]) -> None:
    if not actor_ids:
        raise ValidationFailedError.for_field(
            "actor_ids", "At least one actor ID is required"
        )


async def _sync(
    db: AsyncSession,
    movie_id: uuid.UUID,
    actor_ids: list[uuid.UUID],
    *,
    operation: str,
    mutation: RelationMutation,
) -> set[uuid.UUID]:
    _require_actor_ids(actor_ids)
    await ensure_movie_exists(db, movie_id)
    await ensure_actors_exist(db, actor_ids)

    async def action(session: AsyncSession) -> set[uuid.UUID]:
        await mutation(session, movie_id, actor_ids)
        return await movie_crud.get_actor_ids(session, movie_id)

    linked = await run_in_transaction(db, action, operation=operation)
    logger.info(
        "Movie relations synchronised",
        operation=operation,
        movie_id=str(movie_id),
        requested=len(actor_ids),
        linked=len(linked),
    )
    return linked


async def _add(db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]):
    await movie_crud.add_actor_relations(db, movie_id, actor_ids)


async def _replace(db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]):
    await movie_crud.remove_actor_relations(db, movie_id)
    await movie_crud.add_actor_relations(db, movie_id, actor_ids)


async def _remove_selected(
    db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
):
    await movie_crud.remove_selected_actor_relations(db, movie_id, actor_ids)


async def add_relations(
    db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
) -> set[uuid.UUID]:
    """Link every listed actor to the movie; pairs already present are kept."""
    return await _sync(
        db, movie_id, actor_ids, operation="add_relations", mutation=_add
    )


async def replace_relations(
    db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
) -> set[uuid.UUID]:
    """Make the movie's actor set exactly ``actor_ids``."""
    return await _sync(
        db, movie_id, actor_ids, operation="replace_relations", mutation=_replace
    )


async def remove_selected_relations(
    db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
) -> set[uuid.UUID]:
    """Unlink the listed actors; actors not currently linked are ignored."""
    return await _sync(
        db,
        movie_id,
        actor_ids,
        operation="remove_selected_relations",
        mutation=_remove_selected,
    )
