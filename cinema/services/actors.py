import uuid

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from cinema.core.exceptions import NotFoundError
from cinema.core.logging import get_structured_logger
from cinema.crud.actor import actor as actor_crud
from cinema.models.actor import Actor, ActorCreate, ActorUpdate
from cinema.models.movie_actor import MovieActor
from cinema.services.transaction import run_in_transaction

logger = get_structured_logger(__name__)


async def get_actor(db: AsyncSession, actor_id: uuid.UUID) -> Actor:
    actor_obj = await actor_crud.get_with_movies(db, actor_id)
    if actor_obj is None:
        raise NotFoundError(f"Actor with ID {actor_id} not found")
    return actor_obj


async def create_actor(db: AsyncSession, payload: ActorCreate) -> Actor:
    async def action(session: AsyncSession) -> uuid.UUID:
        actor_obj = await actor_crud.create(session, obj_in=payload)
        return actor_obj.id

    actor_id = await run_in_transaction(db, action, operation="create_actor")
    logger.info("Actor created", actor_id=str(actor_id))
    return await get_actor(db, actor_id)


async def update_actor(
    db: AsyncSession, actor_id: uuid.UUID, payload: ActorUpdate
) -> Actor:
    if not await actor_crud.exists(db, actor_id):
        raise NotFoundError(f"Actor with ID {actor_id} not found")

    async def action(session: AsyncSession) -> None:
        if not await actor_crud.update_coalesce(session, id=actor_id, obj_in=payload):
            raise NotFoundError(f"Actor with ID {actor_id} not found")

    await run_in_transaction(db, action, operation="update_actor")
    logger.info("Actor updated", actor_id=str(actor_id))
    return await get_actor(db, actor_id)


async def delete_actor(db: AsyncSession, actor_id: uuid.UUID) -> None:
    """Delete the actor and unlink it from every movie."""
    if not await actor_crud.exists(db, actor_id):
        raise NotFoundError(f"Actor with ID {actor_id} not found")

    async def action(session: AsyncSession) -> None:
        table = MovieActor.__table__
        await session.execute(delete(table).where(table.c.actor_id == actor_id))
        if not await actor_crud.remove(session, id=actor_id):
            raise NotFoundError(f"Actor with ID {actor_id} not found")

    await run_in_transaction(db, action, operation="delete_actor")
    logger.info("Actor deleted", actor_id=str(actor_id))


async def list_actors(
    db: AsyncSession, *, limit: int, offset: int, with_movies: bool = False
) -> tuple[list[Actor], int]:
    return await actor_crud.get_multi_by_name(
        db, offset=offset, limit=limit, with_movies=with_movies
    )
