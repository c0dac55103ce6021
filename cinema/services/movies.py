import uuid

from sqlalchemy.ext.asyncio import AsyncSession

from cinema.core.exceptions import NotFoundError
from cinema.core.logging import get_structured_logger
from cinema.crud.actor import actor as actor_crud
from cinema.crud.movie import movie as movie_crud
from cinema.models.api_models import MovieSortField, SortOrder
from cinema.models.movie import Movie, MovieCreate, MovieUpdate
from cinema.services.relations import ensure_actors_exist, ensure_movie_exists
from cinema.services.transaction import run_in_transaction

logger = get_structured_logger(__name__)

DEFAULT_SORT_FIELD = MovieSortField.RATING
DEFAULT_SORT_ORDER = SortOrder.DESC


def resolve_sort(
    sort_by: str | None, order: str | None
) -> tuple[MovieSortField, SortOrder]:
    """Map raw query values onto the allow-list; unknown values use the defaults.

    The default listing is best-rated first.
    """
    try:
        field = MovieSortField((sort_by or "").strip().lower())
    except ValueError:
        field = DEFAULT_SORT_FIELD
    try:
        direction = SortOrder((order or "").strip().lower())
    except ValueError:
        direction = DEFAULT_SORT_ORDER
    return field, direction


async def get_movie(db: AsyncSession, movie_id: uuid.UUID) -> Movie:
    movie_obj = await movie_crud.get_with_actors(db, movie_id)
    if movie_obj is None:
        raise NotFoundError(f"Movie with ID {movie_id} not found")
    return movie_obj


async def create_movie(db: AsyncSession, payload: MovieCreate) -> Movie:
    """Insert a movie and link its initial cast in one transaction."""
    await ensure_actors_exist(db, payload.actor_ids)

    async def action(session: AsyncSession) -> uuid.UUID:
        movie_obj = await movie_crud.create(session, obj_in=payload)
        await movie_crud.add_actor_relations(session, movie_obj.id, payload.actor_ids)
        return movie_obj.id

    movie_id = await run_in_transaction(db, action, operation="create_movie")
    logger.info(
        "Movie created", movie_id=str(movie_id), actors=len(payload.actor_ids)
    )
    return await get_movie(db, movie_id)


async def update_movie(
    db: AsyncSession, movie_id: uuid.UUID, payload: MovieUpdate
) -> Movie:
    """Coalesce-update the movie; ``actor_ids``, when given, replaces the cast."""
    await ensure_movie_exists(db, movie_id)
    if payload.actor_ids is not None:
        await ensure_actors_exist(db, payload.actor_ids)

    async def action(session: AsyncSession) -> None:
        if not await movie_crud.update_coalesce(session, id=movie_id, obj_in=payload):
            raise NotFoundError(f"Movie with ID {movie_id} not found")
        if payload.actor_ids is not None:
            await movie_crud.remove_actor_relations(session, movie_id)
            await movie_crud.add_actor_relations(session, movie_id, payload.actor_ids)

    await run_in_transaction(db, action, operation="update_movie")
    logger.info("Movie updated", movie_id=str(movie_id))
    return await get_movie(db, movie_id)


async def delete_movie(db: AsyncSession, movie_id: uuid.UUID) -> None:
    """Delete the movie together with its relation rows."""
    await ensure_movie_exists(db, movie_id)

    async def action(session: AsyncSession) -> None:
        await movie_crud.remove_actor_relations(session, movie_id)
        if not await movie_crud.remove(session, id=movie_id):
            raise NotFoundError(f"Movie with ID {movie_id} not found")

    await run_in_transaction(db, action, operation="delete_movie")
    logger.info("Movie deleted", movie_id=str(movie_id))


async def list_movies(
    db: AsyncSession,
    *,
    sort_by: str | None,
    order: str | None,
    limit: int,
    offset: int,
) -> tuple[list[Movie], int]:
    field, direction = resolve_sort(sort_by, order)
    return await movie_crud.get_multi_sorted(
        db, sort_by=field, order=direction, offset=offset, limit=limit
    )


async def search_movies(
    db: AsyncSession,
    *,
    title: str | None,
    actor_name: str | None,
    limit: int,
    offset: int,
) -> tuple[list[Movie], int]:
    return await movie_crud.search(
        db,
        title=title.strip() if title else None,
        actor_name=actor_name.strip() if actor_name else None,
        offset=offset,
        limit=limit,
    )


async def list_movies_by_actor(
    db: AsyncSession, actor_id: uuid.UUID, *, limit: int, offset: int
) -> tuple[list[Movie], int]:
    if not await actor_crud.exists(db, actor_id):
        raise NotFoundError(f"Actor with ID {actor_id} not found")
    return await movie_crud.get_multi_by_actor(
        db, actor_id=actor_id, offset=offset, limit=limit
    )
