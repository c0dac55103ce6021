import uuid

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import func, select

from cinema.crud.base import CRUDBase
from cinema.models.actor import Actor
from cinema.models.api_models import MovieSortField, SortOrder
from cinema.models.movie import Movie, MovieCreate, MovieUpdate
from cinema.models.movie_actor import MovieActor
from cinema.utils.helpers import unique_ids

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_SORT_COLUMNS = {
    MovieSortField.TITLE: Movie.title,
    MovieSortField.RELEASE_DATE: Movie.release_date,
    MovieSortField.RATING: Movie.rating,
}


class CRUDMovie(CRUDBase[Movie, MovieCreate, MovieUpdate]):
    non_column_fields = frozenset({"actor_ids"})

    async def get_with_actors(
        self, db: AsyncSession, movie_id: uuid.UUID
    ) -> Movie | None:
        statement = (
            select(Movie)
            .options(selectinload(Movie.actors))
            .where(Movie.id == movie_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_multi_sorted(
        self,
        db: AsyncSession,
        *,
        sort_by: MovieSortField,
        order: SortOrder,
        offset: int,
        limit: int,
    ) -> tuple[list[Movie], int]:
        column = _SORT_COLUMNS[sort_by]
        ordering = column.asc() if order is SortOrder.ASC else column.desc()

        statement = (
            select(Movie).order_by(ordering, Movie.id).offset(offset).limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all()), await self.count(db)

    async def search(
        self,
        db: AsyncSession,
        *,
        title: str | None = None,
        actor_name: str | None = None,
        offset: int,
        limit: int,
    ) -> tuple[list[Movie], int]:
        filters = []
        if title:
            filters.append(Movie.title.icontains(title, autoescape=True))
        if actor_name:
            actor_subquery = (
                select(MovieActor.movie_id)
                .join(Actor, Actor.id == MovieActor.actor_id)
                .where(Actor.name.icontains(actor_name, autoescape=True))
            )
            filters.append(Movie.id.in_(actor_subquery))

        count_query = select(func.count(Movie.id)).where(*filters)
        count_result = await db.execute(count_query)
        total_items = count_result.scalar() or 0

        statement = (
            select(Movie)
            .where(*filters)
            .order_by(Movie.title, Movie.id)
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all()), total_items

    async def get_multi_by_actor(
        self, db: AsyncSession, *, actor_id: uuid.UUID, offset: int, limit: int
    ) -> tuple[list[Movie], int]:
        membership = MovieActor.actor_id == actor_id

        count_query = select(func.count(MovieActor.movie_id)).where(membership)
        count_result = await db.execute(count_query)
        total_items = count_result.scalar() or 0

        statement = (
            select(Movie)
            .join(MovieActor, MovieActor.movie_id == Movie.id)
            .where(membership)
            .order_by(Movie.release_date.desc(), Movie.id)
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all()), total_items

    # Junction table statements. None of these commit; callers own the transaction.

    async def get_actor_ids(
        self, db: AsyncSession, movie_id: uuid.UUID
    ) -> set[uuid.UUID]:
        statement = select(MovieActor.actor_id).where(MovieActor.movie_id == movie_id)
        result = await db.execute(statement)
        return set(result.scalars().all())

    async def add_actor_relations(
        self, db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
    ) -> list[uuid.UUID]:
        """Insert the missing ``(movie_id, actor_id)`` pairs, ignoring existing ones.

        Returns the actor IDs that were newly linked.
        """
        ordered_actor_ids = unique_ids(actor_ids)
        if not ordered_actor_ids:
            return []

        existing_actor_ids = await self.get_actor_ids(db, movie_id)
        new_actor_ids = [
            actor_id
            for actor_id in ordered_actor_ids
            if actor_id not in existing_actor_ids
        ]
        if not new_actor_ids:
            return []

        values = [
            {"movie_id": movie_id, "actor_id": actor_id} for actor_id in new_actor_ids
        ]
        insert = _INSERT_BY_DIALECT[db.get_bind().dialect.name]
        stmt = insert(MovieActor.__table__).values(values)
        # A concurrent writer may have linked the same pair since the read above
        stmt = stmt.on_conflict_do_nothing(index_elements=["movie_id", "actor_id"])
        await db.execute(stmt)
        return new_actor_ids

    async def remove_actor_relations(
        self, db: AsyncSession, movie_id: uuid.UUID
    ) -> int:
        stmt = delete(MovieActor.__table__).where(
            MovieActor.__table__.c.movie_id == movie_id
        )
        result = await db.execute(stmt)
        return result.rowcount

    async def remove_selected_actor_relations(
        self, db: AsyncSession, movie_id: uuid.UUID, actor_ids: list[uuid.UUID]
    ) -> int:
        ordered_actor_ids = unique_ids(actor_ids)
        if not ordered_actor_ids:
            return 0

        table = MovieActor.__table__
        stmt = delete(table).where(
            table.c.movie_id == movie_id,
            table.c.actor_id.in_(ordered_actor_ids),
        )
        result = await db.execute(stmt)
        return result.rowcount


# Singleton instance
movie = CRUDMovie(Movie)
