import uuid

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import select

from cinema.crud.base import CRUDBase
from cinema.models.actor import Actor, ActorCreate, ActorUpdate
from cinema.utils.helpers import unique_ids


class CRUDActor(CRUDBase[Actor, ActorCreate, ActorUpdate]):
    async def find_missing_ids(
        self, db: AsyncSession, actor_ids: list[uuid.UUID]
    ) -> list[uuid.UUID]:
        """Return the IDs from ``actor_ids`` with no matching actor row."""
        ordered_actor_ids = unique_ids(actor_ids)
        if not ordered_actor_ids:
            return []

        statement = select(Actor.id).where(Actor.id.in_(ordered_actor_ids))
        result = await db.execute(statement)
        found = set(result.scalars().all())
        return [actor_id for actor_id in ordered_actor_ids if actor_id not in found]

    async def get_with_movies(
        self, db: AsyncSession, actor_id: uuid.UUID
    ) -> Actor | None:
        statement = (
            select(Actor)
            .options(selectinload(Actor.movies))
            .where(Actor.id == actor_id)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(statement)
        return result.scalars().first()

    async def get_multi_by_name(
        self, db: AsyncSession, *, offset: int, limit: int, with_movies: bool = False
    ) -> tuple[list[Actor], int]:
        statement = (
            select(Actor).order_by(Actor.name, Actor.id).offset(offset).limit(limit)
        )
        if with_movies:
            statement = statement.options(selectinload(Actor.movies)).execution_options(
                populate_existing=True
            )
        result = await db.execute(statement)
        return list(result.scalars().all()), await self.count(db)


# Singleton instance
actor = CRUDActor(Actor)
