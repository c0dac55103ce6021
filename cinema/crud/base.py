from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import delete, func, literal, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, select


ModelType = TypeVar("ModelType", bound=SQLModel)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    # Payload fields that are not columns of the model table
    non_column_fields: frozenset[str] = frozenset()

    def __init__(self, model: type[ModelType]):
        self.model = model

    async def get(
        self, db: AsyncSession, id: Any, *, refresh: bool = False
    ) -> ModelType | None:
        statement = select(self.model).where(self.model.id == id)
        if refresh:
            statement = statement.execution_options(populate_existing=True)
        result = await db.execute(statement)
        return result.scalars().first()

    async def exists(self, db: AsyncSession, id: Any) -> bool:
        statement = select(self.model.id).where(self.model.id == id)
        result = await db.execute(statement)
        return result.scalars().first() is not None

    async def count(self, db: AsyncSession) -> int:
        result = await db.execute(select(func.count()).select_from(self.model))
        return result.scalar() or 0

    async def get_multi(
        self, db: AsyncSession, *, offset: int = 0, limit: int = 100
    ) -> list[ModelType]:
        statement = (
            select(self.model).order_by(self.model.id).offset(offset).limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def create(
        self, db: AsyncSession, *, obj_in: CreateSchemaType, commit: bool = False
    ) -> ModelType:
        obj_in_data = obj_in.model_dump(exclude=set(self.non_column_fields))
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        if commit:
            await db.commit()
            await db.refresh(db_obj)
        else:
            await db.flush()
        return db_obj

    async def update_coalesce(
        self, db: AsyncSession, *, id: Any, obj_in: UpdateSchemaType
    ) -> bool:
        """Issue ``UPDATE .. SET col = COALESCE(:value, col)`` for every column.

        A field left out of (or null in) the payload binds NULL, so the stored
        value wins. Returns whether a row matched.
        """
        table = self.model.__table__
        values = {
            name: func.coalesce(literal(value, table.c[name].type), table.c[name])
            for name, value in obj_in.model_dump(
                exclude=set(self.non_column_fields)
            ).items()
            if name in table.c
        }
        if "updated_at" in table.c:
            values["updated_at"] = func.now()

        statement = update(table).where(table.c.id == id).values(**values)
        result = await db.execute(statement)
        return result.rowcount > 0

    async def remove(self, db: AsyncSession, *, id: Any) -> bool:
        table = self.model.__table__
        result = await db.execute(delete(table).where(table.c.id == id))
        return result.rowcount > 0
