from collections.abc import AsyncGenerator

from fastapi import Request
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel

from .settings import Settings


def _as_async_dsn(db_url: str) -> str:
    """Normalize a database DSN so async SQLAlchemy can use asyncpg/aiosqlite."""
    normalized = db_url
    if normalized.startswith("postgres://"):
        normalized = normalized.replace("postgres://", "postgresql://", 1)
    if normalized.startswith("postgresql://"):
        normalized = normalized.replace("postgresql://", "postgresql+asyncpg://", 1)
    if normalized.startswith("sqlite://"):
        normalized = normalized.replace("sqlite://", "sqlite+aiosqlite://", 1)
    return normalized


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(db_url: str, *, echo: bool = False, **kwargs) -> AsyncEngine:
    async_engine = create_async_engine(
        _as_async_dsn(db_url), echo=echo, future=True, **kwargs
    )
    if async_engine.dialect.name == "sqlite":
        event.listen(async_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return async_engine


def build_session_maker(async_engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(async_engine, class_=AsyncSession, expire_on_commit=False)


def engine_from_settings(settings: Settings) -> AsyncEngine:
    return build_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Yield a session from the maker the running app was created with."""
    async with request.app.state.session_maker() as session:
        yield session


async def create_tables(async_engine: AsyncEngine) -> None:
    import cinema.models  # noqa: F401

    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)


async def close_db(async_engine: AsyncEngine) -> None:
    await async_engine.dispose()
