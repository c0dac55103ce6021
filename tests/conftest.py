import os
import uuid
from datetime import UTC, date, datetime, timedelta

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

import cinema.models  # noqa: E402, F401
from cinema.core.db import build_engine, build_session_maker  # noqa: E402
from cinema.core.settings import Settings  # noqa: E402
from cinema.main import create_app  # noqa: E402
from cinema.models.actor import Actor, Gender  # noqa: E402
from cinema.models.movie import Movie  # noqa: E402

TEST_SECRET = "test-secret-key"


def make_token(role: str | None = "admin", secret: str = TEST_SECRET, **claims) -> str:
    payload = {"sub": "tester", "exp": datetime.now(UTC) + timedelta(minutes=5)}
    if role is not None:
        payload["role"] = role
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def auth_header(role: str | None = "admin", **kwargs) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(role, **kwargs)}"}


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        DATABASE_URL="sqlite+aiosqlite:///:memory:",
        SECRET_KEY=TEST_SECRET,
        MAX_PAGE_SIZE=50,
    )


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory database per test; one shared connection."""
    async_engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with async_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_engine
    await async_engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def app(test_settings, engine, session_maker):
    """App wired to the per-test database instead of the one it built."""
    application = create_app(test_settings)
    await application.state.engine.dispose()
    application.state.engine = engine
    application.state.session_maker = session_maker
    return application


@pytest_asyncio.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac


async def seed_movie(
    db,
    title: str,
    *,
    rating: float = 5.0,
    release_date: date = date(2000, 1, 1),
    description: str = "",
) -> uuid.UUID:
    movie_obj = Movie(
        title=title,
        description=description,
        release_date=release_date,
        rating=rating,
    )
    db.add(movie_obj)
    await db.commit()
    return movie_obj.id


async def seed_actor(
    db,
    name: str,
    *,
    gender: Gender = Gender.OTHER,
    date_of_birth: date = date(1980, 1, 1),
) -> uuid.UUID:
    actor_obj = Actor(name=name, gender=gender, date_of_birth=date_of_birth)
    db.add(actor_obj)
    await db.commit()
    return actor_obj.id
