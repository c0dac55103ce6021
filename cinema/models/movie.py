import uuid
from datetime import UTC, date, datetime
from typing import TYPE_CHECKING

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from .movie_actor import MovieActor

if TYPE_CHECKING:
    from .actor import Actor

TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 1000


class MovieBase(SQLModel):
    title: str = Field(
        min_length=1, max_length=TITLE_MAX_LENGTH, index=True, description="Movie title"
    )
    description: str = Field(
        default="", max_length=DESCRIPTION_MAX_LENGTH, description="Plot summary"
    )
    release_date: date = Field(index=True, description="Release date")
    rating: float = Field(ge=0, le=10, index=True, description="Rating from 0 to 10")


class Movie(MovieBase, table=True):
    __tablename__ = "movies"

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
        description="Record creation timestamp",
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
        description="Record update timestamp",
    )

    actors: list["Actor"] = Relationship(
        back_populates="movies",
        link_model=MovieActor,
        sa_relationship_kwargs={"order_by": "Actor.name"},
    )


class MovieCreate(MovieBase):
    actor_ids: list[uuid.UUID] = Field(
        default_factory=list, description="Actors to link on creation"
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("title cannot be blank")
        return value


class MovieUpdate(SQLModel):
    """Partial update; omitted or null fields keep their stored value."""

    title: str | None = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    description: str | None = Field(default=None, max_length=DESCRIPTION_MAX_LENGTH)
    release_date: date | None = None
    rating: float | None = Field(default=None, ge=0, le=10)
    # When present, replaces the movie's actor set in the same transaction
    actor_ids: list[uuid.UUID] | None = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("title cannot be blank")
        return value


class MovieRead(MovieBase):
    id: uuid.UUID
