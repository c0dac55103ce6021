import uuid
from datetime import UTC, date, datetime
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import field_validator
from sqlalchemy import DateTime
from sqlmodel import Field, Relationship, SQLModel

from .movie_actor import MovieActor

if TYPE_CHECKING:
    from .movie import Movie

NAME_MAX_LENGTH = 100


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


def _normalize_gender(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class ActorBase(SQLModel):
    name: str = Field(
        min_length=1, max_length=NAME_MAX_LENGTH, index=True, description="Full name"
    )
    gender: Gender = Field(description="Gender category")
    date_of_birth: date = Field(description="Date of birth")


class Actor(ActorBase, table=True):
    __tablename__ = "actors"

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

    movies: list["Movie"] = Relationship(
        back_populates="actors",
        link_model=MovieActor,
        sa_relationship_kwargs={"order_by": "Movie.release_date.desc()"},
    )


class ActorCreate(ActorBase):
    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value):
        return _normalize_gender(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name cannot be blank")
        return value


class ActorUpdate(SQLModel):
    name: str | None = Field(default=None, min_length=1, max_length=NAME_MAX_LENGTH)
    gender: Gender | None = None
    date_of_birth: date | None = None

    @field_validator("gender", mode="before")
    @classmethod
    def normalize_gender(cls, value):
        return _normalize_gender(value)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("name cannot be blank")
        return value


class ActorRead(ActorBase):
    id: uuid.UUID
