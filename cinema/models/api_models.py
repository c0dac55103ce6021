import uuid
from enum import Enum

from pydantic import BaseModel, Field

from .actor import ActorRead
from .movie import MovieRead


class MovieSortField(str, Enum):
    """Columns a movie listing may be ordered by."""

    TITLE = "title"
    RELEASE_DATE = "release_date"
    RATING = "rating"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class MovieWithActors(MovieRead):
    actors: list[ActorRead] = Field(default_factory=list, description="Cast")


class ActorWithMovies(ActorRead):
    movies: list[MovieRead] = Field(
        default_factory=list, description="Movies the actor plays in"
    )


class ActorIdsPayload(BaseModel):
    """Body of the relation-sync endpoints."""

    actor_ids: list[uuid.UUID] = Field(
        ..., min_length=1, description="Actor IDs to add, replace with or remove"
    )


class MovieActorsResponse(BaseModel):
    movie_id: uuid.UUID
    actor_ids: list[uuid.UUID] = Field(
        description="Actor IDs linked to the movie after the operation"
    )
