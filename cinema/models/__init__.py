from .actor import Actor, ActorCreate, ActorRead, ActorUpdate, Gender
from .api_models import (
    ActorIdsPayload,
    ActorWithMovies,
    MovieActorsResponse,
    MovieSortField,
    MovieWithActors,
    SortOrder,
)
from .movie import Movie, MovieCreate, MovieRead, MovieUpdate
from .movie_actor import MovieActor

__all__ = [
    "Actor",
    "ActorCreate",
    "ActorIdsPayload",
    "ActorRead",
    "ActorUpdate",
    "ActorWithMovies",
    "Gender",
    "Movie",
    "MovieActor",
    "MovieActorsResponse",
    "MovieCreate",
    "MovieRead",
    "MovieSortField",
    "MovieUpdate",
    "MovieWithActors",
    "SortOrder",
]
