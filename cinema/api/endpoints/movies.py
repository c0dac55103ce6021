import uuid

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cinema.api.deps import AdminToken, Page
from cinema.core.db import get_session
from cinema.core.exceptions import ValidationFailedError
from cinema.models.api_models import (
    ActorIdsPayload,
    MovieActorsResponse,
    MovieWithActors,
)
from cinema.models.movie import MovieCreate, MovieRead, MovieUpdate
from cinema.services import movies as movie_service
from cinema.services import relations as relation_service
from cinema.utils.pagination import PaginatedResponse, create_pagination_info

router = APIRouter()


def _movie_page(movies, total_items: int, page) -> PaginatedResponse[MovieRead]:
    return PaginatedResponse(
        data=[MovieRead.model_validate(movie_obj) for movie_obj in movies],
        pagination=create_pagination_info(page.limit, page.offset, total_items),
    )


def _relations_response(
    movie_id: uuid.UUID, actor_ids: set[uuid.UUID]
) -> MovieActorsResponse:
    return MovieActorsResponse(movie_id=movie_id, actor_ids=sorted(actor_ids, key=str))


@router.get("", response_model=PaginatedResponse[MovieRead])
async def get_movies(
    page: Page,
    sort_by: str | None = Query(
        None,
        alias="sortBy",
        description="title, release_date or rating; anything else sorts by rating",
    ),
    order: str | None = Query(
        None, description="asc or desc; anything else sorts descending"
    ),
    db: AsyncSession = Depends(get_session),
):
    """List movies, best-rated first unless another sort is requested."""
    movies, total_items = await movie_service.list_movies(
        db, sort_by=sort_by, order=order, limit=page.limit, offset=page.offset
    )
    return _movie_page(movies, total_items, page)


@router.get("/search", response_model=PaginatedResponse[MovieRead])
async def search_movies(
    page: Page,
    title: str | None = Query(None, description="Fragment of the movie title"),
    actor: str | None = Query(None, description="Fragment of an actor's name"),
    db: AsyncSession = Depends(get_session),
):
    """Case-insensitive substring search over titles and cast names."""
    if not (title and title.strip()) and not (actor and actor.strip()):
        raise ValidationFailedError.for_field(
            "query", "Provide a title or actor fragment to search for"
        )
    movies, total_items = await movie_service.search_movies(
        db, title=title, actor_name=actor, limit=page.limit, offset=page.offset
    )
    return _movie_page(movies, total_items, page)


@router.post("", response_model=MovieWithActors, status_code=status.HTTP_201_CREATED)
async def create_movie(
    payload: MovieCreate,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    movie_obj = await movie_service.create_movie(db, payload)
    return MovieWithActors.model_validate(movie_obj)


@router.get("/{movie_id}", response_model=MovieWithActors)
async def get_movie(movie_id: uuid.UUID, db: AsyncSession = Depends(get_session)):
    movie_obj = await movie_service.get_movie(db, movie_id)
    return MovieWithActors.model_validate(movie_obj)


@router.put("/{movie_id}", response_model=MovieWithActors)
async def update_movie(
    movie_id: uuid.UUID,
    payload: MovieUpdate,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    """Partial update: fields left out keep their stored values."""
    movie_obj = await movie_service.update_movie(db, movie_id, payload)
    return MovieWithActors.model_validate(movie_obj)


@router.delete("/{movie_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_movie(
    movie_id: uuid.UUID,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    await movie_service.delete_movie(db, movie_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Relation endpoints
@router.post("/{movie_id}/actors", response_model=MovieActorsResponse)
async def add_movie_actors(
    movie_id: uuid.UUID,
    payload: ActorIdsPayload,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    linked = await relation_service.add_relations(db, movie_id, payload.actor_ids)
    return _relations_response(movie_id, linked)


@router.put("/{movie_id}/actors", response_model=MovieActorsResponse)
async def replace_movie_actors(
    movie_id: uuid.UUID,
    payload: ActorIdsPayload,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    linked = await relation_service.replace_relations(db, movie_id, payload.actor_ids)
    return _relations_response(movie_id, linked)


@router.delete("/{movie_id}/actors", response_model=MovieActorsResponse)
async def remove_movie_actors(
    movie_id: uuid.UUID,
    payload: ActorIdsPayload,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    linked = await relation_service.remove_selected_relations(
        db, movie_id, payload.actor_ids
    )
    return _relations_response(movie_id, linked)
