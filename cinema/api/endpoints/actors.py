import uuid

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from cinema.api.deps import AdminToken, Page
from cinema.core.db import get_session
from cinema.models.actor import ActorCreate, ActorRead, ActorUpdate
from cinema.models.api_models import ActorWithMovies
from cinema.models.movie import MovieRead
from cinema.services import actors as actor_service
from cinema.services import movies as movie_service
from cinema.utils.pagination import PaginatedResponse, create_pagination_info

router = APIRouter()


@router.get("", response_model=PaginatedResponse[ActorRead])
async def get_actors(page: Page, db: AsyncSession = Depends(get_session)):
    actors, total_items = await actor_service.list_actors(
        db, limit=page.limit, offset=page.offset
    )
    return PaginatedResponse(
        data=[ActorRead.model_validate(actor_obj) for actor_obj in actors],
        pagination=create_pagination_info(page.limit, page.offset, total_items),
    )


@router.get("/with-movies", response_model=PaginatedResponse[ActorWithMovies])
async def get_actors_with_movies(page: Page, db: AsyncSession = Depends(get_session)):
    """Actors ordered by name, each with the movies they play in."""
    actors, total_items = await actor_service.list_actors(
        db, limit=page.limit, offset=page.offset, with_movies=True
    )
    return PaginatedResponse(
        data=[ActorWithMovies.model_validate(actor_obj) for actor_obj in actors],
        pagination=create_pagination_info(page.limit, page.offset, total_items),
    )


@router.post("", response_model=ActorWithMovies, status_code=status.HTTP_201_CREATED)
async def create_actor(
    payload: ActorCreate,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    actor_obj = await actor_service.create_actor(db, payload)
    return ActorWithMovies.model_validate(actor_obj)


@router.get("/{actor_id}", response_model=ActorWithMovies)
async def get_actor(actor_id: uuid.UUID, db: AsyncSession = Depends(get_session)):
    actor_obj = await actor_service.get_actor(db, actor_id)
    return ActorWithMovies.model_validate(actor_obj)


@router.get("/{actor_id}/movies", response_model=PaginatedResponse[MovieRead])
async def get_actor_movies(
    actor_id: uuid.UUID, page: Page, db: AsyncSession = Depends(get_session)
):
    movies, total_items = await movie_service.list_movies_by_actor(
        db, actor_id, limit=page.limit, offset=page.offset
    )
    return PaginatedResponse(
        data=[MovieRead.model_validate(movie_obj) for movie_obj in movies],
        pagination=create_pagination_info(page.limit, page.offset, total_items),
    )


@router.put("/{actor_id}", response_model=ActorWithMovies)
async def update_actor(
    actor_id: uuid.UUID,
    payload: ActorUpdate,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    actor_obj = await actor_service.update_actor(db, actor_id, payload)
    return ActorWithMovies.model_validate(actor_obj)


@router.delete("/{actor_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_actor(
    actor_id: uuid.UUID,
    _token: AdminToken,
    db: AsyncSession = Depends(get_session),
):
    await actor_service.delete_actor(db, actor_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
