from fastapi import APIRouter

from .endpoints.actors import router as actors_router
from .endpoints.movies import router as movies_router

api_router = APIRouter(prefix="/api")
api_router.include_router(movies_router, prefix="/movies", tags=["Movies"])
api_router.include_router(actors_router, prefix="/actors", tags=["Actors"])
