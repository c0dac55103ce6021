from contextlib import asynccontextmanager

from fastapi import FastAPI

from cinema import __version__ as app_version
from cinema.api import api_router
from cinema.core.db import (
    build_session_maker,
    close_db,
    create_tables,
    engine_from_settings,
)
from cinema.core.exceptions import register_exception_handlers
from cinema.core.logging import get_structured_logger, setup_logging
from cinema.core.middleware import CorrelationIdMiddleware
from cinema.core.settings import Settings, get_settings

logger = get_structured_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting Cinema catalog service...")
    try:
        if app.state.settings.CREATE_TABLES_ON_STARTUP:
            await create_tables(app.state.engine)
            logger.info("Database tables ensured")

        yield

    finally:
        logger.info("Shutting down Cinema catalog service...")
        await close_db(app.state.engine)
        logger.info("Database engine disposed")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(level=settings.LOG_LEVEL, use_json=settings.LOG_JSON)

    app = FastAPI(
        title="Cinema Catalog",
        description="Movie and actor catalog API with admin-gated mutations",
        version=app_version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.engine = engine_from_settings(settings)
    app.state.session_maker = build_session_maker(app.state.engine)

    app.add_middleware(CorrelationIdMiddleware)
    register_exception_handlers(app)
    app.include_router(api_router)

    @app.get("/")
    def read_root():
        return {
            "name": "Cinema Catalog",
            "version": app_version,
            "description": "Movies, actors and the cast relation between them",
        }

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
