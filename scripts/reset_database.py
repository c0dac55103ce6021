import asyncio
import logging
import sys
from pathlib import Path

from sqlmodel import SQLModel

sys.path.insert(0, str(Path(__file__).parent.parent))
import cinema.models  # noqa: F401
from cinema.core.db import close_db, engine_from_settings
from cinema.core.settings import get_settings

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("reset_database")


async def drop_database(engine) -> None:
    """Drop the movies, actors and movie_actors tables."""
    async with engine.begin() as conn:
        logger.info("Dropping tables: %s", ", ".join(SQLModel.metadata.tables))
        await conn.run_sync(SQLModel.metadata.drop_all)


async def main() -> None:
    engine = engine_from_settings(get_settings())
    try:
        await drop_database(engine)
        logger.info("Database tables dropped successfully.")
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
