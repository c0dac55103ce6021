import asyncio
import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))
from cinema.core.db import close_db, create_tables, engine_from_settings
from cinema.core.settings import get_settings

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_database")


async def main() -> None:
    engine = engine_from_settings(get_settings())
    try:
        await create_tables(engine)
        logger.info("Tables created (existing tables were left untouched).")
    finally:
        await close_db(engine)


if __name__ == "__main__":
    asyncio.run(main())
