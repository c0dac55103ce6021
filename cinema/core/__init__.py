from .db import (
    build_engine,
    build_session_maker,
    close_db,
    create_tables,
    engine_from_settings,
    get_session,
)
from .settings import Settings, get_settings

__all__ = [
    "Settings",
    "build_engine",
    "build_session_maker",
    "close_db",
    "create_tables",
    "engine_from_settings",
    "get_session",
    "get_settings",
]
