"""Database package."""
from workoutplanner.db.database import (
    Base,
    async_session_maker,
    close_all_engines,
    create_engine_for_url,
    create_session_maker,
    engine,
    get_db,
    init_db,
)

__all__ = [
    "Base",
    "async_session_maker",
    "close_all_engines",
    "create_engine_for_url",
    "create_session_maker",
    "engine",
    "get_db",
    "init_db",
]
