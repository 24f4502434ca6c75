"""Database module."""

from src.db.database import (
    async_session_maker,
    engine,
    get_db,
    init_db,
)
from src.db.errors import ConflictError, NotFoundError, RepositoryError, StorageError

__all__ = [
    "async_session_maker",
    "engine",
    "get_db",
    "init_db",
    "RepositoryError",
    "NotFoundError",
    "ConflictError",
    "StorageError",
]
