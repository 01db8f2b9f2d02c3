"""Database package."""

from .db import configure_engine, get_session, init_db, open_database
from .models import StoredValue
from .storage import KeyValueStorage, reset_storage

__all__ = [
    "configure_engine",
    "get_session",
    "init_db",
    "open_database",
    "StoredValue",
    "KeyValueStorage",
    "reset_storage",
]
