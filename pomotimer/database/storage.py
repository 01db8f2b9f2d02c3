"""Best-effort key/value storage on top of the ``kv_store`` table.

The timer core only ever needs three operations::

    storage = KeyValueStorage()
    storage.set("pomodoro-state", '{"mode": "focus"}')
    storage.get("pomodoro-state")
    storage.remove("pomodoro-state")

Writes never raise: a failing database leaves the in-memory state of
the engine authoritative, so errors are logged and dropped here.
"""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError

from ..constants import STORAGE_KEYS
from .db import get_session
from .models import StoredValue

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """String blobs keyed by name, persisted through SQLAlchemy."""

    def get(self, key: str) -> str | None:
        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                return record.value if record is not None else None
        except SQLAlchemyError:
            logger.warning("Could not read %r from storage", key, exc_info=True)
            return None

    def set(self, key: str, value: str) -> None:
        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                if record is None:
                    db.add(StoredValue(key=key, value=value))
                else:
                    record.value = value
                    record.updated_at = datetime.now()
        except SQLAlchemyError:
            logger.warning("Could not write %r to storage", key, exc_info=True)

    def remove(self, key: str) -> None:
        try:
            with get_session() as db:
                record = db.get(StoredValue, key)
                if record is not None:
                    db.delete(record)
        except SQLAlchemyError:
            logger.warning("Could not remove %r from storage", key, exc_info=True)


def reset_storage(storage: KeyValueStorage) -> None:
    """Wipe every key the app owns.  Next start-up uses defaults."""
    for key in STORAGE_KEYS.values():
        storage.remove(key)
