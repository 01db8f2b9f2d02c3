"""Database connection and session management."""

import logging
from pathlib import Path
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker, Session as OrmSession

from .models import Base

logger = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "PomoTimer"
DB_PATH = APP_SUPPORT_DIR / "pomotimer.db"

# ── engine & session factory (created lazily) ─────────────────────────────

_engine = None
_SessionFactory = None


def _get_engine():
    global _engine
    if _engine is None:
        APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
        _engine = create_engine(
            f"sqlite:///{DB_PATH}",
            connect_args={"check_same_thread": False},
            echo=False,
        )
    return _engine


def _get_session_factory():
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_get_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Override the database connection URL.  Used by tests to point at
    an in-memory SQLite database, and by ``--db`` on the command line."""
    global _engine, _SessionFactory
    _SessionFactory = None
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in url:
            # one shared connection, otherwise every session sees an empty DB
            from sqlalchemy.pool import StaticPool
            kwargs["poolclass"] = StaticPool
    _engine = create_engine(url, echo=False, **kwargs)


def init_db() -> None:
    """Create all tables.  Safe to call repeatedly."""
    Base.metadata.create_all(_get_engine())


def open_database(url: str | None = None) -> bool:
    """Configure and initialise the database for the app.

    An unusable location (bad URL, unwritable directory) is not fatal:
    the app falls back to an in-memory database that lasts for the
    process.  Returns False when that fallback was taken.
    """
    try:
        if url:
            configure_engine(url)
        init_db()
        return True
    except (OSError, SQLAlchemyError):
        logger.warning(
            "Database unavailable, progress will not be saved", exc_info=True
        )
        configure_engine("sqlite:///:memory:")
        init_db()
        return False


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    factory = _get_session_factory()
    session: OrmSession = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
