"""Database package: engine, session factory, init_db(), reset_db(), get_session().

Sessions keep attribute values after commit, so repositories can return rows
that callers read after the session is closed.
"""

import threading
from contextlib import contextmanager
from typing import Generator

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import Session, sessionmaker

from rh_notifier.config import DATABASE_URL
from rh_notifier.db.base import Base

# Registers every table on Base.metadata
from rh_notifier.db.models import Batch, Counter, Notification, Product, User  # noqa: F401

_lock = threading.Lock()
_engine: Engine | None = None
_session_factory: sessionmaker | None = None


def _sqlite_pragmas(dbapi_connection, _record) -> None:
    # SQLite leaves FK enforcement (and ON DELETE CASCADE) off per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    # API handlers run in a thread pool
    sep = "&" if "?" in url else "?"
    engine = create_engine(f"{url}{sep}check_same_thread=False")
    event.listen(engine, "connect", _sqlite_pragmas)
    return engine


def init_db() -> None:
    """Create the engine and any missing tables. Safe to call repeatedly."""
    global _engine, _session_factory
    with _lock:
        if _session_factory is not None:
            return
        _engine = _build_engine(DATABASE_URL)
        Base.metadata.create_all(bind=_engine)
        _session_factory = sessionmaker(bind=_engine, autoflush=False, expire_on_commit=False)


def reset_db() -> None:
    """Drop and recreate all tables (demo seeding and tests)."""
    init_db()
    with _lock:
        Base.metadata.drop_all(bind=_engine)
        Base.metadata.create_all(bind=_engine)


@contextmanager
def get_session() -> Generator[Session, None, None]:
    """Yield a session that commits on success and rolls back on any exception."""
    init_db()
    session = _session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
