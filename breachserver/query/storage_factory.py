"""
Storage factory for creating and managing storage backend instances.
"""

import logging
import os
from typing import Callable, Generator

from sqlalchemy import create_engine
from sqlmodel import Session

from ..storage.backends.postgres import PostgresStorage
from ..storage.backends.sqlite import SQLiteStorage
from ..storage.interfaces import StorageInterface

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./breachscan.db"

# Singleton engine and db_url
_engine = None
_db_url = None


def get_engine():
    """
    Returns a singleton instance of the SQLAlchemy engine and db_url.
    """
    global _engine, _db_url
    if _engine is None:
        _db_url = os.getenv("DATABASE_URL")
        if not _db_url:
            logger.info("DATABASE_URL not set, defaulting to %s", DEFAULT_DATABASE_URL)
            _db_url = DEFAULT_DATABASE_URL

        connect_args = {}
        if _db_url.startswith("sqlite://"):
            connect_args["check_same_thread"] = False  # Needed for SQLite with FastAPI

        _engine = create_engine(_db_url, connect_args=connect_args)
    return _engine, _db_url


def _sqlite_path(db_url: str) -> str:
    db_path = db_url.replace("sqlite:///", "", 1)
    if not db_path:
        db_path = "./breachscan.db"
    return db_path


def open_storage() -> tuple[StorageInterface, Callable[[], None]]:
    """
    Return (storage, close_fn) outside a request, e.g. for a background ingest.
    Caller must call close_fn when done.
    """
    engine, db_url = get_engine()
    if db_url.startswith("postgresql://"):
        session = Session(engine)
        return PostgresStorage(session), session.close
    if db_url.startswith("sqlite://"):
        storage = SQLiteStorage(_sqlite_path(db_url), check_same_thread=False)
        return storage, storage.close
    raise ValueError("Unsupported database URL scheme.")


def get_storage() -> Generator[StorageInterface, None, None]:
    """
    FastAPI dependency that provides a storage instance with a request-scoped session.
    """
    engine, db_url = get_engine()

    if db_url.startswith("postgresql://"):
        session = Session(engine)
        try:
            yield PostgresStorage(session)
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
    elif db_url.startswith("sqlite://"):
        # SQLiteStorage manages its own engine/session; it is used from the
        # event loop thread while the dependency runs in the threadpool.
        sqlite_storage: StorageInterface = SQLiteStorage(_sqlite_path(db_url), check_same_thread=False)
        try:
            yield sqlite_storage
        finally:
            sqlite_storage.close()
    else:
        raise ValueError("Unsupported database URL scheme.")


def close_storage():
    """
    Closes the engine connection.
    """
    global _engine, _db_url
    if _engine:
        _engine.dispose()
        _engine = None
        _db_url = None
