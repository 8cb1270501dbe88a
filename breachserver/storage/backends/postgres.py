"""
PostgreSQL implementation of the storage interface.
"""

from sqlmodel import Session

from .base import SQLModelStorage


class PostgresStorage(SQLModelStorage):
    """
    PostgreSQL storage over a caller-owned session.

    The caller creates the session from the shared engine and closes it;
    ``close()`` here only closes the session, never the engine.
    """

    def __init__(self, session: Session):
        super().__init__(session)
