"""
SQLite implementation of the storage interface.
"""

from sqlmodel import Session, SQLModel, create_engine

from .base import SQLModelStorage


class SQLiteStorage(SQLModelStorage):
    """
    SQLite storage that owns its engine and session.
    """

    def __init__(self, db_path: str, check_same_thread: bool = True):
        # For in-memory databases used with TestClient, set check_same_thread=False
        connect_args = {"check_same_thread": check_same_thread}
        self.engine = create_engine(f"sqlite:///{db_path}", connect_args=connect_args)
        SQLModel.metadata.create_all(self.engine)
        super().__init__(Session(self.engine))

    def close(self) -> None:
        """
        Close the session and dispose of the engine's connections.
        """
        super().close()
        self.engine.dispose()
