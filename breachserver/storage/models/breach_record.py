"""
One row per parsed credential line. Duplicates across uploads are kept.
"""

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class BreachRecordRow(SQLModel, table=True):
    """One credential exposure; the secret is stored only as its SHA-256 hex digest."""

    __tablename__ = "breach_records"

    id: str = Field(default_factory=lambda: uuid.uuid4().hex, primary_key=True)
    username: str = Field(index=True)
    domain: str = Field(index=True)
    subdomain: Optional[str] = Field(default=None)
    password_hash: str = Field()
    source_file: str = Field()
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
