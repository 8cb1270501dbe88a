"""
Processing job model for tracking file ingestion background jobs.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlmodel import Field, SQLModel


class ProcessingJobRow(SQLModel, table=True):
    """
    A single file ingestion job (pending, processing, completed, or failed).
    """

    __tablename__ = "processing_jobs"

    id: str = Field(primary_key=True, description="UUID hex string for the job")
    filename: str = Field(description="Original name of the uploaded file")
    original_size: str = Field(description="Human-readable upload size, e.g. '1.5 KB'")
    status: str = Field(default="pending", index=True, description="pending | processing | completed | failed")
    progress: int = Field(default=0, description="Percentage of lines walked, 0-100")
    records_processed: int = Field(default=0, description="Records handed to the batch writer")
    error_message: Optional[str] = Field(default=None, description="Error message if status is failed")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc), index=True)
    completed_at: Optional[datetime] = Field(default=None, description="When the job completed")
