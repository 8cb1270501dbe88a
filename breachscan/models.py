"""Pydantic models shared by the ingestion pipeline and its stores.

These are the storage-agnostic shapes: the server package maps them onto
SQLModel tables, the in-memory stores keep them as-is.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class JobStatus(str, Enum):
    """Lifecycle state of a processing job."""

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


class ProcessingJob(BaseModel):
    """One tracked attempt to ingest a single uploaded file."""

    model_config = ConfigDict(from_attributes=True)

    id: str = Field(..., description="UUID hex string for the job")
    filename: str = Field(..., description="Original name of the uploaded file")
    original_size: str = Field(..., description="Human-readable size label, e.g. '1.5 KB'")
    status: JobStatus = Field(default=JobStatus.PENDING)
    progress: int = Field(default=0, ge=0, le=100, description="Percentage of lines walked")
    records_processed: int = Field(default=0, ge=0, description="Records handed to the batch writer")
    error_message: Optional[str] = Field(default=None, description="Set when status is failed")
    created_at: datetime = Field(..., description="When the job was created")
    completed_at: Optional[datetime] = Field(default=None, description="When the job completed")


class BreachRecord(BaseModel):
    """One parsed credential exposure, ready to persist.

    The username is kept exactly as it appeared in the file. The secret is
    never stored; only its SHA-256 hex digest is.
    """

    model_config = ConfigDict(frozen=True, from_attributes=True)

    username: str
    domain: str
    subdomain: Optional[str] = None
    password_hash: str = Field(..., min_length=64, max_length=64)
    source_file: str


class UrlParts(BaseModel):
    """Result of splitting a hostname-like string."""

    model_config = ConfigDict(frozen=True)

    domain: str
    subdomain: Optional[str] = None


class LeaseStatus(BaseModel):
    """Snapshot of the ingestion lease, safe to serve while a run is active."""

    model_config = ConfigDict(frozen=True)

    is_processing: bool
    current_job_id: Optional[str] = None


class IngestionResult(BaseModel):
    """Counters from one completed ingestion run."""

    job_id: str
    total_lines: int = 0
    lines_seen: int = 0
    records_processed: int = 0
    lines_skipped: int = 0
    batches_flushed: int = 0
