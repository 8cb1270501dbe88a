"""Storage interface definitions for the ingestion pipeline."""

from abc import ABC, abstractmethod
from typing import Any, Sequence

from breachscan.models import BreachRecord, JobStatus, ProcessingJob

# Fields the ingestor is allowed to change on a job.
UPDATABLE_JOB_FIELDS = frozenset({"status", "progress", "records_processed", "error_message", "completed_at"})


class JobStorageInterface(ABC):
    """Abstract interface for processing-job storage."""

    @abstractmethod
    async def create_job(self, filename: str, original_size: str) -> ProcessingJob:
        """Create a job in ``pending`` state and return it."""

    @abstractmethod
    async def get_job(self, job_id: str) -> ProcessingJob | None:
        """Retrieve a job by ID, or None if not found."""

    @abstractmethod
    async def update_job(self, job_id: str, **fields: Any) -> ProcessingJob | None:
        """Apply a partial update and return the updated job.

        Only keys in UPDATABLE_JOB_FIELDS are applied; others are ignored.
        Returns None if the job does not exist.
        """

    @abstractmethod
    async def list_jobs(self, limit: int = 20) -> list[ProcessingJob]:
        """Return the most recently created jobs, newest first."""

    @abstractmethod
    async def count_jobs(self, statuses: Sequence[JobStatus] | None = None) -> int:
        """Count jobs, optionally only those in one of ``statuses``."""


class RecordStorageInterface(ABC):
    """Abstract interface for breach-record storage."""

    @abstractmethod
    async def add_record(self, record: BreachRecord) -> None:
        """Persist one record.

        Each call stands alone: a failure here must not affect records
        persisted by other calls.
        """

    @abstractmethod
    async def count_records(self) -> int:
        """Return the total number of stored records."""

    @abstractmethod
    async def count_by_username(self, username: str) -> int:
        """Return how many stored records carry exactly this username."""
