"""Exceptions raised by the ingestion pipeline."""

from typing import Optional


class BreachScanError(Exception):
    """Base exception for breachscan."""


class LineFormatError(BreachScanError, ValueError):
    """Raised when a single input line cannot be parsed into a record.

    Never fatal to a job: the ingestor counts the line as skipped and moves on.
    """

    def __init__(self, message: str, line_number: Optional[int] = None):
        super().__init__(message)
        self.reason = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.reason
        return f"line {self.line_number}: {self.reason}"


class IngestionConflictError(BreachScanError, RuntimeError):
    """Raised when an ingestion is requested while another one holds the lease."""

    def __init__(self, job_id: str, active_job_id: Optional[str] = None):
        super().__init__("Another file is currently being processed")
        self.job_id = job_id
        self.active_job_id = active_job_id


class JobNotFoundError(BreachScanError, LookupError):
    """Raised when a processing job is missing from the job store."""

    def __init__(self, job_id: str):
        super().__init__("Job not found")
        self.job_id = job_id
