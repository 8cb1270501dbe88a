"""
breachscan - streaming ingestion of leaked-credential dump files.

Turns ``url,username,secret`` (or ``;``-delimited) lines into stored breach
records with hashed secrets, one file at a time, reporting progress on a job
record as it goes.

    from breachscan import StreamIngestor
    from breachscan.storage import InMemoryJobStorage, InMemoryRecordStorage

    ingestor = StreamIngestor(jobs=InMemoryJobStorage(), records=InMemoryRecordStorage())
"""

from breachscan.batching import BatchWriter
from breachscan.config import IngestConfig, load_ingest_config
from breachscan.digest import digest_secret
from breachscan.exceptions import (
    BreachScanError,
    IngestionConflictError,
    JobNotFoundError,
    LineFormatError,
)
from breachscan.ingest import StreamIngestor, compute_progress, count_lines
from breachscan.lease import JobLease, job_lease
from breachscan.models import (
    BreachRecord,
    IngestionResult,
    JobStatus,
    LeaseStatus,
    ProcessingJob,
    UrlParts,
)
from breachscan.parsing import parse_line
from breachscan.urls import split_url

__all__ = [
    "BatchWriter",
    "BreachRecord",
    "BreachScanError",
    "IngestConfig",
    "IngestionConflictError",
    "IngestionResult",
    "JobLease",
    "JobNotFoundError",
    "JobStatus",
    "LeaseStatus",
    "LineFormatError",
    "ProcessingJob",
    "StreamIngestor",
    "UrlParts",
    "compute_progress",
    "count_lines",
    "digest_secret",
    "job_lease",
    "load_ingest_config",
    "parse_line",
    "split_url",
]
