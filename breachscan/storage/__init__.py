"""Storage interfaces and in-memory implementations for the ingestion pipeline."""

from breachscan.storage.interfaces import (
    UPDATABLE_JOB_FIELDS,
    JobStorageInterface,
    RecordStorageInterface,
)
from breachscan.storage.memory import InMemoryJobStorage, InMemoryRecordStorage

__all__ = [
    "UPDATABLE_JOB_FIELDS",
    "JobStorageInterface",
    "RecordStorageInterface",
    "InMemoryJobStorage",
    "InMemoryRecordStorage",
]
