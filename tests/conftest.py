"""Test fixtures and store doubles for the ingestion pipeline.

This module provides:
- In-memory job and record stores, a private JobLease and a StreamIngestor
  wired to them (small batch size so tests exercise several flushes)
- Record-store doubles that fail selectively, for partial-failure tests
- A ``dump_file`` factory writing credential dumps into tmp_path
"""

from pathlib import Path
from typing import Callable, Iterable

import pytest

from breachscan.config import IngestConfig
from breachscan.ingest import StreamIngestor
from breachscan.lease import JobLease
from breachscan.models import BreachRecord
from breachscan.storage.memory import InMemoryJobStorage, InMemoryRecordStorage


class FlakyRecordStorage(InMemoryRecordStorage):
    """Record store that refuses records for a given set of usernames."""

    def __init__(self, failing_usernames: Iterable[str]):
        super().__init__()
        self.failing_usernames = set(failing_usernames)
        self.attempts = 0

    async def add_record(self, record: BreachRecord) -> None:
        self.attempts += 1
        if record.username in self.failing_usernames:
            raise RuntimeError(f"insert rejected for {record.username}")
        await super().add_record(record)


@pytest.fixture
def flaky_records() -> Callable[..., FlakyRecordStorage]:
    """Factory for record stores that reject the given usernames."""

    def _make(*failing_usernames: str) -> FlakyRecordStorage:
        return FlakyRecordStorage(failing_usernames)

    return _make


@pytest.fixture
def job_storage() -> InMemoryJobStorage:
    return InMemoryJobStorage()


@pytest.fixture
def record_storage() -> InMemoryRecordStorage:
    return InMemoryRecordStorage()


@pytest.fixture
def lease() -> JobLease:
    """A lease private to the test, so runs never contend with the process-wide one."""
    return JobLease()


@pytest.fixture
def ingest_config() -> IngestConfig:
    return IngestConfig(batch_size=2, read_chunk_lines=3)


@pytest.fixture
def ingestor(
    job_storage: InMemoryJobStorage,
    record_storage: InMemoryRecordStorage,
    lease: JobLease,
    ingest_config: IngestConfig,
) -> StreamIngestor:
    return StreamIngestor(jobs=job_storage, records=record_storage, lease=lease, config=ingest_config)


@pytest.fixture
def dump_file(tmp_path: Path) -> Callable[..., Path]:
    """Write lines (joined with newline, plus a trailing newline) to a .txt file."""

    def _write(lines: Iterable[str], name: str = "dump.txt", newline: str = "\n") -> Path:
        path = tmp_path / name
        path.write_bytes("".join(f"{line}{newline}" for line in lines).encode("utf-8"))
        return path

    return _write
