"""In-memory storage implementations for testing and development.

Dictionary- and list-backed versions of the job and record stores. Suitable
for unit tests and local experiments; nothing survives the process, and a
multi-gigabyte ingest will hold every record in RAM.

For production use the SQLModel backends in ``breachserver.storage``.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Sequence

from breachscan.models import BreachRecord, JobStatus, ProcessingJob
from breachscan.storage.interfaces import (
    UPDATABLE_JOB_FIELDS,
    JobStorageInterface,
    RecordStorageInterface,
)


class InMemoryJobStorage(JobStorageInterface):
    """In-memory job storage keyed by job id.

    Every update is recorded in ``history`` as ``(job_id, fields)`` so tests
    can inspect the sequence of transitions a run produced.

    Example:
        ```python
        jobs = InMemoryJobStorage()
        job = await jobs.create_job("dump.txt", "1.2 MB")
        await jobs.update_job(job.id, status=JobStatus.PROCESSING)
        ```
    """

    def __init__(self) -> None:
        self._jobs: dict[str, ProcessingJob] = {}
        self.history: list[tuple[str, dict[str, Any]]] = []

    async def create_job(self, filename: str, original_size: str) -> ProcessingJob:
        job = ProcessingJob(
            id=uuid.uuid4().hex,
            filename=filename,
            original_size=original_size,
            status=JobStatus.PENDING,
            created_at=datetime.now(timezone.utc),
        )
        self._jobs[job.id] = job
        return job

    async def get_job(self, job_id: str) -> ProcessingJob | None:
        return self._jobs.get(job_id)

    async def update_job(self, job_id: str, **fields: Any) -> ProcessingJob | None:
        job = self._jobs.get(job_id)
        if job is None:
            return None
        changes = {key: value for key, value in fields.items() if key in UPDATABLE_JOB_FIELDS}
        self.history.append((job_id, changes))
        updated = job.model_copy(update=changes)
        self._jobs[job_id] = updated
        return updated

    async def list_jobs(self, limit: int = 20) -> list[ProcessingJob]:
        jobs = sorted(self._jobs.values(), key=lambda j: j.created_at, reverse=True)
        return jobs[:limit]

    async def count_jobs(self, statuses: Sequence[JobStatus] | None = None) -> int:
        if statuses is None:
            return len(self._jobs)
        wanted = {JobStatus(s) for s in statuses}
        return sum(1 for job in self._jobs.values() if job.status in wanted)

    def delete_job(self, job_id: str) -> None:
        """Drop a job outright (test helper for the vanished-job path)."""
        self._jobs.pop(job_id, None)


class InMemoryRecordStorage(RecordStorageInterface):
    """In-memory record storage backed by a list.

    Duplicates are kept as separate entries, matching the database backends.
    """

    def __init__(self) -> None:
        self.records: list[BreachRecord] = []

    async def add_record(self, record: BreachRecord) -> None:
        self.records.append(record)

    async def count_records(self) -> int:
        return len(self.records)

    async def count_by_username(self, username: str) -> int:
        return sum(1 for r in self.records if r.username == username)
