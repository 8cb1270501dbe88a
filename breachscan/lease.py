"""Exclusive ingestion lease.

At most one ingestion job may be running in the process. The lease is a
single slot holding the active job id, guarded by a lock that is only held
for the instant it takes to read or swap the slot, so status polls never
wait on a running ingest.

A second start while the slot is taken fails fast; nothing is queued.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from breachscan.exceptions import IngestionConflictError
from breachscan.models import LeaseStatus

logger = logging.getLogger(__name__)


class JobLease:
    """Single-slot lease naming the job currently allowed to ingest."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._job_id: Optional[str] = None

    def try_acquire(self, job_id: str) -> bool:
        """Take the slot for ``job_id``. Returns False if another job holds it."""
        with self._lock:
            if self._job_id is not None:
                return False
            self._job_id = job_id
        logger.debug("Lease acquired by job %s", job_id)
        return True

    def acquire(self, job_id: str) -> None:
        """Take the slot for ``job_id`` or raise IngestionConflictError."""
        if not self.try_acquire(job_id):
            raise IngestionConflictError(job_id, active_job_id=self.status().current_job_id)

    def release(self, job_id: Optional[str] = None) -> None:
        """Clear the slot. Idempotent.

        With ``job_id``, only clears the slot if that job holds it, so a late
        release from a finished job cannot free a lease taken by its successor.
        """
        with self._lock:
            if self._job_id is None:
                return
            if job_id is not None and self._job_id != job_id:
                return
            released = self._job_id
            self._job_id = None
        logger.debug("Lease released by job %s", released)

    @contextmanager
    def held(self, job_id: str) -> Iterator[None]:
        """Hold the lease for the duration of the block; always released on exit."""
        self.acquire(job_id)
        try:
            yield
        finally:
            self.release(job_id)

    def status(self) -> LeaseStatus:
        with self._lock:
            job_id = self._job_id
        return LeaseStatus(is_processing=job_id is not None, current_job_id=job_id)


# Process-wide lease shared by every ingestor that does not bring its own.
job_lease = JobLease()
