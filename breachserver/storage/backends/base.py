"""
Shared SQLModel implementation of the storage interface.

Backends differ only in how they obtain their session; every query lives here.
"""

import uuid
from enum import Enum
from typing import Any, Optional, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from breachscan.models import BreachRecord, JobStatus, ProcessingJob
from breachscan.storage.interfaces import UPDATABLE_JOB_FIELDS

from ..interfaces import StorageInterface
from ..models import BreachRecordRow, ProcessingJobRow


def _to_job(row: ProcessingJobRow) -> ProcessingJob:
    return ProcessingJob.model_validate(row, from_attributes=True)


class SQLModelStorage(StorageInterface):
    """
    Storage over a single SQLModel session.

    The methods are coroutines to satisfy the pipeline's interfaces but run
    their queries synchronously on the caller's thread.
    """

    def __init__(self, session: Session):
        self._session = session

    async def create_job(self, filename: str, original_size: str) -> ProcessingJob:
        """Create a new pending job and return it."""
        row = ProcessingJobRow(
            id=uuid.uuid4().hex,
            filename=filename,
            original_size=original_size,
            status=JobStatus.PENDING.value,
        )
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return _to_job(row)

    async def get_job(self, job_id: str) -> Optional[ProcessingJob]:
        """Get a job by id, or None if not found."""
        row = self._session.get(ProcessingJobRow, job_id)
        return None if row is None else _to_job(row)

    async def update_job(self, job_id: str, **fields: Any) -> Optional[ProcessingJob]:
        """Update a job by id; return the updated job or None if not found."""
        row = self._session.get(ProcessingJobRow, job_id)
        if row is None:
            return None
        for key, value in fields.items():
            if key in UPDATABLE_JOB_FIELDS:
                setattr(row, key, value.value if isinstance(value, Enum) else value)
        self._session.add(row)
        self._session.commit()
        self._session.refresh(row)
        return _to_job(row)

    async def list_jobs(self, limit: int = 20) -> list[ProcessingJob]:
        """Most recent jobs first."""
        statement = select(ProcessingJobRow).order_by(ProcessingJobRow.created_at.desc()).limit(limit)  # type: ignore[attr-defined]
        return [_to_job(row) for row in self._session.exec(statement).all()]

    async def count_jobs(self, statuses: Sequence[JobStatus] | None = None) -> int:
        statement = select(func.count(ProcessingJobRow.id))  # type: ignore[arg-type] # pylint: disable=not-callable
        if statuses is not None:
            values = [JobStatus(s).value for s in statuses]
            statement = statement.where(ProcessingJobRow.status.in_(values))  # type: ignore[attr-defined]
        return self._session.exec(statement).one()

    async def add_record(self, record: BreachRecord) -> None:
        """
        Insert one record in its own transaction.
        A failed insert is rolled back alone so the session stays usable for the rest of the batch.
        """
        self._session.add(BreachRecordRow(**record.model_dump()))
        try:
            self._session.commit()
        except Exception:
            self._session.rollback()
            raise

    async def count_records(self) -> int:
        statement = select(func.count(BreachRecordRow.id))  # type: ignore[arg-type] # pylint: disable=not-callable
        return self._session.exec(statement).one()

    async def count_by_username(self, username: str) -> int:
        statement = select(func.count(BreachRecordRow.id)).where(BreachRecordRow.username == username)  # type: ignore[arg-type] # pylint: disable=not-callable
        return self._session.exec(statement).one()

    def close(self) -> None:
        """
        Close the session.
        """
        self._session.close()
