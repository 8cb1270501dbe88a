"""
Background worker for file ingestion jobs.

Upload handlers save the file, create a pending job and call ``submit``; the
ingestion then runs as a tracked asyncio task whose outcome is written to the
job record. Only one ingestion runs at a time (the process-wide lease); a
second submit fails fast with IngestionConflictError instead of queueing.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Callable, Optional

from fastapi import UploadFile

from breachscan.config import IngestConfig, load_ingest_config
from breachscan.ingest import StreamIngestor
from breachscan.lease import job_lease
from breachscan.models import IngestionResult, LeaseStatus

from .query.storage_factory import open_storage
from .storage.interfaces import StorageInterface

logger = logging.getLogger(__name__)

_worker_tasks: set[asyncio.Task] = set()

_UPLOAD_CHUNK_BYTES = 1 << 20


class UploadTooLargeError(ValueError):
    """Raised when an upload exceeds the configured size limit."""


def lease_status() -> LeaseStatus:
    """Snapshot of the process-wide ingestion lease."""
    return job_lease.status()


def _upload_root(config: IngestConfig) -> Path:
    root = Path(config.upload_dir).resolve()
    root.mkdir(parents=True, exist_ok=True)
    return root


async def save_upload(upload: UploadFile, config: Optional[IngestConfig] = None) -> tuple[Path, int]:
    """Copy an upload into the upload dir in chunks; return (path, size in bytes).

    Raises UploadTooLargeError (after removing the partial file) when the
    upload exceeds ``max_upload_bytes``.
    """
    config = config or load_ingest_config()
    path = _upload_root(config) / f"{uuid.uuid4().hex}.txt"
    size = 0
    try:
        with open(path, "wb") as out:
            while True:
                chunk = await upload.read(_UPLOAD_CHUNK_BYTES)
                if not chunk:
                    break
                size += len(chunk)
                if size > config.max_upload_bytes:
                    raise UploadTooLargeError(f"Upload exceeds {config.max_upload_bytes} bytes")
                await asyncio.to_thread(out.write, chunk)
    except BaseException:
        path.unlink(missing_ok=True)
        raise
    return path, size


def submit(
    job_id: str,
    path: Path,
    storage: Optional[StorageInterface] = None,
    close_storage: Optional[Callable[[], None]] = None,
) -> "asyncio.Task[IngestionResult]":
    """Start ingesting ``path`` for ``job_id`` in the background.

    Without ``storage`` a fresh one is opened from DATABASE_URL and closed
    when the run ends. The uploaded file is deleted when the run ends, on
    success or failure. Raises IngestionConflictError, before touching the
    job, if another ingestion is running.
    """
    if storage is None:
        storage, close_storage = open_storage()
    close = close_storage or (lambda: None)

    ingestor = StreamIngestor(jobs=storage, records=storage, lease=job_lease, config=load_ingest_config())
    try:
        task = ingestor.start(job_id, path)
    except BaseException:
        close()
        raise

    _worker_tasks.add(task)
    task.add_done_callback(lambda t: _finish(t, job_id, path, close))
    logger.info("Queued ingest job %s for %s", job_id, path.name)
    return task


def _finish(task: asyncio.Task, job_id: str, path: Path, close: Callable[[], None]) -> None:
    _worker_tasks.discard(task)
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning("Could not remove upload %s for job %s: %s", path, job_id, e)
    finally:
        close()


async def wait_for_workers() -> None:
    """Wait for running ingestions to finish. There is no mid-run cancellation."""
    if _worker_tasks:
        logger.info("Waiting for %s running ingest job(s)", len(_worker_tasks))
        await asyncio.gather(*list(_worker_tasks), return_exceptions=True)
