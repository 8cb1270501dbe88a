"""Streaming ingestion of credential dump files.

This module provides the `StreamIngestor`, which walks an uploaded file line
by line and turns it into stored breach records while keeping the job record
up to date:

**Pass 1 - Count:**
    Read the whole stream once to count lines, so progress can be reported as
    a percentage, then seek back to where the stream started.

**Pass 2 - Parse and persist:**
    1. Parse each line (`parse_line`); malformed lines are logged and skipped
    2. Accumulate parsed records into a batch
    3. Every `batch_size` records, flush through the `BatchWriter` and then
       publish progress and the records-processed counter on the job
    4. At end of stream flush the remainder and mark the job completed

Only one ingestion may run in the process at a time; the ingestor takes the
`JobLease` before it touches the job and releases it on every exit path. The
file is never held in memory: blocking reads happen in a worker thread a
chunk of lines at a time, so the event loop keeps serving status polls.

Example usage:
    ```python
    ingestor = StreamIngestor(jobs=job_store, records=record_store)
    job = await job_store.create_job("combo.txt", "2.5 GB")
    task = ingestor.start(job.id, "/var/uploads/combo.txt")
    ...
    ingestor.status()   # LeaseStatus(is_processing=True, current_job_id=...)
    result = await task
    ```
"""

import asyncio
import itertools
import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import AsyncIterator, BinaryIO, Iterator, Union

from breachscan.batching import BatchWriter
from breachscan.config import IngestConfig
from breachscan.exceptions import JobNotFoundError, LineFormatError
from breachscan.lease import JobLease, job_lease
from breachscan.logging import PprintLogger
from breachscan.models import BreachRecord, IngestionResult, JobStatus, LeaseStatus, ProcessingJob
from breachscan.parsing import parse_line
from breachscan.storage.interfaces import JobStorageInterface, RecordStorageInterface

logger = PprintLogger(logging.getLogger(__name__))

IngestSource = Union[BinaryIO, str, os.PathLike]

_COUNT_BLOCK_SIZE = 1 << 20


def count_lines(stream: BinaryIO) -> int:
    """Count lines the way the parsing pass will see them.

    A final line without a trailing newline still counts; an empty stream has
    zero lines.
    """
    count = 0
    last_block = b""
    while True:
        block = stream.read(_COUNT_BLOCK_SIZE)
        if not block:
            break
        count += block.count(b"\n")
        last_block = block
    if last_block and not last_block.endswith(b"\n"):
        count += 1
    return count


def _read_chunk(stream: BinaryIO, max_lines: int) -> list[bytes]:
    return list(itertools.islice(stream, max_lines))


def _decode_line(raw: bytes) -> str:
    line = raw.decode("utf-8", errors="replace")
    if line.endswith("\n"):
        line = line[:-1]
    if line.endswith("\r"):
        line = line[:-1]
    return line


def compute_progress(lines_seen: int, total_lines: int) -> int:
    """Whole percentage of lines walked, floored and capped at 100."""
    if total_lines <= 0:
        return 0
    return min(100, lines_seen * 100 // total_lines)


@contextmanager
def _open_source(source: IngestSource) -> Iterator[BinaryIO]:
    """Yield a binary stream; paths are opened (and closed) here, streams are borrowed."""
    if isinstance(source, (str, os.PathLike)):
        with open(source, "rb") as fh:
            yield fh
        return
    if not source.seekable():
        raise ValueError("Ingestion stream must be seekable for the line-count pass")
    yield source


class StreamIngestor:
    """Runs one file at a time through parse, digest and batched persistence.

    Args:
        jobs: Store holding the ProcessingJob being ingested.
        records: Store receiving parsed BreachRecords.
        lease: Exclusive ingestion lease; defaults to the process-wide one.
        config: Batch and read sizes; defaults to IngestConfig().
    """

    def __init__(
        self,
        jobs: JobStorageInterface,
        records: RecordStorageInterface,
        lease: JobLease | None = None,
        config: IngestConfig | None = None,
    ):
        self.jobs = jobs
        self.writer = BatchWriter(records)
        self.lease = lease if lease is not None else job_lease
        self.config = config or IngestConfig()
        self._tasks: set[asyncio.Task] = set()

    def status(self) -> LeaseStatus:
        return self.lease.status()

    def start(self, job_id: str, source: IngestSource) -> "asyncio.Task[IngestionResult]":
        """Start ingesting ``source`` for ``job_id`` as a background task.

        Must be called from inside a running event loop. Takes the lease
        synchronously, so a conflict raises IngestionConflictError here,
        before the job record is touched. The job's outcome is visible through
        the job store; awaiting the task also yields the result or the fatal
        error.
        """
        self.lease.acquire(job_id)
        coro = self._run_leased(job_id, source)
        try:
            task = asyncio.create_task(coro, name=f"ingest-{job_id}")
        except BaseException:
            coro.close()
            self.lease.release(job_id)
            raise
        self._tasks.add(task)
        task.add_done_callback(lambda t: self._task_done(job_id, t))
        return task

    async def ingest(self, job_id: str, source: IngestSource) -> IngestionResult:
        """Ingest ``source`` for ``job_id`` and return the run's counters.

        Raises IngestionConflictError before any state change if another
        ingestion holds the lease; re-raises any fatal error after marking the
        job failed.
        """
        with self.lease.held(job_id):
            return await self._run(job_id, source)

    async def wait_all(self) -> None:
        """Wait for every background run started by this ingestor to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run_leased(self, job_id: str, source: IngestSource) -> IngestionResult:
        try:
            return await self._run(job_id, source)
        finally:
            self.lease.release(job_id)

    def _task_done(self, job_id: str, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        # Covers a task cancelled before its first step, when no finally ran.
        self.lease.release(job_id)
        if not task.cancelled() and task.exception() is not None:
            logger.debug("Background ingestion of job %s ended with %r", job_id, task.exception())

    async def _run(self, job_id: str, source: IngestSource) -> IngestionResult:
        try:
            job = await self.jobs.get_job(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            await self._update(job_id, status=JobStatus.PROCESSING, progress=0)
            logger.info("Ingest job %s starting: file=%s size=%s", job_id, job.filename, job.original_size)

            with _open_source(source) as stream:
                result = await self._stream_process(job, stream)

            await self._update(
                job_id,
                status=JobStatus.COMPLETED,
                progress=100,
                records_processed=result.records_processed,
                completed_at=datetime.now(timezone.utc),
            )
        except (Exception, asyncio.CancelledError) as exc:
            logger.exception("Ingest job %s failed: %s", job_id, exc)
            await self._mark_failed(job_id, exc)
            raise

        logger.info("Ingest job %s complete:", job_id)
        logger.info(result)
        return result

    async def _stream_process(self, job: ProcessingJob, stream: BinaryIO) -> IngestionResult:
        start_offset = stream.tell()
        total_lines = await asyncio.to_thread(count_lines, stream)
        stream.seek(start_offset)

        batch: list[BreachRecord] = []
        lines_seen = lines_skipped = records_processed = batches_flushed = 0
        progress = 0

        async for line in self._iter_lines(stream):
            lines_seen += 1
            try:
                record = parse_line(line, job.filename, line_number=lines_seen)
            except LineFormatError as e:
                lines_skipped += 1
                logger.debug("Skipping line in %s: %s", job.filename, e)
                continue
            if record is None:
                continue

            batch.append(record)
            if len(batch) >= self.config.batch_size:
                await self.writer.write(batch)
                records_processed += len(batch)
                batches_flushed += 1
                batch = []
                # Counters are published only after the flush they describe.
                progress = max(progress, compute_progress(lines_seen, total_lines))
                await self._update(job.id, progress=progress, records_processed=records_processed)

        if batch:
            await self.writer.write(batch)
            records_processed += len(batch)
            batches_flushed += 1

        return IngestionResult(
            job_id=job.id,
            total_lines=total_lines,
            lines_seen=lines_seen,
            records_processed=records_processed,
            lines_skipped=lines_skipped,
            batches_flushed=batches_flushed,
        )

    async def _iter_lines(self, stream: BinaryIO) -> AsyncIterator[str]:
        while True:
            chunk = await asyncio.to_thread(_read_chunk, stream, self.config.read_chunk_lines)
            if not chunk:
                return
            for raw in chunk:
                yield _decode_line(raw)

    async def _update(self, job_id: str, **fields) -> ProcessingJob:
        job = await self.jobs.update_job(job_id, **fields)
        if job is None:
            raise JobNotFoundError(job_id)
        return job

    async def _mark_failed(self, job_id: str, exc: BaseException) -> None:
        message = str(exc) or type(exc).__name__
        try:
            await self.jobs.update_job(job_id, status=JobStatus.FAILED, error_message=message)
        except Exception:  # pylint: disable=broad-exception-caught
            logger.exception("Could not record failure of ingest job %s", job_id)
