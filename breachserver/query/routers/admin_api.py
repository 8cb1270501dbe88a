"""
Admin API router: file upload, job list and ingestion statistics.

Authentication is handled in front of this service; these routes assume the
caller is already an admin.
"""

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from breachscan.config import load_ingest_config
from breachscan.exceptions import IngestionConflictError
from breachscan.models import JobStatus, LeaseStatus, ProcessingJob

from ... import ingest_worker
from ...storage.interfaces import StorageInterface
from ..storage_factory import get_storage

_SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_file_size(size: int) -> str:
    """Human-readable size with 1024-based units, e.g. 1536 -> '1.5 KB'."""
    if size <= 0:
        return "0 B"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


class UploadResponse(BaseModel):
    """Response from a successful upload."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(description="Human-readable outcome")
    job_id: str = Field(alias="jobId", description="ID of the created processing job")
    job: ProcessingJob = Field(description="The job as created (status pending)")


class JobsResponse(BaseModel):
    """Recent jobs plus the live ingestion lease."""

    model_config = ConfigDict(populate_by_name=True)

    jobs: list[ProcessingJob] = Field(description="Most recent jobs, newest first")
    processing_status: LeaseStatus = Field(alias="processingStatus", description="Which job, if any, is ingesting")


class StatsResponse(BaseModel):
    """Dashboard counters."""

    model_config = ConfigDict(populate_by_name=True)

    total_records: int = Field(alias="totalRecords", description="Stored breach records")
    files_processed: int = Field(alias="filesProcessed", description="Completed jobs")
    queue_count: int = Field(alias="queueCount", description="Jobs pending or processing")


router = APIRouter(prefix="/api/admin", tags=["Admin"])


@router.post("/upload", response_model=UploadResponse, summary="Upload a credential dump for ingestion")
async def upload_file(
    file: UploadFile = File(..., description="A .txt file of url,username,secret lines"),
    storage: StorageInterface = Depends(get_storage),
) -> UploadResponse:
    """
    Save the upload, create a pending job and start ingesting it in the background.

    Returns immediately; poll ``/api/admin/jobs`` for progress.

    FastAPI receives and spools the whole multipart body before this handler
    runs, so the 409 (busy) and 413 (too large) answers only come after the
    upload has been transferred. Enforce a body limit at the reverse proxy
    to stop oversized transfers earlier.
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No file uploaded")
    if not file.filename.endswith(".txt"):
        raise HTTPException(status_code=400, detail="Only .txt files are allowed")
    if ingest_worker.lease_status().is_processing:
        raise HTTPException(status_code=409, detail="Another file is currently being processed")

    config = load_ingest_config()
    try:
        path, size = await ingest_worker.save_upload(file, config)
    except ingest_worker.UploadTooLargeError as e:
        raise HTTPException(status_code=413, detail=str(e)) from e

    job = None
    try:
        job = await storage.create_job(file.filename, format_file_size(size))
        ingest_worker.submit(job.id, path)
    except BaseException as e:
        path.unlink(missing_ok=True)
        if job is not None:
            await storage.update_job(job.id, status=JobStatus.FAILED, error_message=str(e) or type(e).__name__)
        if isinstance(e, IngestionConflictError):
            # Lost the lease to a concurrent upload between the check and the start.
            raise HTTPException(status_code=409, detail=str(e)) from e
        raise

    return UploadResponse(message="File uploaded successfully", job_id=job.id, job=job)


@router.get("/jobs", response_model=JobsResponse, summary="List recent processing jobs")
async def list_jobs(storage: StorageInterface = Depends(get_storage)) -> JobsResponse:
    """Return the 20 most recent jobs and the current ingestion status."""
    jobs = await storage.list_jobs(limit=20)
    return JobsResponse(jobs=jobs, processing_status=ingest_worker.lease_status())


@router.get("/stats", response_model=StatsResponse, summary="Ingestion statistics")
async def get_stats(storage: StorageInterface = Depends(get_storage)) -> StatsResponse:
    """Total records, completed files and the number of jobs waiting or running."""
    return StatsResponse(
        total_records=await storage.count_records(),
        files_processed=await storage.count_jobs([JobStatus.COMPLETED]),
        queue_count=await storage.count_jobs([JobStatus.PENDING, JobStatus.PROCESSING]),
    )
