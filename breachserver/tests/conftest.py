"""
Pytest configuration and shared fixtures for the server tests.
"""

# pylint: disable=protected-access
import time

import pytest
from fastapi.testclient import TestClient

from breachscan.lease import job_lease
from breachserver.query import storage_factory
from breachserver.query.server import app
from breachserver.storage.backends.sqlite import SQLiteStorage


@pytest.fixture
def sqlite_storage(tmp_path):
    """File-backed SQLite storage, fresh per test."""
    storage = SQLiteStorage(str(tmp_path / "storage.db"))
    yield storage
    storage.close()


@pytest.fixture
def upload_dir(tmp_path):
    return tmp_path / "uploads"


@pytest.fixture
def server_env(tmp_path, upload_dir, monkeypatch):
    """Point the app at a throwaway database and upload dir."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("BREACHSCAN_CONFIG", raising=False)
    monkeypatch.delenv("BREACHSCAN_BATCH_SIZE", raising=False)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'server.db'}")
    monkeypatch.setenv("BREACHSCAN_UPLOAD_DIR", str(upload_dir))
    monkeypatch.setattr(storage_factory, "_engine", None)
    monkeypatch.setattr(storage_factory, "_db_url", None)
    job_lease.release()
    yield
    job_lease.release()
    storage_factory.close_storage()


@pytest.fixture
def client(server_env):
    """TestClient with lifespan, so background ingestions run on its event loop."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def wait_for_job(client):
    """Poll the jobs endpoint until a job reaches a terminal status."""

    def _wait(job_id: str, timeout: float = 10.0) -> dict:
        deadline = time.monotonic() + timeout
        while time.monotonic() < deadline:
            body = client.get("/api/admin/jobs").json()
            job = next((j for j in body["jobs"] if j["id"] == job_id), None)
            if job is not None and job["status"] in ("completed", "failed") and not body["processingStatus"]["is_processing"]:
                return job
            time.sleep(0.05)
        raise AssertionError(f"job {job_id} did not finish within {timeout}s")

    return _wait
