"""Load ingestion config from TOML (e.g. breachscan.toml).

Config file is looked up in order:
  1. Path in BREACHSCAN_CONFIG env var (if set)
  2. breachscan.toml in the current working directory

Only the ``[ingest]`` table is read. BREACHSCAN_BATCH_SIZE and
BREACHSCAN_UPLOAD_DIR override whatever the file says. If no file is found,
built-in defaults are used (batch_size=1000, read_chunk_lines=1000).
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import tomllib
from pydantic import BaseModel, Field

DEFAULT_BATCH_SIZE = 1000
DEFAULT_READ_CHUNK_LINES = 1000
DEFAULT_UPLOAD_DIR = "uploads"
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024 * 1024  # 10GB


class IngestConfig(BaseModel):
    """Tunables for the ingestion pipeline and upload handling.

    Attributes:
        batch_size: Records accumulated before a flush to the record store
        read_chunk_lines: Lines read per thread hop while streaming the file
        upload_dir: Directory where uploaded files wait for ingestion
        max_upload_bytes: Largest accepted upload
    """

    model_config = {"frozen": True}

    batch_size: int = Field(DEFAULT_BATCH_SIZE, gt=0, description="Records per flush")
    read_chunk_lines: int = Field(DEFAULT_READ_CHUNK_LINES, gt=0, description="Lines per blocking read")
    upload_dir: str = Field(DEFAULT_UPLOAD_DIR, description="Where uploads are stored until ingested")
    max_upload_bytes: int = Field(DEFAULT_MAX_UPLOAD_BYTES, gt=0, description="Upload size limit")


def _default_config_paths() -> list[Path]:
    """Return paths to check for breachscan.toml (first existing wins)."""
    paths: list[Path] = []
    if os.environ.get("BREACHSCAN_CONFIG"):
        paths.append(Path(os.environ["BREACHSCAN_CONFIG"]))
    paths.append(Path.cwd() / "breachscan.toml")
    return paths


def _read_ingest_table() -> dict[str, Any]:
    for path in _default_config_paths():
        if path.is_file():
            try:
                with open(path, "rb") as f:
                    data = tomllib.load(f)
            except (OSError, ValueError):
                continue
            table = data.get("ingest")
            return table if isinstance(table, dict) else {}
    return {}


def load_ingest_config() -> IngestConfig:
    """Build an IngestConfig from the TOML file and environment overrides."""
    values: dict[str, Any] = {}
    table = _read_ingest_table()
    for key in ("batch_size", "read_chunk_lines", "max_upload_bytes"):
        value = table.get(key)
        if isinstance(value, int) and not isinstance(value, bool) and value > 0:
            values[key] = value
    if isinstance(table.get("upload_dir"), str):
        values["upload_dir"] = table["upload_dir"]

    env_batch = os.environ.get("BREACHSCAN_BATCH_SIZE")
    if env_batch and env_batch.isdigit() and int(env_batch) > 0:
        values["batch_size"] = int(env_batch)
    if os.environ.get("BREACHSCAN_UPLOAD_DIR"):
        values["upload_dir"] = os.environ["BREACHSCAN_UPLOAD_DIR"]
    return IngestConfig(**values)
