"""
FastAPI application for the breach lookup service.

Run with: uvicorn breachserver.query.server:app --host 0.0.0.0 --port 8000
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from sqlmodel import SQLModel

from breachscan.logging import setup_logging

from .. import ingest_worker
from ..storage.models import BreachRecordRow, ProcessingJobRow
from .routers import admin_api, search_api
from .storage_factory import close_storage, get_engine

setup_logging("breachscan", logging.INFO)
logger = setup_logging("breachserver", logging.INFO)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Creates the tables on startup; on shutdown waits for a running ingestion, then closes storage.
    """
    engine, db_url = get_engine()
    SQLModel.metadata.create_all(engine, tables=[ProcessingJobRow.__table__, BreachRecordRow.__table__])
    logger.info("Storage ready (%s)", db_url.split("://", 1)[0])
    yield
    await ingest_worker.wait_for_workers()
    close_storage()


app = FastAPI(
    title="Breach Lookup API",
    description="Ingests leaked-credential dumps and answers exposure lookups by username.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(admin_api.router)
app.include_router(search_api.router)


@app.get("/health")
async def health_check():
    """
    Health check endpoint to verify that the server is running.
    """
    return {"status": "ok"}
