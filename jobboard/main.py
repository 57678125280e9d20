"""FastAPI entry point for the job board backend."""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from jobboard.config import settings
from jobboard.db import close as close_db
from jobboard.db import get_connection
from jobboard.routers import forms, jobs

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logger.info("Starting job board backend on %s:%d", settings.host, settings.port)
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    get_connection()
    if not settings.tally_api_key:
        logger.warning("JOBBOARD_TALLY_API_KEY is not set; embedded application forms will fail")

    yield

    # Shutdown
    close_db()
    logger.info("Job board backend stopped")


app = FastAPI(
    title="Job Board",
    description="Job postings with embedded Tally application forms",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(jobs.router)
app.include_router(forms.router)


@app.get("/health")
async def health() -> dict:
    return {
        "status": "ok",
        "tally_configured": bool(settings.tally_api_key),
    }


if __name__ == "__main__":
    uvicorn.run(
        "jobboard.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
