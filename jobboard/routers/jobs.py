"""Job posting endpoints."""
from __future__ import annotations

from fastapi import APIRouter, Header, HTTPException, Response

from jobboard.errors import JobStoreError
from jobboard.models.job import Job
from jobboard.models.provisioning import (
    AbortedBeforeCreation,
    Created,
    CriticalInconsistency,
    ProvisioningOutcome,
    ProvisionRequest,
    RolledBack,
)
from jobboard.services.job_store import job_store
from jobboard.services.provisioning_service import provisioning_service

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


def _status_code(outcome: ProvisioningOutcome) -> int:
    if isinstance(outcome, Created):
        return 201
    if isinstance(outcome, AbortedBeforeCreation):
        # Bad form input can be fixed by the caller; a store failure is worth retrying.
        return 503 if outcome.stage == "create_job" else 422
    if isinstance(outcome, RolledBack):
        return 502
    if isinstance(outcome, CriticalInconsistency):
        return 500
    raise TypeError(f"Unhandled provisioning outcome {outcome!r}")


@router.post("/", response_model=ProvisioningOutcome, status_code=201)
async def create_job(
    request: ProvisionRequest,
    response: Response,
    user_id: str = Header(alias="X-User-Id"),
) -> ProvisioningOutcome:
    """Create a job and, when requested, its embedded application form."""
    outcome = await provisioning_service.provision(request, publisher_id=user_id)
    response.status_code = _status_code(outcome)
    return outcome


@router.get("/", response_model=list[Job])
async def list_jobs(publisher_id: str | None = None) -> list[Job]:
    try:
        return await job_store.list_jobs(publisher_id)
    except JobStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get("/{job_id}", response_model=Job)
async def get_job(job_id: str) -> Job:
    try:
        job = await job_store.get(job_id)
    except JobStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if job is None:
        raise HTTPException(status_code=404, detail=f"Job {job_id} not found")
    return job
