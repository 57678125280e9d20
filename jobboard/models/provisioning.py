"""Request and outcome types for provisioning a job with an optional application form."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, model_validator

from jobboard.models.form import ApplicationFormRequest
from jobboard.models.job import Job, JobDraft


class ProvisionRequest(BaseModel):
    job: JobDraft
    form: ApplicationFormRequest | None = Field(
        None, description="Embedded application form; omit to use application_link instead"
    )

    @model_validator(mode="after")
    def _link_or_form(self) -> ProvisionRequest:
        if self.form is None and not self.job.application_link:
            raise ValueError("application_link is required when no application form is requested")
        return self


class Created(BaseModel):
    status: Literal["created"] = "created"
    job_id: str
    form_id: str | None = None
    job: Job


class AbortedBeforeCreation(BaseModel):
    """Nothing was written; the caller may fix the input and retry."""

    status: Literal["aborted_before_creation"] = "aborted_before_creation"
    stage: Literal["compile", "validate", "create_job"]
    reason: str
    path: str | None = None


class RolledBack(BaseModel):
    """The form was not created and the job was deleted again."""

    status: Literal["rolled_back"] = "rolled_back"
    job_id: str
    reason: str


class CriticalInconsistency(BaseModel):
    """The job exists without its form and needs manual cleanup."""

    status: Literal["critical_inconsistency"] = "critical_inconsistency"
    job_id: str
    reason: str
    cleanup_error: str


ProvisioningOutcome = Annotated[
    Union[Created, AbortedBeforeCreation, RolledBack, CriticalInconsistency],
    Field(discriminator="status"),
]
