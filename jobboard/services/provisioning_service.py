"""Creates a job posting together with its embedded Tally application form.

The two writes live in different systems, so they are ordered and compensated:

1. Compile and validate the form locally. Failures here happen before any
   write and are returned as ``AbortedBeforeCreation``.
2. Create the job. A store failure is also ``AbortedBeforeCreation``.
3. Create the form. On failure the job is deleted again (``RolledBack``);
   if that delete fails too the job is orphaned (``CriticalInconsistency``).

Outcomes are returned, never raised. There is no automatic retry.
"""

from __future__ import annotations

import asyncio
import logging

from jobboard.errors import FormCompilationError, FormSchemaError
from jobboard.models.form import ApplicationFormRequest
from jobboard.models.job import Job
from jobboard.models.provisioning import (
    AbortedBeforeCreation,
    Created,
    CriticalInconsistency,
    ProvisioningOutcome,
    ProvisionRequest,
    RolledBack,
)
from jobboard.models.tally import FormSubmission
from jobboard.services.block_compiler import compile_blocks
from jobboard.services.job_store import JobStore, job_store
from jobboard.services.schema_validator import validate
from jobboard.services.tally_client import TallyClient, tally_client

logger = logging.getLogger(__name__)


def prepare_form(form: ApplicationFormRequest) -> FormSubmission:
    """Compile and validate a form request into the body Tally expects.

    Raises FormCompilationError or FormSchemaError; has no side effects.
    """
    blocks = compile_blocks(form.title, form.fields)
    return validate(form.title, blocks, form.status)


class ProvisioningService:
    def __init__(self, jobs: JobStore, forms: TallyClient) -> None:
        self._jobs = jobs
        self._forms = forms

    async def provision(self, request: ProvisionRequest, publisher_id: str) -> ProvisioningOutcome:
        submission: FormSubmission | None = None
        if request.form is not None:
            try:
                submission = prepare_form(request.form)
            except FormCompilationError as e:
                logger.info("Form for job '%s' rejected at compile: %s", request.job.title, e)
                return AbortedBeforeCreation(stage="compile", reason=e.message, path=e.path)
            except FormSchemaError as e:
                logger.info("Form for job '%s' rejected by schema: %s", request.job.title, e)
                return AbortedBeforeCreation(stage="validate", reason=e.message, path=e.path)

        # Once a write may have happened the saga must reach a terminal outcome,
        # so the remaining steps run even if the caller is cancelled.
        return await asyncio.shield(self._create_and_submit(request, publisher_id, submission))

    async def _create_and_submit(
        self,
        request: ProvisionRequest,
        publisher_id: str,
        submission: FormSubmission | None,
    ) -> ProvisioningOutcome:
        try:
            job = await self._jobs.create(
                request.job, publisher_id, uses_embedded_form=submission is not None
            )
        except Exception as e:
            logger.warning("Job '%s' was not created: %s", request.job.title, e)
            return AbortedBeforeCreation(stage="create_job", reason=str(e))

        if submission is None:
            logger.info("Provisioned job %s without an application form", job.id)
            return Created(job_id=job.id, form_id=None, job=job)

        try:
            form_id = await self._forms.create_form(job.id, submission)
        except Exception as e:
            return await self._roll_back(job, e)

        logger.info("Provisioned job %s with application form %s", job.id, form_id)
        return Created(job_id=job.id, form_id=form_id, job=job)

    async def _roll_back(self, job: Job, cause: Exception) -> ProvisioningOutcome:
        reason = f"Application form could not be created: {cause}"
        logger.warning("Form submission failed for job %s, deleting job: %s", job.id, cause)
        try:
            await self._jobs.delete(job.id)
        except Exception as e:
            logger.critical(
                "Job %s exists without its application form and must be removed manually. "
                "Form error: %s. Cleanup error: %s",
                job.id,
                cause,
                e,
            )
            return CriticalInconsistency(job_id=job.id, reason=reason, cleanup_error=str(e))

        logger.info("Rolled back job %s", job.id)
        return RolledBack(job_id=job.id, reason=reason)


provisioning_service = ProvisioningService(job_store, tally_client)
