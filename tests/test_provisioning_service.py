"""Tests for jobboard/services/provisioning_service.py

Covers each terminal outcome of the provisioning saga:
- job only, job + form
- aborted at compile, validation and job creation
- rolled back after a failed form submission
- critical inconsistency when the rollback itself fails
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest

from jobboard.errors import FormServiceError, JobStoreError
from jobboard.models.form import ApplicationFormRequest, CheckboxGroupField, ShortTextField
from jobboard.models.job import Job
from jobboard.models.provisioning import (
    AbortedBeforeCreation,
    Created,
    CriticalInconsistency,
    ProvisionRequest,
    RolledBack,
)
from jobboard.models.tally import FormSubmission
from jobboard.services import provisioning_service as provisioning_module
from jobboard.services.job_store import JobStore
from jobboard.services.provisioning_service import ProvisioningService
from jobboard.services.tally_client import TallyClient


@pytest.fixture
def created_job(job_draft):
    return Job(
        id="job-123",
        publisher_id="sponsor-1",
        title=job_draft.title,
        specialisation=job_draft.specialisation,
        description=job_draft.description,
        role_type=job_draft.role_type,
        salary=job_draft.display_salary,
        application_deadline=job_draft.application_deadline,
        uses_embedded_form=True,
    )


@pytest.fixture
def jobs(created_job):
    store = AsyncMock(spec=JobStore)
    store.create.return_value = created_job
    return store


@pytest.fixture
def forms():
    client = AsyncMock(spec=TallyClient)
    client.create_form.return_value = "wMz1aB"
    return client


@pytest.fixture
def service(jobs, forms):
    return ProvisioningService(jobs, forms)


@pytest.mark.asyncio
async def test_job_only_request(service, jobs, forms, job_draft, created_job):
    job_draft.application_link = "https://example.com/apply"
    outcome = await service.provision(ProvisionRequest(job=job_draft), publisher_id="sponsor-1")

    assert isinstance(outcome, Created)
    assert outcome.job_id == created_job.id
    assert outcome.form_id is None
    jobs.create.assert_awaited_once_with(job_draft, "sponsor-1", uses_embedded_form=False)
    forms.create_form.assert_not_called()
    jobs.delete.assert_not_called()


@pytest.mark.asyncio
async def test_job_with_form(service, jobs, forms, job_draft, form_request, created_job):
    outcome = await service.provision(
        ProvisionRequest(job=job_draft, form=form_request), publisher_id="sponsor-1"
    )

    assert isinstance(outcome, Created)
    assert outcome.job_id == created_job.id
    assert outcome.form_id == "wMz1aB"
    jobs.create.assert_awaited_once_with(job_draft, "sponsor-1", uses_embedded_form=True)
    forms.create_form.assert_awaited_once()
    job_id, submission = forms.create_form.await_args.args
    assert job_id == created_job.id
    assert isinstance(submission, FormSubmission)
    assert submission.name == form_request.title
    assert submission.status == "PUBLISHED"
    assert len(submission.blocks) == 24
    jobs.delete.assert_not_called()


@pytest.mark.asyncio
async def test_invalid_fields_abort_before_creation(service, jobs, forms, job_draft):
    form = ApplicationFormRequest(
        title="Application",
        fields=[ShortTextField(label="Name"), CheckboxGroupField(label="Skills", options=[])],
    )
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form), "sponsor-1")

    assert isinstance(outcome, AbortedBeforeCreation)
    assert outcome.stage == "compile"
    assert outcome.path == "fields[1].options"
    jobs.create.assert_not_called()
    forms.create_form.assert_not_called()


@pytest.mark.asyncio
async def test_schema_violation_aborts_before_creation(
    service, jobs, forms, job_draft, form_request, monkeypatch
):
    real_compile = provisioning_module.compile_blocks

    def compile_without_title(title, fields):
        return real_compile(title, fields)[1:]

    monkeypatch.setattr(provisioning_module, "compile_blocks", compile_without_title)
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")

    assert isinstance(outcome, AbortedBeforeCreation)
    assert outcome.stage == "validate"
    assert outcome.path == "blocks[0].type"
    jobs.create.assert_not_called()


@pytest.mark.asyncio
async def test_job_store_failure_aborts(service, jobs, forms, job_draft, form_request):
    jobs.create.side_effect = JobStoreError("database is locked")
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")

    assert isinstance(outcome, AbortedBeforeCreation)
    assert outcome.stage == "create_job"
    assert "database is locked" in outcome.reason
    forms.create_form.assert_not_called()
    jobs.delete.assert_not_called()


@pytest.mark.asyncio
async def test_form_failure_rolls_back(service, jobs, forms, job_draft, form_request, created_job):
    forms.create_form.side_effect = FormServiceError("Tally rejected form", status_code=400)
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")

    assert isinstance(outcome, RolledBack)
    assert outcome.job_id == created_job.id
    assert "Tally rejected form" in outcome.reason
    jobs.delete.assert_awaited_once_with(created_job.id)


@pytest.mark.asyncio
async def test_unexpected_form_error_rolls_back(service, jobs, forms, job_draft, form_request):
    forms.create_form.side_effect = RuntimeError("connection reset")
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")

    assert isinstance(outcome, RolledBack)
    jobs.delete.assert_awaited_once()


@pytest.mark.asyncio
async def test_failed_rollback_is_critical(service, jobs, forms, job_draft, form_request, created_job):
    forms.create_form.side_effect = FormServiceError("timed out")
    jobs.delete.side_effect = JobStoreError("database unavailable")
    outcome = await service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")

    assert isinstance(outcome, CriticalInconsistency)
    assert outcome.job_id == created_job.id
    assert "timed out" in outcome.reason
    assert "database unavailable" in outcome.cleanup_error
    jobs.delete.assert_awaited_once_with(created_job.id)


@pytest.mark.asyncio
async def test_rollback_still_runs_when_caller_is_cancelled(
    service, jobs, forms, job_draft, form_request, created_job
):
    release = asyncio.Event()

    async def slow_failure(job_id, submission):
        await release.wait()
        raise FormServiceError("late failure")

    forms.create_form.side_effect = slow_failure
    task = asyncio.create_task(
        service.provision(ProvisionRequest(job=job_draft, form=form_request), "sponsor-1")
    )
    for _ in range(100):
        if forms.create_form.called:
            break
        await asyncio.sleep(0)
    assert forms.create_form.called

    task.cancel()
    release.set()
    with pytest.raises(asyncio.CancelledError):
        await task

    for _ in range(100):
        if jobs.delete.await_count:
            break
        await asyncio.sleep(0)
    jobs.delete.assert_awaited_once_with(created_job.id)
