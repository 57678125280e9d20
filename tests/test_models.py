"""Tests for the pydantic models in jobboard/models."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import TypeAdapter, ValidationError

from jobboard.models.form import (
    ApplicationFormRequest,
    CheckboxGroupField,
    FileUploadField,
    FormField,
    StaticTextField,
)
from jobboard.models.job import Job, JobDraft, SalaryType, normalize_salary
from jobboard.models.provisioning import (
    CriticalInconsistency,
    ProvisioningOutcome,
    ProvisionRequest,
)

field_adapter = TypeAdapter(FormField)


class TestFormFieldUnion:
    def test_parses_by_type_tag(self):
        field = field_adapter.validate_python(
            {"type": "CHECKBOXES", "label": "Skills", "options": ["A"], "max_choices": 1}
        )
        assert isinstance(field, CheckboxGroupField)
        assert field.options == ["A"]

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            field_adapter.validate_python({"type": "SIGNATURE", "label": "Sign"})

    def test_group_with_empty_options_still_parses(self):
        field = field_adapter.validate_python({"type": "CHECKBOXES", "label": "Skills"})
        assert field.options == []

    def test_extensions_normalized(self):
        field = FileUploadField(label="CV", allowed_extensions={"PDF", " .Docx ", "", "png"})
        assert field.allowed_extensions == {".pdf", ".docx", ".png"}

    def test_max_files_must_be_positive(self):
        with pytest.raises(ValidationError):
            FileUploadField(label="CV", allow_multiple=True, max_files=0)

    def test_static_text_kind_restricted(self):
        with pytest.raises(ValidationError):
            StaticTextField(label="x", block_type="INPUT_TEXT")

    def test_form_status_defaults_from_settings(self):
        assert ApplicationFormRequest(title="Application").status == "PUBLISHED"


class TestSalary:
    @pytest.mark.parametrize(
        "value, salary_type, expected",
        [
            ("25-30", SalaryType.HOURLY, "52000-62000"),
            ("30", SalaryType.HOURLY, "62000"),
            ("60000-70000", SalaryType.SALARY, "60000-70000"),
            ("", SalaryType.SALARY, "negotiable"),
            ("", SalaryType.HOURLY, "negotiable"),
            ("anything", SalaryType.VOLUNTARY, "voluntary"),
            ("", SalaryType.NEGOTIABLE, "negotiable"),
        ],
    )
    def test_normalize(self, value, salary_type, expected):
        assert normalize_salary(value, salary_type) == expected

    @pytest.mark.parametrize("salary", ["lots", "inf", "1e309", "nan", "25-inf"])
    def test_bad_hourly_figure_rejected(self, salary):
        with pytest.raises(ValidationError, match="not a valid hourly figure"):
            JobDraft(
                title="Intern",
                specialisation="BUSINESS",
                description="desc",
                role_type="Graduate",
                salary_type="hourly",
                salary=salary,
                application_deadline=datetime(2026, 12, 1),
            )


class TestProvisionRequest:
    def _job(self, **overrides):
        data = {
            "title": "  Electrical Intern ",
            "specialisation": "ELECTRICAL",
            "description": "Wiring harness work",
            "role_type": "Internship",
            "application_deadline": "2026-12-01T00:00:00",
        }
        data.update(overrides)
        return data

    def test_text_is_stripped(self):
        request = ProvisionRequest.model_validate(
            {"job": self._job(application_link="https://x.test")}
        )
        assert request.job.title == "Electrical Intern"

    def test_blank_title_rejected(self):
        with pytest.raises(ValidationError):
            ProvisionRequest.model_validate({"job": self._job(title="   ", application_link="x")})

    def test_unknown_role_type_rejected(self):
        with pytest.raises(ValidationError):
            ProvisionRequest.model_validate({"job": self._job(role_type="Senior", application_link="x")})

    def test_link_required_without_form(self):
        with pytest.raises(ValidationError):
            ProvisionRequest.model_validate({"job": self._job()})

    def test_link_optional_with_form(self):
        request = ProvisionRequest.model_validate(
            {"job": self._job(), "form": {"title": "Apply", "fields": []}}
        )
        assert request.form is not None
        assert request.job.application_link == ""


def test_outcome_union_round_trips_by_status():
    adapter = TypeAdapter(ProvisioningOutcome)
    outcome = adapter.validate_python(
        {
            "status": "critical_inconsistency",
            "job_id": "job-1",
            "reason": "form failed",
            "cleanup_error": "db down",
        }
    )
    assert isinstance(outcome, CriticalInconsistency)
    assert outcome.job_id == "job-1"


def test_date_posted_defaults_to_utc():
    job = Job(
        id="job-1",
        publisher_id="sponsor-1",
        title="Intern",
        specialisation="BUSINESS",
        description="desc",
        role_type="Graduate",
        salary="negotiable",
        application_deadline=datetime(2026, 12, 1),
    )
    assert job.date_posted.utcoffset() == timedelta(0)
    assert abs(datetime.now(timezone.utc) - job.date_posted) < timedelta(minutes=1)
