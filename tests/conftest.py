from __future__ import annotations

import itertools
from datetime import datetime

import duckdb
import pytest

from jobboard.db import _initialize_tables
from jobboard.models.form import (
    ApplicationFormRequest,
    CheckboxGroupField,
    ChoiceGroupField,
    EmailField,
    FileUploadField,
    LongTextField,
    PhoneField,
    ShortTextField,
    SingleCheckboxField,
    StaticTextField,
)
from jobboard.models.job import JobDraft
from jobboard.services.job_store import JobStore


@pytest.fixture
def id_factory():
    """Deterministic identifiers: id-0, id-1, ..."""
    counter = itertools.count()
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def every_field():
    """One field of every kind, in the order a publisher might build them."""
    return [
        StaticTextField(label="Tell us about yourself", block_type="HEADING_2"),
        ShortTextField(label="Full name", required=True, placeholder="Jane Doe"),
        LongTextField(label="Cover letter"),
        EmailField(label="Email", required=True),
        PhoneField(label="Phone"),
        FileUploadField(
            label="CV",
            required=True,
            allow_multiple=True,
            max_files=3,
            allowed_extensions={".pdf", ".docx", ".csv"},
        ),
        SingleCheckboxField(label="I agree to the terms", required=True),
        CheckboxGroupField(
            label="Skills",
            question_text="Which tools have you used?",
            options=["SolidWorks", "MATLAB", "Python"],
            min_choices=1,
            max_choices=2,
        ),
        ChoiceGroupField(label="Availability", options=["Summer", "Part-time"]),
        ChoiceGroupField(
            label="Sub-teams",
            options=["Chassis", "Aero", "Powertrain"],
            allow_multiple=True,
            max_choices=2,
        ),
    ]


@pytest.fixture
def job_draft():
    return JobDraft(
        title="Aero Intern",
        specialisation="MECHANICAL",
        description="Help design the 2027 aero package.",
        role_type="Internship",
        salary_type="hourly",
        salary="25-30",
        application_deadline=datetime(2026, 12, 1, 12, 0),
    )


@pytest.fixture
def form_request(every_field):
    return ApplicationFormRequest(title="Aero Intern application", fields=every_field)


@pytest.fixture
def store(tmp_path):
    con = duckdb.connect(str(tmp_path / "jobs.duckdb"))
    _initialize_tables(con)
    yield JobStore(connect=lambda: con)
    con.close()
