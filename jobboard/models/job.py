from __future__ import annotations

import math
from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


class Specialisation(str, Enum):
    BUSINESS = "BUSINESS"
    COMPOSITES = "COMPOSITES"
    MECHANICAL = "MECHANICAL"
    ELECTRICAL = "ELECTRICAL"
    AUTONOMOUS = "AUTONOMOUS"
    RACE_TEAM = "RACE_TEAM"


class RoleType(str, Enum):
    INTERNSHIP = "Internship"
    GRADUATE = "Graduate"
    JUNIOR = "Junior"


class SalaryType(str, Enum):
    SALARY = "salary"
    HOURLY = "hourly"
    VOLUNTARY = "voluntary"
    NEGOTIABLE = "negotiable"


HOURS_PER_YEAR = 40 * 52


def _annualize(hourly: str) -> int:
    figure = float(hourly)
    if not math.isfinite(figure):
        raise ValueError(f"'{hourly}' is not a finite number")
    return round(figure * HOURS_PER_YEAR / 1000) * 1000


def normalize_salary(value: str, salary_type: SalaryType) -> str:
    """Render the salary the way job cards display it.

    Hourly figures are annualized and rounded to the nearest thousand,
    e.g. ``"25-30"`` -> ``"52000-62000"``.
    """
    value = value.strip()
    if salary_type in (SalaryType.VOLUNTARY, SalaryType.NEGOTIABLE):
        return salary_type.value
    if not value:
        return SalaryType.NEGOTIABLE.value
    if salary_type == SalaryType.HOURLY:
        parts = [p.strip() for p in value.split("-")]
        return "-".join(str(_annualize(p)) for p in parts)
    return value


class JobDraft(BaseModel):
    """Job posting fields as submitted by a sponsor or alumnus."""

    title: str
    specialisation: Specialisation
    description: str
    role_type: RoleType
    salary_type: SalaryType = SalaryType.NEGOTIABLE
    salary: str = ""
    application_deadline: datetime
    application_link: str = ""

    @field_validator("title", "description")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("application_link")
    @classmethod
    def _strip_link(cls, value: str) -> str:
        return value.strip()

    @model_validator(mode="after")
    def _check_salary(self) -> JobDraft:
        try:
            normalize_salary(self.salary, self.salary_type)
        except (ValueError, OverflowError):
            raise ValueError(f"salary '{self.salary}' is not a valid {self.salary_type.value} figure") from None
        return self

    @property
    def display_salary(self) -> str:
        return normalize_salary(self.salary, self.salary_type)


class Job(BaseModel):
    id: str
    publisher_id: str
    title: str
    specialisation: Specialisation
    description: str
    role_type: RoleType
    salary: str
    application_deadline: datetime
    application_link: str = ""
    uses_embedded_form: bool = False
    date_posted: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
