"""Application-form field definitions as authored in the job editor."""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from jobboard.config import settings


class _FieldBase(BaseModel):
    label: str = Field(description="Question text shown above the input")
    required: bool = False
    placeholder: str | None = None


class ShortTextField(_FieldBase):
    type: Literal["INPUT_TEXT"] = "INPUT_TEXT"


class LongTextField(_FieldBase):
    type: Literal["TEXTAREA"] = "TEXTAREA"


class EmailField(_FieldBase):
    type: Literal["INPUT_EMAIL"] = "INPUT_EMAIL"


class PhoneField(_FieldBase):
    type: Literal["INPUT_PHONE_NUMBER"] = "INPUT_PHONE_NUMBER"


class FileUploadField(_FieldBase):
    type: Literal["FILE_UPLOAD"] = "FILE_UPLOAD"
    allow_multiple: bool = False
    max_files: int | None = Field(None, ge=1, description="Only used when allow_multiple is set")
    allowed_extensions: set[str] = Field(default_factory=set)

    @field_validator("allowed_extensions")
    @classmethod
    def _normalize_extensions(cls, value: set[str]) -> set[str]:
        normalized = set()
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalized.add(ext if ext.startswith(".") else f".{ext}")
        return normalized


class SingleCheckboxField(_FieldBase):
    """A lone checkbox such as "I agree to the terms"; the label is its caption."""

    type: Literal["CHECKBOX"] = "CHECKBOX"


class CheckboxGroupField(_FieldBase):
    type: Literal["CHECKBOXES"] = "CHECKBOXES"
    question_text: str | None = None
    options: list[str] = Field(default_factory=list)
    min_choices: int | None = Field(None, ge=1)
    max_choices: int | None = Field(None, ge=1)


class ChoiceGroupField(_FieldBase):
    type: Literal["MULTIPLE_CHOICE"] = "MULTIPLE_CHOICE"
    options: list[str] = Field(default_factory=list)
    allow_multiple: bool = False
    min_choices: int | None = Field(None, ge=1, description="Only used when allow_multiple is set")
    max_choices: int | None = Field(None, ge=1, description="Only used when allow_multiple is set")


class StaticTextField(_FieldBase):
    """Instructional content with no input."""

    type: Literal["STATIC_TEXT"] = "STATIC_TEXT"
    block_type: Literal["TEXT", "LABEL", "HEADING_1", "HEADING_2", "HEADING_3"] = "TEXT"


FormField = Annotated[
    Union[
        ShortTextField,
        LongTextField,
        EmailField,
        PhoneField,
        FileUploadField,
        SingleCheckboxField,
        CheckboxGroupField,
        ChoiceGroupField,
        StaticTextField,
    ],
    Field(discriminator="type"),
]


class ApplicationFormRequest(BaseModel):
    """An embedded application form requested alongside a job posting."""

    title: str
    fields: list[FormField] = Field(default_factory=list)
    status: Literal["PUBLISHED", "DRAFT"] = Field(
        default_factory=lambda: settings.default_form_status
    )
