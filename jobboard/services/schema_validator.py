"""Local copy of the acceptance rules Tally applies to ``POST /forms``.

Blocks are checked before anything is written anywhere, so a form Tally would
reject never causes a job to be created. Only the first violation is reported.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from jobboard.errors import FormSchemaError
from jobboard.models.tally import Block, BlockType, FormSubmission, GroupType

logger = logging.getLogger(__name__)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="forbid", strict=True)

    isHidden: bool | None = None
    name: str | None = None
    # Layout keys Tally echoes back on blocks placed in columns
    columnListUuid: str | None = None
    columnUuid: str | None = None
    columnRatio: float | None = None


class HtmlPayload(_Payload):
    html: str


class TextInputPayload(_Payload):
    isRequired: bool | None = None
    placeholder: str | None = None


class PhonePayload(TextInputPayload):
    internationalFormat: bool | None = None
    defaultCountryCode: str | None = Field(None, pattern=r"^[A-Z]{2}$")


class FileUploadPayload(_Payload):
    isRequired: bool | None = None
    hasMultipleFiles: bool | None = None
    hasMaxFiles: bool | None = None
    maxFiles: int | None = Field(None, ge=1)
    hasMinFiles: bool | None = None
    minFiles: int | None = Field(None, ge=1)
    hasMaxFileSize: bool | None = None
    maxFileSize: float | None = Field(None, gt=0)
    allowedFiles: dict[str, list[str]] | None = None

    @model_validator(mode="after")
    def _flags_match_values(self) -> FileUploadPayload:
        for flag, value in (
            ("hasMaxFiles", "maxFiles"),
            ("hasMinFiles", "minFiles"),
            ("hasMaxFileSize", "maxFileSize"),
        ):
            if getattr(self, value) is not None and not getattr(self, flag):
                raise ValueError(f"{value} requires {flag} to be true")
            if getattr(self, flag) and getattr(self, value) is None:
                raise ValueError(f"{flag} is set but {value} is missing")
        if self.hasMaxFiles and not self.hasMultipleFiles:
            raise ValueError("hasMaxFiles requires hasMultipleFiles to be true")
        for category, extensions in (self.allowedFiles or {}).items():
            if not category.endswith("/*"):
                raise ValueError(f"allowedFiles key {category!r} is not a MIME category")
            if not extensions:
                raise ValueError(f"allowedFiles[{category!r}] is empty")
            for ext in extensions:
                if not ext.startswith("."):
                    raise ValueError(f"allowedFiles extension {ext!r} must start with '.'")
        return self


class CheckboxPayload(_Payload):
    text: str
    index: int = Field(ge=0)
    isFirst: bool
    isLast: bool
    isRequired: bool | None = None
    hasMinChoices: bool | None = None
    minChoices: int | None = Field(None, ge=1)
    hasMaxChoices: bool | None = None
    maxChoices: int | None = Field(None, ge=1)

    @model_validator(mode="after")
    def _choice_flags(self) -> CheckboxPayload:
        for flag, value in (("hasMinChoices", "minChoices"), ("hasMaxChoices", "maxChoices")):
            if getattr(self, value) is not None and not getattr(self, flag):
                raise ValueError(f"{value} requires {flag} to be true")
            if getattr(self, flag) and getattr(self, value) is None:
                raise ValueError(f"{flag} is set but {value} is missing")
        if (
            self.minChoices is not None
            and self.maxChoices is not None
            and self.minChoices > self.maxChoices
        ):
            raise ValueError("minChoices must not exceed maxChoices")
        return self


class MultipleChoiceOptionPayload(CheckboxPayload):
    allowMultiple: Literal[True] | None = None

    @model_validator(mode="after")
    def _limits_need_multiple(self) -> MultipleChoiceOptionPayload:
        if (self.hasMinChoices or self.hasMaxChoices) and not self.allowMultiple:
            raise ValueError("choice limits require allowMultiple to be true")
        return self


_PAYLOADS: dict[BlockType, type[_Payload]] = {
    BlockType.FORM_TITLE: HtmlPayload,
    BlockType.TITLE: HtmlPayload,
    BlockType.INPUT_TEXT: TextInputPayload,
    BlockType.TEXTAREA: TextInputPayload,
    BlockType.INPUT_EMAIL: TextInputPayload,
    BlockType.INPUT_PHONE_NUMBER: PhonePayload,
    BlockType.FILE_UPLOAD: FileUploadPayload,
    BlockType.CHECKBOX: CheckboxPayload,
    BlockType.MULTIPLE_CHOICE_OPTION: MultipleChoiceOptionPayload,
    BlockType.TEXT: HtmlPayload,
    BlockType.LABEL: HtmlPayload,
    BlockType.HEADING_1: HtmlPayload,
    BlockType.HEADING_2: HtmlPayload,
    BlockType.HEADING_3: HtmlPayload,
}

_GROUP_TYPES: dict[BlockType, GroupType] = {
    BlockType.TITLE: GroupType.QUESTION,
    BlockType.CHECKBOX: GroupType.CHECKBOXES,
}

OPTION_BLOCKS = {BlockType.CHECKBOX, BlockType.MULTIPLE_CHOICE_OPTION}
INPUT_BLOCKS = {
    BlockType.INPUT_TEXT,
    BlockType.TEXTAREA,
    BlockType.INPUT_EMAIL,
    BlockType.INPUT_PHONE_NUMBER,
    BlockType.FILE_UPLOAD,
} | OPTION_BLOCKS


def _expected_group_type(block_type: BlockType) -> GroupType:
    return _GROUP_TYPES.get(block_type) or GroupType(block_type.value)


def _check_payload(path: str, block: Block) -> None:
    model = _PAYLOADS.get(block.type)
    if model is None:
        raise FormSchemaError(f"{path}.type", f"block type {block.type.value} is not accepted")
    try:
        model.model_validate(block.payload)
    except ValidationError as exc:
        error = exc.errors()[0]
        loc = ".".join(str(part) for part in error["loc"])
        raise FormSchemaError(
            f"{path}.payload.{loc}" if loc else f"{path}.payload", error["msg"]
        ) from exc


def _check_option_run(blocks: Sequence[Block], run: list[int]) -> None:
    if not run or blocks[run[0]].type not in OPTION_BLOCKS:
        return
    last = len(run) - 1
    for position, idx in enumerate(run):
        payload = blocks[idx].payload
        path = f"blocks[{idx}].payload"
        if payload["index"] != position:
            raise FormSchemaError(
                f"{path}.index", f"expected option index {position}, got {payload['index']}"
            )
        if payload["isFirst"] != (position == 0):
            raise FormSchemaError(f"{path}.isFirst", "only the first option may be flagged isFirst")
        if payload["isLast"] != (position == last):
            raise FormSchemaError(f"{path}.isLast", "only the last option may be flagged isLast")


def validate_submission(submission: FormSubmission) -> None:
    """Raise FormSchemaError for the first rule the submission breaks."""
    if not submission.name.strip():
        raise FormSchemaError("name", "form name must not be blank")
    if submission.status not in ("PUBLISHED", "DRAFT"):
        raise FormSchemaError("status", f"unknown form status {submission.status!r}")

    blocks = submission.blocks
    if not blocks:
        raise FormSchemaError("blocks", "a form needs at least its FORM_TITLE block")
    if blocks[0].type != BlockType.FORM_TITLE:
        raise FormSchemaError("blocks[0].type", "the first block must be FORM_TITLE")

    seen_uuids: set[str] = set()
    closed_groups: set[str] = set()
    current_group: str | None = None
    run: list[int] = []

    for i, block in enumerate(blocks):
        path = f"blocks[{i}]"
        if block.uuid in seen_uuids:
            raise FormSchemaError(f"{path}.uuid", f"duplicate block uuid {block.uuid}")
        seen_uuids.add(block.uuid)

        if i > 0 and block.type == BlockType.FORM_TITLE:
            raise FormSchemaError(f"{path}.type", "only the first block may be FORM_TITLE")
        expected = _expected_group_type(block.type)
        if block.group_type != expected:
            raise FormSchemaError(
                f"{path}.groupType",
                f"{block.type.value} blocks must use group type {expected.value}, "
                f"got {block.group_type.value}",
            )
        _check_payload(path, block)

        if block.type == BlockType.TITLE:
            following = blocks[i + 1] if i + 1 < len(blocks) else None
            if following is None or following.type not in INPUT_BLOCKS:
                raise FormSchemaError(f"{path}.type", "TITLE must be followed by the input it captions")

        if block.group_uuid == current_group:
            first = blocks[run[0]]
            if block.type not in OPTION_BLOCKS:
                raise FormSchemaError(
                    f"{path}.groupUuid", f"{block.type.value} blocks cannot share a group"
                )
            if block.type != first.type:
                raise FormSchemaError(
                    f"{path}.groupUuid", "blocks in one group must all have the same type"
                )
            run.append(i)
            continue

        _check_option_run(blocks, run)
        if current_group is not None:
            closed_groups.add(current_group)
        if block.group_uuid in closed_groups:
            raise FormSchemaError(
                f"{path}.groupUuid", "group is reused by blocks that are not adjacent"
            )
        current_group = block.group_uuid
        run = [i]

    _check_option_run(blocks, run)


def validate(
    title: str,
    blocks: Sequence[Block],
    status: Literal["PUBLISHED", "DRAFT"] = "PUBLISHED",
) -> FormSubmission:
    """Build the submission for ``blocks`` and validate it."""
    submission = FormSubmission(name=title, status=status, blocks=list(blocks))
    validate_submission(submission)
    logger.debug("Form %r passed schema validation (%d blocks)", title, len(blocks))
    return submission
