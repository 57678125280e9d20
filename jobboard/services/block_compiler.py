"""Compiles application-form fields into Tally blocks.

Tally renders a form strictly in block order, and links a question's caption
to its input through group identifiers:

- Every captioned field is a ``TITLE`` block in a ``QUESTION`` group followed
  by its input block(s) in a second group of its own.
- Option lists (checkbox groups, multiple choice) become one block per option,
  all sharing one group, with ``index``/``isFirst``/``isLast`` describing the
  option's position.
- A single checkbox and static text carry their own caption and need no
  ``TITLE`` partner.

All field configuration is checked before any block is produced, so a bad
field never yields a partial block list.
"""

from __future__ import annotations

import copy
import logging
import uuid
from collections.abc import Callable, Sequence
from typing import Any, assert_never

from jobboard.errors import FormCompilationError
from jobboard.models.form import (
    CheckboxGroupField,
    ChoiceGroupField,
    EmailField,
    FileUploadField,
    FormField,
    LongTextField,
    PhoneField,
    ShortTextField,
    SingleCheckboxField,
    StaticTextField,
)
from jobboard.models.tally import Block, BlockType, GroupType
from jobboard.services.mime_types import classify

logger = logging.getLogger(__name__)

PHONE_INTERNATIONAL_FORMAT = True
PHONE_DEFAULT_COUNTRY = "NZ"

# Text-like inputs: field class -> (block type, group type)
_TEXT_INPUTS: dict[type, tuple[BlockType, GroupType]] = {
    ShortTextField: (BlockType.INPUT_TEXT, GroupType.INPUT_TEXT),
    LongTextField: (BlockType.TEXTAREA, GroupType.TEXTAREA),
    EmailField: (BlockType.INPUT_EMAIL, GroupType.INPUT_EMAIL),
    PhoneField: (BlockType.INPUT_PHONE_NUMBER, GroupType.INPUT_PHONE_NUMBER),
}


def _random_id() -> str:
    return str(uuid.uuid4())


class _BlockWriter:
    """Accumulates blocks for one compile call."""

    def __init__(self, id_factory: Callable[[], str]) -> None:
        self._new_id = id_factory
        self.blocks: list[Block] = []

    def new_group(self) -> str:
        return self._new_id()

    def emit(
        self,
        block_type: BlockType,
        group_uuid: str,
        group_type: GroupType,
        payload: dict[str, Any],
    ) -> None:
        self.blocks.append(
            Block(
                uuid=self._new_id(),
                type=block_type,
                group_uuid=group_uuid,
                group_type=group_type,
                payload=copy.deepcopy(payload),  # blocks own their payload
            )
        )

    def caption(self, text: str) -> None:
        self.emit(BlockType.TITLE, self.new_group(), GroupType.QUESTION, {"html": text})

    def options(
        self,
        block_type: BlockType,
        group_type: GroupType,
        options: Sequence[str],
        extra: dict[str, Any],
    ) -> None:
        group_uuid = self.new_group()
        last = len(options) - 1
        for index, text in enumerate(options):
            payload = {
                "text": text,
                "index": index,
                "isFirst": index == 0,
                "isLast": index == last,
            }
            payload.update(extra)
            self.emit(block_type, group_uuid, group_type, payload)


def _choice_limits(min_choices: int | None, max_choices: int | None) -> dict[str, Any]:
    limits: dict[str, Any] = {}
    if min_choices is not None:
        limits["hasMinChoices"] = True
        limits["minChoices"] = min_choices
    if max_choices is not None:
        limits["hasMaxChoices"] = True
        limits["maxChoices"] = max_choices
    return limits


def _check_options(
    path: str, options: list[str], min_choices: int | None, max_choices: int | None
) -> None:
    if not options:
        raise FormCompilationError(f"{path}.options", "at least one option is required")
    for i, option in enumerate(options):
        if not option.strip():
            raise FormCompilationError(f"{path}.options[{i}]", "option text must not be blank")
    if min_choices is not None and max_choices is not None and min_choices > max_choices:
        raise FormCompilationError(
            f"{path}.min_choices",
            f"min_choices ({min_choices}) exceeds max_choices ({max_choices})",
        )
    if min_choices is not None and min_choices > len(options):
        raise FormCompilationError(
            f"{path}.min_choices",
            f"min_choices ({min_choices}) exceeds the number of options ({len(options)})",
        )


def _check_field(index: int, field: FormField) -> None:
    path = f"fields[{index}]"
    if isinstance(field, CheckboxGroupField):
        _check_options(path, field.options, field.min_choices, field.max_choices)
        return
    if not field.label.strip():
        raise FormCompilationError(f"{path}.label", "label must not be blank")
    if isinstance(field, ChoiceGroupField):
        if field.allow_multiple:
            _check_options(path, field.options, field.min_choices, field.max_choices)
        else:
            _check_options(path, field.options, None, None)


def _emit_field(writer: _BlockWriter, field: FormField) -> None:
    if isinstance(field, (ShortTextField, LongTextField, EmailField, PhoneField)):
        block_type, group_type = _TEXT_INPUTS[type(field)]
        payload: dict[str, Any] = {"isRequired": field.required}
        if isinstance(field, PhoneField):
            payload["internationalFormat"] = PHONE_INTERNATIONAL_FORMAT
            payload["defaultCountryCode"] = PHONE_DEFAULT_COUNTRY
        payload["placeholder"] = field.placeholder or ""
        writer.caption(field.label)
        writer.emit(block_type, writer.new_group(), group_type, payload)

    elif isinstance(field, FileUploadField):
        payload = {"isRequired": field.required}
        if field.allow_multiple:
            payload["hasMultipleFiles"] = True
            if field.max_files is not None:
                payload["hasMaxFiles"] = True
                payload["maxFiles"] = field.max_files
        if field.allowed_extensions:
            payload["allowedFiles"] = classify(field.allowed_extensions)
        writer.caption(field.label)
        writer.emit(BlockType.FILE_UPLOAD, writer.new_group(), GroupType.FILE_UPLOAD, payload)

    elif isinstance(field, SingleCheckboxField):
        writer.options(
            BlockType.CHECKBOX,
            GroupType.CHECKBOXES,
            [field.label],
            {"isRequired": field.required},
        )

    elif isinstance(field, CheckboxGroupField):
        if field.question_text:
            writer.caption(field.question_text)
        extra = {"isRequired": field.required}
        extra.update(_choice_limits(field.min_choices, field.max_choices))
        writer.options(BlockType.CHECKBOX, GroupType.CHECKBOXES, field.options, extra)

    elif isinstance(field, ChoiceGroupField):
        writer.caption(field.label)
        extra = {"isRequired": field.required}
        if field.allow_multiple:
            extra["allowMultiple"] = True
            extra.update(_choice_limits(field.min_choices, field.max_choices))
        writer.options(
            BlockType.MULTIPLE_CHOICE_OPTION,
            GroupType.MULTIPLE_CHOICE_OPTION,
            field.options,
            extra,
        )

    elif isinstance(field, StaticTextField):
        writer.emit(
            BlockType(field.block_type),
            writer.new_group(),
            GroupType(field.block_type),
            {"html": field.label},
        )

    else:
        assert_never(field)


def compile_blocks(
    form_title: str,
    fields: Sequence[FormField],
    id_factory: Callable[[], str] | None = None,
) -> list[Block]:
    """Translate a form title and its ordered fields into Tally blocks.

    Raises FormCompilationError for field configuration Tally cannot express;
    nothing is returned in that case.
    """
    if not form_title.strip():
        raise FormCompilationError("title", "form title must not be blank")
    for index, field in enumerate(fields):
        _check_field(index, field)

    writer = _BlockWriter(id_factory or _random_id)
    writer.emit(
        BlockType.FORM_TITLE, writer.new_group(), GroupType.FORM_TITLE, {"html": form_title}
    )
    for field in fields:
        _emit_field(writer, field)

    logger.debug(
        "Compiled form %r: %d fields -> %d blocks", form_title, len(fields), len(writer.blocks)
    )
    return writer.blocks
