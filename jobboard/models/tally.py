"""Wire entities of the Tally block protocol."""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class BlockType(str, Enum):
    FORM_TITLE = "FORM_TITLE"
    TITLE = "TITLE"
    INPUT_TEXT = "INPUT_TEXT"
    TEXTAREA = "TEXTAREA"
    INPUT_EMAIL = "INPUT_EMAIL"
    INPUT_PHONE_NUMBER = "INPUT_PHONE_NUMBER"
    FILE_UPLOAD = "FILE_UPLOAD"
    CHECKBOX = "CHECKBOX"
    MULTIPLE_CHOICE_OPTION = "MULTIPLE_CHOICE_OPTION"
    TEXT = "TEXT"
    LABEL = "LABEL"
    HEADING_1 = "HEADING_1"
    HEADING_2 = "HEADING_2"
    HEADING_3 = "HEADING_3"


class GroupType(str, Enum):
    FORM_TITLE = "FORM_TITLE"
    QUESTION = "QUESTION"
    INPUT_TEXT = "INPUT_TEXT"
    TEXTAREA = "TEXTAREA"
    INPUT_EMAIL = "INPUT_EMAIL"
    INPUT_PHONE_NUMBER = "INPUT_PHONE_NUMBER"
    FILE_UPLOAD = "FILE_UPLOAD"
    CHECKBOXES = "CHECKBOXES"
    MULTIPLE_CHOICE_OPTION = "MULTIPLE_CHOICE_OPTION"
    TEXT = "TEXT"
    LABEL = "LABEL"
    HEADING_1 = "HEADING_1"
    HEADING_2 = "HEADING_2"
    HEADING_3 = "HEADING_3"


class Block(BaseModel):
    """One rendered form element. Produced by the compiler, never mutated."""

    uuid: str
    type: BlockType
    group_uuid: str = Field(alias="groupUuid")
    group_type: GroupType = Field(alias="groupType")
    payload: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class FormSubmission(BaseModel):
    """Body posted to ``POST /forms``."""

    name: str
    status: Literal["PUBLISHED", "DRAFT"]
    blocks: list[Block]

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status,
            "blocks": [block.to_wire() for block in self.blocks],
        }
