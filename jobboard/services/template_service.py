from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from jobboard.config import settings
from jobboard.models.form import FormField

logger = logging.getLogger(__name__)


class FormTemplate(BaseModel):
    """Starter fields offered when a publisher enables an embedded form."""

    title: str = "Application"
    fields: list[FormField] = Field(default_factory=list)


class TemplateService:
    def __init__(self) -> None:
        self._template: FormTemplate | None = None

    def load(self, path: Path | None = None) -> FormTemplate:
        """Load the default application form from YAML."""
        path = path or settings.form_template_path
        if not path.exists():
            raise FileNotFoundError(f"Form template not found at {path}")
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        self._template = FormTemplate.model_validate(data)
        logger.info("Loaded form template '%s' with %d fields", self._template.title, len(self._template.fields))
        return self._template

    @property
    def template(self) -> FormTemplate:
        if self._template is None:
            return self.load()
        return self._template

    def reload(self) -> FormTemplate:
        """Force reload from disk."""
        self._template = None
        return self.load()


template_service = TemplateService()
