"""Application-form endpoints that never touch the job store or Tally."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException

from jobboard.errors import FormInputError
from jobboard.models.form import ApplicationFormRequest
from jobboard.models.tally import FormSubmission
from jobboard.services.provisioning_service import prepare_form
from jobboard.services.template_service import FormTemplate, template_service

router = APIRouter(prefix="/api/forms", tags=["forms"])


@router.post("/preview", response_model=FormSubmission)
async def preview_form(form: ApplicationFormRequest) -> FormSubmission:
    """Compile and validate a form, returning the blocks Tally would receive."""
    try:
        return prepare_form(form)
    except FormInputError as e:
        raise HTTPException(status_code=422, detail={"path": e.path, "message": e.message})


@router.get("/template", response_model=FormTemplate)
async def get_template() -> FormTemplate:
    try:
        return template_service.template
    except FileNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
