import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..engines.closing import ClosingContext, FormPlatformError, fire_submission_triggers
from ..engines.closing.adapters import SqliteFormRef
from .settings import closing_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/form", tags=["form"])


class SubmitResponseRequest(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class UpdateFormRequest(BaseModel):
    accepting_responses: bool


def _active_form_or_404(ctx: ClosingContext) -> SqliteFormRef:
    try:
        return ctx.forms.get_active()
    except FormPlatformError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc


def _form_state(form: SqliteFormRef) -> dict[str, Any]:
    return {
        "id": form.id,
        "title": form.title,
        "accepting_responses": form.is_accepting_responses(),
        "response_count": form.get_response_count(),
    }


@router.get("")
def get_form(ctx: ClosingContext = Depends(closing_context)):
    form = _active_form_or_404(ctx)
    return _form_state(form)


@router.post("/responses")
def submit_response(payload: SubmitResponseRequest, ctx: ClosingContext = Depends(closing_context)):
    form = _active_form_or_404(ctx)
    if not form.is_accepting_responses():
        raise HTTPException(status_code=403, detail="Form is not accepting responses")

    try:
        response_id = form.record_response(payload.answers)
    except FormPlatformError as exc:
        logger.exception("Failed to record response for form %s", form.id)
        raise HTTPException(status_code=500, detail="Failed to record response") from exc
    fire_submission_triggers(ctx, form, response_id)
    return {"response_id": response_id, **_form_state(form)}


@router.patch("")
def update_form(payload: UpdateFormRequest, ctx: ClosingContext = Depends(closing_context)):
    form = _active_form_or_404(ctx)
    form.set_accepting_responses(payload.accepting_responses)
    logger.info("Form %s accepting_responses set to %s", form.id, payload.accepting_responses)
    return _form_state(form)
