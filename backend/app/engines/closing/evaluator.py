import logging
from typing import Callable, Optional

from .adapters.base import FormRef, SubmissionEvent
from .context import ClosingContext
from .settings import ClosingSettings
from .triggers import TriggerKind

logger = logging.getLogger(__name__)


def close_form(ctx: ClosingContext, form: Optional[FormRef] = None) -> bool:
    """Stop accepting responses and disarm every closing-policy trigger.

    Best effort: runs from trigger handlers where nobody awaits the result, so
    failures are logged and reported through the return value only.
    """
    try:
        target = form if form is not None else ctx.forms.get_active()
        target.set_accepting_responses(False)
        logger.info("Form %s closed; no longer accepting responses", target.id)
        ctx.triggers.clear_owned_triggers()
        return True
    except Exception:
        logger.exception("Failed to close form")
        return False


def evaluate_submission(ctx: ClosingContext, event: SubmissionEvent) -> bool:
    """Close the form once its response count reaches the configured limit.

    Returns True when the form was closed by this call. A form that is already
    closed is left alone.
    """
    try:
        if not event.form.is_accepting_responses():
            return False
        count = event.form.get_response_count()
        settings = ClosingSettings.from_mapping(ctx.store.get_all())
    except Exception:
        logger.exception("Submission check skipped for form %s", getattr(event.form, "id", "?"))
        return False

    limit = settings.max_count
    if limit is None:
        return False
    if count < limit:
        logger.debug("Form %s has %d/%d responses", event.form.id, count, limit)
        return False

    logger.info("Form %s reached its response limit (%d/%d)", event.form.id, count, limit)
    return close_form(ctx, event.form)


def handle_deadline_fire(ctx: ClosingContext, event: Optional[SubmissionEvent] = None) -> bool:
    logger.info("Deadline reached")
    return close_form(ctx)


def handle_submission_fire(ctx: ClosingContext, event: Optional[SubmissionEvent] = None) -> bool:
    if event is None:
        logger.warning("Submission trigger fired without an event; ignoring")
        return False
    return evaluate_submission(ctx, event)


HANDLERS: dict[TriggerKind, Callable[[ClosingContext, Optional[SubmissionEvent]], bool]] = {
    TriggerKind.DEADLINE: handle_deadline_fire,
    TriggerKind.SUBMISSION: handle_submission_fire,
}
