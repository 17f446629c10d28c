"""Host-side delivery of closing-policy triggers.

The scheduler calls ``fire_due_deadline_triggers`` on every tick and the form
API calls ``fire_submission_triggers`` after each recorded response. Handler
results are discarded and handler errors never reach the caller.
"""

import logging
from datetime import datetime
from typing import Optional

from .adapters.base import EVENT_TRIGGER, TIME_TRIGGER, FormRef, SubmissionEvent, Trigger
from .context import ClosingContext
from .errors import TriggerPlatformError
from .evaluator import HANDLERS
from .triggers import TriggerKind

logger = logging.getLogger(__name__)


def _run_handler(ctx: ClosingContext, trigger: Trigger, event: Optional[SubmissionEvent]) -> bool:
    kind = TriggerKind.from_handler_name(trigger.handler_name)
    if kind is None:
        return False
    handler = HANDLERS[kind]
    try:
        handler(ctx, event)
    except Exception:
        logger.exception("Trigger %s (%s) failed", trigger.id, trigger.handler_name)
    return True


def _list_triggers(ctx: ClosingContext) -> list[Trigger]:
    try:
        return list(ctx.platform.list_triggers())
    except TriggerPlatformError:
        logger.exception("Failed to list triggers for dispatch")
        return []


def fire_due_deadline_triggers(ctx: ClosingContext, now: Optional[datetime] = None) -> int:
    now = now or ctx.clock()
    due = [
        trigger
        for trigger in _list_triggers(ctx)
        if trigger.trigger_type == TIME_TRIGGER
        and trigger.fire_at is not None
        and trigger.fire_at <= now
        and TriggerKind.from_handler_name(trigger.handler_name) is not None
    ]

    fired = 0
    for trigger in due:
        # One-shot: consumed before the handler runs.
        try:
            ctx.platform.delete(trigger)
        except TriggerPlatformError:
            logger.exception("Failed to consume trigger %s; skipping", trigger.id)
            continue
        if _run_handler(ctx, trigger, None):
            fired += 1
    return fired


def fire_submission_triggers(ctx: ClosingContext, form: FormRef, response_id: Optional[str] = None) -> int:
    event = SubmissionEvent(form=form, response_id=response_id)
    bound = [
        trigger
        for trigger in _list_triggers(ctx)
        if trigger.trigger_type == EVENT_TRIGGER and trigger.form_id == form.id
    ]

    fired = 0
    for trigger in bound:
        if _run_handler(ctx, trigger, event):
            fired += 1
    return fired
