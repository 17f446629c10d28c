import logging
from typing import Any

from .context import ClosingContext
from .errors import StorePlatformError, TriggerPlatformError, ValidationError
from .settings import DATE_KEY, NUMBER_KEY, TIME_KEY
from .validator import validate_settings

logger = logging.getLogger(__name__)

ERROR_LOAD_FAILED = "Failed to load settings."
ERROR_SAVE_FAILED = "Failed to save settings."
ERROR_RESET_FAILED = "Failed to reset existing triggers."


def get_settings(ctx: ClosingContext) -> dict[str, Any]:
    try:
        stored = ctx.store.get_all()
    except StorePlatformError:
        logger.exception("Failed to load closing settings")
        return {"success": False, "error": ERROR_LOAD_FAILED}

    return {
        "date": stored.get(DATE_KEY) or "",
        "time": stored.get(TIME_KEY) or "",
        "number": stored.get(NUMBER_KEY) or "",
        "success": True,
    }


def save_settings(ctx: ClosingContext, date: Any = "", time: Any = "", number: Any = "") -> dict[str, Any]:
    """Validate, persist and arm the closing policy.

    Every existing closing-policy trigger is removed before new ones are
    installed, so at most one trigger of each kind is live afterwards. A
    failed install is returned as-is and the remaining installs are skipped;
    the settings written just before stay persisted.
    """
    try:
        settings = validate_settings(date, time, number, today=ctx.clock().date())
    except ValidationError as exc:
        logger.info("Rejected closing settings: %s", exc)
        return {"success": False, "error": str(exc)}

    try:
        ctx.triggers.clear_owned_triggers()
    except TriggerPlatformError:
        logger.exception("Failed to clear closing-policy triggers")
        return {"success": False, "error": ERROR_RESET_FAILED}

    try:
        ctx.store.set_all(settings.to_mapping())
    except StorePlatformError:
        logger.exception("Failed to persist closing settings")
        return {"success": False, "error": ERROR_SAVE_FAILED}

    messages = ["Settings saved."]
    deadline = settings.deadline_at()
    if deadline is not None:
        result = ctx.triggers.install_deadline_trigger(deadline)
        if not result.success:
            return result.as_dict()
        messages.append(result.message)

    if settings.has_count_limit:
        result = ctx.triggers.install_submission_trigger()
        if not result.success:
            return result.as_dict()
        messages.append(f"Form will close after {settings.max_count} responses.")

    logger.info("Closing policy armed: %s", settings.to_mapping())
    return {"success": True, "message": " ".join(messages)}
