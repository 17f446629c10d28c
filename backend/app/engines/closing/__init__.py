"""Closing policy: stop accepting responses at a deadline or a response limit."""

from .context import ClosingContext, build_context
from .dispatcher import fire_due_deadline_triggers, fire_submission_triggers
from .errors import (
    ClosingPolicyError,
    FormPlatformError,
    StorePlatformError,
    TriggerCreationError,
    TriggerPlatformError,
    ValidationError,
)
from .evaluator import close_form, evaluate_submission, handle_deadline_fire, handle_submission_fire
from .orchestrator import get_settings, save_settings
from .settings import ClosingSettings
from .triggers import TriggerKind, TriggerManager, TriggerResult
from .validator import validate_settings

__all__ = [
    "ClosingContext",
    "ClosingPolicyError",
    "ClosingSettings",
    "FormPlatformError",
    "StorePlatformError",
    "TriggerCreationError",
    "TriggerKind",
    "TriggerManager",
    "TriggerPlatformError",
    "TriggerResult",
    "ValidationError",
    "build_context",
    "close_form",
    "evaluate_submission",
    "fire_due_deadline_triggers",
    "fire_submission_triggers",
    "get_settings",
    "handle_deadline_fire",
    "handle_submission_fire",
    "save_settings",
    "validate_settings",
]
