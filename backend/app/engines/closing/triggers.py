import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from .adapters.base import FormProvider, Trigger, TriggerPlatform
from .errors import ClosingPolicyError, TriggerCreationError

logger = logging.getLogger(__name__)

ERROR_DEADLINE_NOT_FUTURE = "Deadline must be in the future."


class TriggerKind(str, Enum):
    """Handler identities owned by the closing policy.

    Ownership is decided by exact match of a trigger's handler name against
    these values; anything else on the platform belongs to another system.
    """

    DEADLINE = "close_form_at_deadline"
    SUBMISSION = "check_submission_limit"

    @classmethod
    def from_handler_name(cls, handler_name: str) -> Optional["TriggerKind"]:
        for kind in cls:
            if kind.value == handler_name:
                return kind
        return None


def is_owned(trigger: Trigger) -> bool:
    return TriggerKind.from_handler_name(trigger.handler_name) is not None


@dataclass(frozen=True)
class TriggerResult:
    success: bool
    message: str = ""
    error: str = ""
    trigger: Optional[Trigger] = None

    def as_dict(self) -> dict[str, object]:
        if self.success:
            return {"success": True, "message": self.message}
        return {"success": False, "error": self.error}


class TriggerManager:
    def __init__(
        self,
        platform: TriggerPlatform,
        forms: FormProvider,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.platform = platform
        self._forms = forms
        self._clock = clock

    def owned_triggers(self, kind: Optional[TriggerKind] = None) -> list[Trigger]:
        owned = [trigger for trigger in self.platform.list_triggers() if is_owned(trigger)]
        if kind is None:
            return owned
        return [trigger for trigger in owned if trigger.handler_name == kind.value]

    def clear_owned_triggers(self) -> int:
        """Delete every trigger this policy installed; returns the count deleted.

        Raises:
            TriggerPlatformError: when the platform cannot list or delete.
        """
        removed = 0
        for trigger in self.owned_triggers():
            self.platform.delete(trigger)
            removed += 1
        if removed:
            logger.info("Cleared %d closing-policy trigger(s)", removed)
        return removed

    def install_deadline_trigger(self, deadline: datetime) -> TriggerResult:
        try:
            if deadline <= self._clock():
                raise TriggerCreationError(ERROR_DEADLINE_NOT_FUTURE)
            trigger = self.platform.create_time_trigger(TriggerKind.DEADLINE.value, deadline)
        except TriggerCreationError as exc:
            logger.warning("Deadline trigger rejected for %s: %s", deadline.isoformat(), exc)
            return TriggerResult(success=False, error=str(exc))
        except Exception:
            logger.exception("Failed to create deadline trigger for %s", deadline.isoformat())
            return TriggerResult(success=False, error="Failed to create the deadline trigger.")

        logger.info("Deadline trigger %s set for %s", trigger.id, deadline.isoformat())
        return TriggerResult(
            success=True,
            message=f"Form will close at {deadline.strftime('%Y-%m-%d %H:%M')}.",
            trigger=trigger,
        )

    def install_submission_trigger(self) -> TriggerResult:
        # The numeric limit is read from settings when the trigger fires.
        try:
            form = self._forms.get_active()
            trigger = self.platform.create_event_trigger(TriggerKind.SUBMISSION.value, form)
        except ClosingPolicyError as exc:
            logger.exception("Failed to create submission trigger")
            return TriggerResult(success=False, error=f"Failed to create the submission trigger: {exc}")
        except Exception:
            logger.exception("Failed to create submission trigger")
            return TriggerResult(success=False, error="Failed to create the submission trigger.")

        logger.info("Submission trigger %s set for form %s", trigger.id, form.id)
        return TriggerResult(
            success=True,
            message="Response limit will be checked on every new submission.",
            trigger=trigger,
        )
