from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional, Sequence

TIME_TRIGGER = "time"
EVENT_TRIGGER = "event"


@dataclass(frozen=True)
class Trigger:
    id: str
    handler_name: str
    trigger_type: str
    fire_at: Optional[datetime] = None
    form_id: Optional[str] = None


class FormRef(ABC):
    """One form in the host's form data store."""

    id: str

    @abstractmethod
    def get_response_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def set_accepting_responses(self, accepting: bool) -> None:
        raise NotImplementedError

    def is_accepting_responses(self) -> bool:
        # Hosts that cannot report the flag are treated as open.
        return True


@dataclass(frozen=True)
class SubmissionEvent:
    form: FormRef
    response_id: Optional[str] = None


class FormProvider(ABC):
    @abstractmethod
    def get_active(self) -> FormRef:
        raise NotImplementedError


class SettingsStore(ABC):
    @abstractmethod
    def get_all(self) -> dict[str, str]:
        raise NotImplementedError

    @abstractmethod
    def set_all(self, values: Mapping[str, str]) -> None:
        raise NotImplementedError


class TriggerPlatform(ABC):
    @abstractmethod
    def list_triggers(self) -> Sequence[Trigger]:
        raise NotImplementedError

    @abstractmethod
    def delete(self, trigger: Trigger) -> None:
        raise NotImplementedError

    @abstractmethod
    def create_time_trigger(self, handler_name: str, instant: datetime) -> Trigger:
        raise NotImplementedError

    @abstractmethod
    def create_event_trigger(self, handler_name: str, form_ref: FormRef) -> Trigger:
        raise NotImplementedError
