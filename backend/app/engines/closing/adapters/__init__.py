from .base import (
    EVENT_TRIGGER,
    TIME_TRIGGER,
    FormProvider,
    FormRef,
    SettingsStore,
    SubmissionEvent,
    Trigger,
    TriggerPlatform,
)
from .sqlite_forms import SqliteFormProvider, SqliteFormRef
from .sqlite_store import SqliteSettingsStore
from .sqlite_triggers import SqliteTriggerPlatform

__all__ = [
    "EVENT_TRIGGER",
    "TIME_TRIGGER",
    "FormProvider",
    "FormRef",
    "SettingsStore",
    "SubmissionEvent",
    "Trigger",
    "TriggerPlatform",
    "SqliteFormProvider",
    "SqliteFormRef",
    "SqliteSettingsStore",
    "SqliteTriggerPlatform",
]
