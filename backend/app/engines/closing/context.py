import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from .adapters.base import FormProvider, SettingsStore, TriggerPlatform
from .adapters.sqlite_forms import SqliteFormProvider
from .adapters.sqlite_store import SqliteSettingsStore
from .adapters.sqlite_triggers import SqliteTriggerPlatform
from .triggers import TriggerManager


@dataclass
class ClosingContext:
    """Collaborators for one invocation of the closing policy.

    Passed explicitly to the orchestrator, the evaluator and the dispatcher so
    no call site reaches for global state.
    """

    store: SettingsStore
    platform: TriggerPlatform
    forms: FormProvider
    clock: Callable[[], datetime] = datetime.now
    triggers: TriggerManager = field(init=False)

    def __post_init__(self) -> None:
        self.triggers = TriggerManager(self.platform, self.forms, clock=self.clock)


def build_context(
    conn: sqlite3.Connection,
    clock: Optional[Callable[[], datetime]] = None,
) -> ClosingContext:
    return ClosingContext(
        store=SqliteSettingsStore(conn),
        platform=SqliteTriggerPlatform(conn),
        forms=SqliteFormProvider(conn),
        clock=clock or datetime.now,
    )
