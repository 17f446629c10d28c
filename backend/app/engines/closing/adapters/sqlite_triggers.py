import logging
import sqlite3
from datetime import datetime
from typing import Any
from uuid import uuid4

from ..errors import TriggerPlatformError
from .base import EVENT_TRIGGER, TIME_TRIGGER, FormRef, Trigger, TriggerPlatform

logger = logging.getLogger(__name__)


def _parse_instant(raw: Any) -> datetime | None:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(str(raw))
    except ValueError:
        logger.warning("Ignoring unreadable trigger fire_at value: %s", raw)
        return None


def _row_to_trigger(row: sqlite3.Row) -> Trigger:
    return Trigger(
        id=str(row["id"]),
        handler_name=str(row["handler_name"] or ""),
        trigger_type=str(row["trigger_type"] or ""),
        fire_at=_parse_instant(row["fire_at"]),
        form_id=row["form_id"],
    )


class SqliteTriggerPlatform(TriggerPlatform):
    """Trigger list shared by every system installed on this host."""

    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def list_triggers(self) -> list[Trigger]:
        try:
            rows = self._conn.execute(
                "SELECT * FROM triggers ORDER BY created_at, id"
            ).fetchall()
        except sqlite3.Error as exc:
            raise TriggerPlatformError("Failed to list triggers") from exc
        return [_row_to_trigger(row) for row in rows]

    def delete(self, trigger: Trigger) -> None:
        try:
            self._conn.execute("DELETE FROM triggers WHERE id = ?", (trigger.id,))
            self._conn.commit()
        except sqlite3.Error as exc:
            raise TriggerPlatformError(f"Failed to delete trigger {trigger.id}") from exc

    def _insert(self, trigger: Trigger) -> Trigger:
        try:
            self._conn.execute(
                """
                INSERT INTO triggers (id, handler_name, trigger_type, fire_at, form_id)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    trigger.id,
                    trigger.handler_name,
                    trigger.trigger_type,
                    trigger.fire_at.isoformat() if trigger.fire_at else None,
                    trigger.form_id,
                ),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise TriggerPlatformError(f"Failed to create {trigger.trigger_type} trigger") from exc
        return trigger

    def create_time_trigger(self, handler_name: str, instant: datetime) -> Trigger:
        return self._insert(
            Trigger(
                id=f"trigger-{uuid4().hex[:12]}",
                handler_name=handler_name,
                trigger_type=TIME_TRIGGER,
                fire_at=instant,
            )
        )

    def create_event_trigger(self, handler_name: str, form_ref: FormRef) -> Trigger:
        return self._insert(
            Trigger(
                id=f"trigger-{uuid4().hex[:12]}",
                handler_name=handler_name,
                trigger_type=EVENT_TRIGGER,
                form_id=form_ref.id,
            )
        )
