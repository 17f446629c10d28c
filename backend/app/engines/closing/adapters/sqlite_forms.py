import json
import sqlite3
from typing import Any
from uuid import uuid4

from ..errors import FormPlatformError
from .base import FormProvider, FormRef


class SqliteFormRef(FormRef):
    def __init__(self, conn: sqlite3.Connection, form_id: str):
        self._conn = conn
        self.id = form_id

    def _fetch_row(self) -> sqlite3.Row:
        try:
            row = self._conn.execute("SELECT * FROM forms WHERE id = ?", (self.id,)).fetchone()
        except sqlite3.Error as exc:
            raise FormPlatformError(f"Failed to read form {self.id}") from exc
        if row is None:
            raise FormPlatformError(f"Form not found: {self.id}")
        return row

    @property
    def title(self) -> str:
        return str(self._fetch_row()["title"] or "")

    def is_accepting_responses(self) -> bool:
        return bool(self._fetch_row()["accepting_responses"])

    def get_response_count(self) -> int:
        try:
            row = self._conn.execute(
                "SELECT COUNT(*) FROM form_responses WHERE form_id = ?", (self.id,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise FormPlatformError(f"Failed to count responses for form {self.id}") from exc
        return int(row[0]) if row else 0

    def set_accepting_responses(self, accepting: bool) -> None:
        try:
            self._conn.execute(
                """
                UPDATE forms
                SET accepting_responses = ?, updated_at = datetime('now')
                WHERE id = ?
                """,
                (1 if accepting else 0, self.id),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise FormPlatformError(f"Failed to update form {self.id}") from exc

    def record_response(self, answers: dict[str, Any]) -> str:
        response_id = f"response-{uuid4().hex[:12]}"
        try:
            self._conn.execute(
                """
                INSERT INTO form_responses (id, form_id, answers_json, submitted_at)
                VALUES (?, ?, ?, datetime('now'))
                """,
                (response_id, self.id, json.dumps(answers)),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise FormPlatformError(f"Failed to record response for form {self.id}") from exc
        return response_id


class SqliteFormProvider(FormProvider):
    def __init__(self, conn: sqlite3.Connection):
        self._conn = conn

    def get_active(self) -> SqliteFormRef:
        try:
            row = self._conn.execute(
                """
                SELECT id FROM forms
                WHERE is_active = 1
                ORDER BY created_at, id
                LIMIT 1
                """
            ).fetchone()
        except sqlite3.Error as exc:
            raise FormPlatformError("Failed to look up the active form") from exc
        if row is None:
            raise FormPlatformError("No active form configured")
        return SqliteFormRef(self._conn, str(row[0]))
