from pathlib import Path

from .database import get_db

DEFAULT_FORM_ID = "intake"
DEFAULT_FORM_TITLE = "Intake form"

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS policy_settings (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS forms (
    id TEXT PRIMARY KEY,
    title TEXT NOT NULL,
    accepting_responses INTEGER DEFAULT 1,
    is_active INTEGER DEFAULT 1,
    created_at TEXT DEFAULT (datetime('now')),
    updated_at TEXT DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS form_responses (
    id TEXT PRIMARY KEY,
    form_id TEXT NOT NULL REFERENCES forms(id),
    answers_json TEXT,
    submitted_at TEXT DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_form_responses_form_id ON form_responses(form_id);

CREATE TABLE IF NOT EXISTS triggers (
    id TEXT PRIMARY KEY,
    handler_name TEXT NOT NULL,
    trigger_type TEXT NOT NULL CHECK (trigger_type IN ('time', 'event')),
    fire_at TEXT,
    form_id TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);
"""


def init_db(db_path: str | Path | None = None) -> None:
    conn = get_db(db_path)
    try:
        conn.executescript(SCHEMA_SQL)
        conn.execute(
            """
            INSERT INTO forms (id, title)
            VALUES (?, ?)
            ON CONFLICT(id) DO NOTHING
            """,
            (DEFAULT_FORM_ID, DEFAULT_FORM_TITLE),
        )
        conn.commit()
    finally:
        conn.close()
