import sys
from datetime import datetime
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from app.db.database import get_db
from app.db.schema import init_db
from app.engines.closing import build_context


@pytest.fixture
def now() -> datetime:
    return datetime(2026, 10, 19, 12, 0)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    path = tmp_path / "form_closer.db"
    init_db(path)
    return path


@pytest.fixture
def conn(db_path: Path):
    connection = get_db(db_path)
    try:
        yield connection
    finally:
        connection.close()


@pytest.fixture
def ctx(conn, now):
    return build_context(conn, clock=lambda: now)
