import sqlite3
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..db.database import get_db
from ..engines.closing import ClosingContext, build_context, get_settings, save_settings

router = APIRouter(prefix="", tags=["settings"])


class SaveSettingsRequest(BaseModel):
    date: Any = ""
    time: Any = ""
    number: Any = ""


def db_conn():
    conn = get_db()
    try:
        yield conn
    finally:
        conn.close()


def closing_context(db: sqlite3.Connection = Depends(db_conn)) -> ClosingContext:
    return build_context(db)


@router.get("/settings")
def read_settings(ctx: ClosingContext = Depends(closing_context)):
    result = get_settings(ctx)
    if not result["success"]:
        return JSONResponse(status_code=500, content=result)
    return result


@router.put("/settings")
def update_settings(payload: SaveSettingsRequest, ctx: ClosingContext = Depends(closing_context)):
    result = save_settings(ctx, payload.date, payload.time, payload.number)
    if not result["success"]:
        return JSONResponse(status_code=400, content=result)
    return result
