import asyncio
import logging
import os

from .db.database import get_db
from .engines.closing import build_context, fire_due_deadline_triggers

logger = logging.getLogger(__name__)

_scheduler_task: asyncio.Task | None = None
DEFAULT_POLL_SECONDS = 30


def _resolve_poll_seconds() -> int:
    env_value = os.environ.get("DEADLINE_POLL_SECONDS")
    if env_value:
        try:
            parsed = int(env_value)
            if parsed > 0:
                return parsed
        except ValueError:
            pass
        logger.warning("Invalid DEADLINE_POLL_SECONDS value: %s", env_value)
    return DEFAULT_POLL_SECONDS


def run_deadline_tick() -> int:
    conn = get_db()
    try:
        fired = fire_due_deadline_triggers(build_context(conn))
    finally:
        conn.close()
    if fired:
        logger.info("Fired %d deadline trigger(s)", fired)
    return fired


async def _deadline_scheduler_loop() -> None:
    poll_seconds = _resolve_poll_seconds()
    while True:
        try:
            run_deadline_tick()
        except Exception:
            logger.exception("Scheduled deadline check failed")
        await asyncio.sleep(poll_seconds)


def start_deadline_scheduler() -> None:
    global _scheduler_task
    if _scheduler_task and not _scheduler_task.done():
        return
    loop = asyncio.get_running_loop()
    _scheduler_task = loop.create_task(_deadline_scheduler_loop())
    logger.info("Deadline scheduler started")


async def stop_deadline_scheduler() -> None:
    global _scheduler_task
    if _scheduler_task is None:
        return
    _scheduler_task.cancel()
    try:
        await _scheduler_task
    except asyncio.CancelledError:
        pass
    _scheduler_task = None
    logger.info("Deadline scheduler stopped")
