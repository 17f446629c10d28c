import re
from datetime import date, datetime
from typing import Any, Optional

from .errors import ValidationError
from .settings import DATE_FORMAT, TIME_FORMAT, ClosingSettings, clean_value

MIN_RESPONSE_LIMIT = 1
MAX_RESPONSE_LIMIT = 10000

ERROR_NO_LIMIT = "At least one limit required: set a deadline date or a maximum number of responses."
ERROR_DATE_FORMAT = "Invalid date format. Use YYYY-MM-DD."
ERROR_DATE_PAST = "Date cannot be in the past."
ERROR_TIME_FORMAT = "Invalid time format. Use HH:MM (24-hour)."
ERROR_LIMIT_RANGE = f"Limit must be between {MIN_RESPONSE_LIMIT} and {MAX_RESPONSE_LIMIT}."

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$", re.ASCII)
_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$", re.ASCII)
_INT_RE = re.compile(r"^[+-]?\d+$", re.ASCII)


def _validate_date(value: str, today: date) -> date:
    if not _DATE_RE.match(value):
        raise ValidationError(ERROR_DATE_FORMAT)
    try:
        parsed = datetime.strptime(value, DATE_FORMAT).date()
    except ValueError as exc:
        raise ValidationError(ERROR_DATE_FORMAT) from exc
    if parsed < today:
        raise ValidationError(ERROR_DATE_PAST)
    return parsed


def _validate_time(value: str):
    if not _TIME_RE.match(value):
        raise ValidationError(ERROR_TIME_FORMAT)
    return datetime.strptime(value, TIME_FORMAT).time()


def _validate_count(value: str) -> int:
    if not _INT_RE.match(value):
        raise ValidationError(ERROR_LIMIT_RANGE)
    parsed = int(value)
    if parsed < MIN_RESPONSE_LIMIT or parsed > MAX_RESPONSE_LIMIT:
        raise ValidationError(ERROR_LIMIT_RANGE)
    return parsed


def validate_settings(
    deadline_date: Any = None,
    deadline_time: Any = None,
    max_count: Any = None,
    *,
    today: Optional[date] = None,
) -> ClosingSettings:
    """Check proposed settings and return them parsed.

    Rules run in order and the first failure wins. The past-date check is
    date-only; a deadline later today that has already elapsed is caught when
    the deadline trigger is installed.

    Raises:
        ValidationError: with the message to show the operator verbatim.
    """
    date_value = clean_value(deadline_date)
    time_value = clean_value(deadline_time)
    count_value = clean_value(max_count)
    today = today or date.today()

    if not date_value and not count_value:
        raise ValidationError(ERROR_NO_LIMIT)

    parsed_date = _validate_date(date_value, today) if date_value else None
    parsed_time = _validate_time(time_value) if time_value else None
    parsed_count = _validate_count(count_value) if count_value else None

    return ClosingSettings(
        deadline_date=parsed_date,
        deadline_time=parsed_time,
        max_count=parsed_count,
    )
