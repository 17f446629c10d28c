from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

DATE_KEY = "date"
TIME_KEY = "time"
NUMBER_KEY = "number"
SETTINGS_KEYS = (DATE_KEY, TIME_KEY, NUMBER_KEY)

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"


def clean_value(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw).strip()


def _parse_date(raw: Any) -> Optional[date]:
    value = clean_value(raw)
    if not value:
        return None
    try:
        return datetime.strptime(value, DATE_FORMAT).date()
    except ValueError:
        return None


def _parse_time(raw: Any) -> Optional[time]:
    value = clean_value(raw)
    if not value:
        return None
    try:
        return datetime.strptime(value, TIME_FORMAT).time()
    except ValueError:
        return None


def _parse_count(raw: Any) -> Optional[int]:
    value = clean_value(raw)
    if not value:
        return None
    try:
        parsed = int(value)
    except ValueError:
        return None
    return parsed if parsed > 0 else None


@dataclass(frozen=True)
class ClosingSettings:
    """The persisted closing policy for the intake form.

    Attributes:
        deadline_date: Calendar day the form closes on, or None.
        deadline_time: Time of day on ``deadline_date``; 00:00 when missing.
        max_count: Number of responses after which the form closes, or None.
    """

    deadline_date: Optional[date] = None
    deadline_time: Optional[time] = None
    max_count: Optional[int] = None

    @property
    def has_deadline(self) -> bool:
        return self.deadline_date is not None

    @property
    def has_count_limit(self) -> bool:
        return self.max_count is not None

    @property
    def is_active(self) -> bool:
        return self.has_deadline or self.has_count_limit

    def deadline_at(self) -> Optional[datetime]:
        if self.deadline_date is None:
            return None
        return datetime.combine(self.deadline_date, self.deadline_time or time(0, 0))

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "ClosingSettings":
        """Read a stored mapping; unparseable values read as unset."""
        return cls(
            deadline_date=_parse_date(raw.get(DATE_KEY)),
            deadline_time=_parse_time(raw.get(TIME_KEY)),
            max_count=_parse_count(raw.get(NUMBER_KEY)),
        )

    def to_mapping(self) -> dict[str, str]:
        return {
            DATE_KEY: self.deadline_date.strftime(DATE_FORMAT) if self.deadline_date else "",
            TIME_KEY: self.deadline_time.strftime(TIME_FORMAT) if self.deadline_time else "",
            NUMBER_KEY: str(self.max_count) if self.max_count is not None else "",
        }
