from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Optional

from ..core.constants import DATE_FORMAT, TIME_FORMAT
from ..core.exceptions import InvalidDateError, InvalidTimeFormatError, ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def parse_time_of_day(value: str) -> time:
    """Parse HH:MM:SS string into time."""
    return datetime.strptime(value, TIME_FORMAT).time()


def require_date(value) -> date:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise InvalidDateError("Invalid date format, use YYYY-MM-DD", detail=str(value))


def require_time_of_day(value) -> time:
    if isinstance(value, time):
        return value
    try:
        return parse_time_of_day(str(value or "").strip())
    except ValueError:
        raise InvalidTimeFormatError("Invalid time format, use HH:MM:SS", detail=str(value))


def format_time(value: Optional[time]) -> Optional[str]:
    return value.strftime(TIME_FORMAT) if value is not None else None


def format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime(DATE_FORMAT) if value is not None else None


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max)


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    return day.replace(day=calendar.monthrange(day.year, day.month)[1])


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-day range."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValidationError("end_date cannot be before start_date")

    @property
    def start_at(self) -> datetime:
        return start_of_day(self.start)

    @property
    def end_at(self) -> datetime:
        return end_of_day(self.end)


def parse_date_param(value: Optional[str], default: date) -> date:
    """Parse an optional YYYY-MM-DD query value, falling back to default."""

    if not value:
        return default
    try:
        return parse_iso_date(value.strip())
    except ValueError:
        return default


def date_range_from_params(
    start_value: Optional[str],
    end_value: Optional[str],
    *,
    default_start: date,
    default_end: date,
) -> DateRange:
    return DateRange(
        start=parse_date_param(start_value, default_start),
        end=parse_date_param(end_value, default_end),
    )
