from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Tuple
from zoneinfo import ZoneInfo

from ..core.exceptions import ValidationError

_TIME_FORMATS = ("%H:%M:%S", "%H:%M", "%I:%M %p", "%I:%M:%S %p")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(str(value).strip()[:10], "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_time_of_day(value) -> time:
    """Parse shift times such as '09:00', '17:30:00' or '2:00 PM'."""
    if isinstance(value, time):
        return value
    text = str(value or "").strip().upper()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time {value!r}")


def parse_timestamp(value, *, tz: Optional[str] = None) -> datetime:
    """Parse an ISO-8601 timestamp into naive local time.

    Aware values (e.g. '...Z') are converted into ``tz`` first so that every
    comparison in the app works on the same wall clock.
    """
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value or "").strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"Invalid timestamp {value!r}")

    if parsed.tzinfo is not None:
        if tz:
            parsed = parsed.astimezone(ZoneInfo(tz))
        parsed = parsed.replace(tzinfo=None)
    return parsed


def shift_window(work_date: date, start: time, end: time) -> Tuple[datetime, datetime]:
    """Start/end datetimes of a shift worked on ``work_date``.

    An end at or before the start means the shift crosses midnight.
    """
    start_dt = datetime.combine(work_date, start)
    end_dt = datetime.combine(work_date, end)
    if end_dt <= start_dt:
        end_dt += timedelta(days=1)
    return start_dt, end_dt


def shift_duration(start: time, end: time) -> timedelta:
    start_dt, end_dt = shift_window(date(2000, 1, 1), start, end)
    return end_dt - start_dt


def format_duration(value: Optional[timedelta]) -> str:
    """Render a duration as HH:MM:SS (hours may exceed 24)."""
    total = int(value.total_seconds()) if value else 0
    total = max(total, 0)
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def duration_hours(value: Optional[timedelta]) -> Decimal:
    if not value:
        return Decimal("0")
    return Decimal(int(value.total_seconds())) / Decimal(3600)


def format_time_of_day(value: Optional[time]) -> Optional[str]:
    return value.strftime("%H:%M") if value else None
