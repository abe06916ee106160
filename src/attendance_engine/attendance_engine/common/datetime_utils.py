from __future__ import annotations

import calendar
import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from functools import lru_cache
from typing import Any, Optional
from zoneinfo import ZoneInfo

_HAS_OFFSET = re.compile(r"[+-]\d{2}(:?\d{2})?$")
# "+07" style offsets after a clock time; fromisoformat wants "+07:00".
_SHORT_OFFSET = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)([+-]\d{2})$")
_ONE_MS = timedelta(milliseconds=1)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_time_of_day(value: str | time) -> time:
    """Parse HH:MM or HH:MM:SS into a time of day."""
    if isinstance(value, time):
        return value
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time of day: {value!r}")
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=int(parts[0]), minute=int(parts[1]), second=seconds)


def parse_event_time(value: Any) -> Optional[datetime]:
    """Interpret a stored event time as an absolute UTC instant.

    Values without a zone designator are UTC by convention, never local time.
    Returns None when the value cannot be parsed.
    """

    if value is None:
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    text = str(value).strip()
    if not text:
        return None
    if "Z" not in text and not _HAS_OFFSET.search(text):
        text = text.replace(" ", "T", 1)
    text = text.replace("Z", "+00:00")
    text = _SHORT_OFFSET.sub(r"\1\2:00", text)

    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


@lru_cache(maxsize=None)
def get_zone(name: str) -> tzinfo:
    return ZoneInfo(name)


def local_date(instant: datetime, tz: tzinfo) -> date:
    return instant.astimezone(tz).date()


def local_time_of_day(instant: datetime, tz: tzinfo) -> time:
    return instant.astimezone(tz).time()


def millis_between(start: datetime, end: datetime) -> int:
    """Whole milliseconds from start to end (floored)."""
    return (end - start) // _ONE_MS


def split_millis(millis: int) -> tuple[int, int, int]:
    """Decompose a duration into hours/minutes/seconds using floor division."""
    total_seconds = max(int(millis), 0) // 1000
    return total_seconds // 3600, (total_seconds % 3600) // 60, total_seconds % 60


def format_hms(millis: int) -> str:
    hours, minutes, seconds = split_millis(millis)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def month_dates(year: int, month: int) -> list[date]:
    _, days = calendar.monthrange(year, month)
    return [date(year, month, day) for day in range(1, days + 1)]
