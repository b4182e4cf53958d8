from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

TIME_OF_DAY_FORMAT = "%H:%M:%S"


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def to_epoch_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def epoch_millis() -> int:
    return to_epoch_millis(now_local())


def format_time_of_day(value: Optional[time]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(TIME_OF_DAY_FORMAT)


def parse_time_of_day(value: Optional[str]) -> Optional[time]:
    """Parse a stored ``HH:MM:SS`` (or ``HH:MM``) string; ``None`` stays ``None``."""

    if value is None or value == "":
        return None
    parts = str(value).strip().split(":")
    if len(parts) < 2:
        raise ValueError(f"Invalid time string: {value!r}")
    hours = int(parts[0])
    minutes = int(parts[1])
    seconds = int(parts[2]) if len(parts) >= 3 and parts[2] else 0
    return time(hour=hours, minute=minutes, second=seconds)
