"""Time arithmetic shared by the clock, correction and maintenance flows.

Instants are handled as timezone-aware ``datetime`` objects. Naive values
are taken to be UTC, which is how they are stored in the database.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Optional

from ..core.constants import BUSINESS_UTC_OFFSET_HOURS

BUSINESS_TZ = timezone(timedelta(hours=BUSINESS_UTC_OFFSET_HOURS), name="JST")


def now_utc() -> datetime:
    """Current instant.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(timezone.utc)


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_business_time(value: datetime) -> datetime:
    """Express an instant in the fixed UTC+9 business calendar."""
    return ensure_aware(value).astimezone(BUSINESS_TZ)


def to_storage(value: Optional[datetime]) -> Optional[datetime]:
    """Naive UTC value for DATETIME columns."""
    if value is None:
        return None
    return ensure_aware(value).astimezone(timezone.utc).replace(tzinfo=None)


def from_storage(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    return ensure_aware(value)


def record_date_for(value: datetime) -> date:
    """Calendar day (UTC+9) a clock event belongs to."""
    return to_business_time(value).date()


def minutes_of_day(value: datetime) -> int:
    """Wall-clock minutes since midnight, read from the value's own fields."""
    return value.hour * 60 + value.minute


def _ascii_number(text: str) -> Optional[int]:
    # str.isdigit() also accepts superscripts and other Unicode digits
    text = text.strip()
    if not text or not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def parse_hhmm(value: Optional[str]) -> Optional[int]:
    """Parse "HH:MM" (optionally "HH:MM:SS") into minutes since midnight.

    Returns None when the value has no colon, a non-numeric part, more than
    three parts, or a field outside the 24-hour clock.
    """
    if not value or ":" not in value:
        return None
    parts = value.strip().split(":")
    if len(parts) > 3:
        return None
    numbers = [_ascii_number(p) for p in parts]
    if any(n is None for n in numbers):
        return None
    hour, minute = numbers[0], numbers[1]
    if hour > 23 or minute > 59:
        return None
    if len(numbers) == 3 and numbers[2] > 59:
        return None
    return hour * 60 + minute


def is_valid_hhmm(value: Optional[str]) -> bool:
    return parse_hhmm(value) is not None


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def format_iso_date(value: date) -> str:
    return value.strftime("%Y-%m-%d")


def parse_iso_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant ("2024-04-01T00:05:00Z", "...+09:00")."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_aware(datetime.fromisoformat(text))


def format_iso_instant(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    utc = ensure_aware(value).astimezone(timezone.utc)
    return utc.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def cutoff_date(today: date, window_days: int) -> date:
    """First record date that is still inside a retention window."""
    return today - timedelta(days=int(window_days))
