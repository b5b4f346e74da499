from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..common.datetime_utils import ensure_aware, round_half_up
from ..core.constants import DEFAULT_STANDARD_WORK_HOURS


def work_minutes(clock_in: Optional[datetime], clock_out: Optional[datetime]) -> int:
    """Whole minutes between clock-in and clock-out, never negative."""
    if clock_in is None or clock_out is None:
        return 0
    seconds = (ensure_aware(clock_out) - ensure_aware(clock_in)).total_seconds()
    return max(0, int(round_half_up(seconds / 60)))


def compute_work_hours(clock_in: Optional[datetime], clock_out: Optional[datetime]) -> float:
    """Elapsed hours, rounded to the nearest minute first."""
    return work_minutes(clock_in, clock_out) / 60


def report_hours(hours: float) -> float:
    """Hours as reported to clients (2 decimal places)."""
    return round_half_up(hours, 2)


def format_duration(minutes: int) -> str:
    return f"{minutes // 60}h {minutes % 60}m"


def exceeds_standard_day(minutes: int, standard_hours: float = DEFAULT_STANDARD_WORK_HOURS) -> bool:
    return minutes > int(standard_hours * 60)
