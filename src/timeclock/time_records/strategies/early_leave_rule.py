from __future__ import annotations

from .base import ClockMinutes, StatusRule


class EarlyLeaveRule(StatusRule):
    """Clock-out strictly before the scheduled end."""

    part = "EarlyLeave"

    def matches(self, minutes: ClockMinutes) -> bool:
        return minutes.clock_out is not None and minutes.clock_out < minutes.scheduled_end
