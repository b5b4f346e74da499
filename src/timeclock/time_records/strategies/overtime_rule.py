from __future__ import annotations

from .base import ClockMinutes, StatusRule


class OvertimeRule(StatusRule):
    """Clock-out strictly after the scheduled end."""

    part = "Overtime"

    def matches(self, minutes: ClockMinutes) -> bool:
        return minutes.clock_out is not None and minutes.clock_out > minutes.scheduled_end
