from __future__ import annotations

from .base import ClockMinutes, StatusRule


class LateRule(StatusRule):
    """Clock-in strictly after the scheduled start."""

    part = "Late"

    def matches(self, minutes: ClockMinutes) -> bool:
        return minutes.clock_in > minutes.scheduled_start
