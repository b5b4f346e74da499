from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ClockMinutes:
    """Clock events and schedule expressed as minutes since midnight."""

    clock_in: int
    clock_out: Optional[int]
    scheduled_start: int
    scheduled_end: int


class StatusRule(ABC):
    """Strategy Pattern: one condition that contributes a part of the status."""

    part: str = ""

    @abstractmethod
    def matches(self, minutes: ClockMinutes) -> bool:
        raise NotImplementedError
