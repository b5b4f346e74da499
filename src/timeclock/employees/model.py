from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Schedule:
    """Scheduled start/end of an employee's working day ("HH:MM")."""

    start_time: str
    end_time: str


@dataclass(frozen=True)
class Employee:
    """Domain entity: employee master data.

    Note: plain data object (no DB access code).
    """

    id: int
    employee_id: str
    name: str
    department: Optional[str]
    work_start_time: str
    work_end_time: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def schedule(self) -> Schedule:
        return Schedule(start_time=self.work_start_time, end_time=self.work_end_time)
