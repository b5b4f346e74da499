from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Any, Optional

from ..common.datetime_utils import format_iso_date, format_iso_instant
from ..core.enums import WorkStatus
from ..core.exceptions import ValidationError
from .work_hours import report_hours


@dataclass(frozen=True)
class TimeRecord:
    """Domain entity: one employee's attendance for one calendar day."""

    employee_id: str
    record_date: date
    clock_in_time: Optional[datetime]
    clock_out_time: Optional[datetime]
    status: WorkStatus = WorkStatus.NORMAL
    work_hours: float = 0.0
    is_manual_entry: bool = False
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        if not self.employee_id:
            raise ValidationError("employee_id is required")
        if self.clock_out_time is not None and self.clock_in_time is None:
            raise ValidationError("clock_out_time requires clock_in_time")
        if self.work_hours < 0:
            raise ValidationError("work_hours must not be negative")

    @property
    def key(self) -> str:
        """Composite identifier used by the audit log."""
        return record_key(self.employee_id, self.record_date)

    @property
    def is_complete(self) -> bool:
        return self.clock_in_time is not None and self.clock_out_time is not None

    def with_changes(self, **changes: Any) -> "TimeRecord":
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employee_id": self.employee_id,
            "record_date": format_iso_date(self.record_date),
            "clock_in_time": format_iso_instant(self.clock_in_time),
            "clock_out_time": format_iso_instant(self.clock_out_time),
            "status": self.status.value,
            "work_hours": report_hours(self.work_hours),
            "is_manual_entry": self.is_manual_entry,
            "created_at": format_iso_instant(self.created_at),
            "updated_at": format_iso_instant(self.updated_at),
        }


@dataclass(frozen=True)
class TimeRecordRow:
    """Read-model for listings and exports (record joined with its employee)."""

    record: TimeRecord
    employee_name: str
    department: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["employee_name"] = self.employee_name
        data["department"] = self.department
        return data


def record_key(employee_id: str, record_date: date) -> str:
    return f"{employee_id}-{format_iso_date(record_date)}"
