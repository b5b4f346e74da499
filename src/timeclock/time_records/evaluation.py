from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_business_time
from ..core.enums import WorkStatus
from ..employees.model import Schedule
from .status import determine_status
from .work_hours import compute_work_hours


@dataclass(frozen=True)
class Evaluation:
    status: WorkStatus
    work_hours: float


def evaluate(clock_in: datetime, clock_out: Optional[datetime], schedule: Schedule) -> Evaluation:
    """Status and work hours for one record, shared by every write path."""
    status = determine_status(
        to_business_time(clock_in),
        to_business_time(clock_out) if clock_out is not None else None,
        schedule.start_time,
        schedule.end_time,
    )
    return Evaluation(status=status, work_hours=compute_work_hours(clock_in, clock_out))
