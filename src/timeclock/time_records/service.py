from __future__ import annotations

import logging
from calendar import monthrange
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc, record_date_for
from ..common.validators import require_non_empty
from ..core.enums import WorkStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Schedule
from ..employees.repository import EmployeeRepository
from .evaluation import evaluate
from .model import TimeRecord, TimeRecordRow
from .repository import TimeRecordRepository
from .work_hours import report_hours

logger = logging.getLogger("timeclock.clock")


@dataclass(frozen=True)
class ClockResult:
    status: WorkStatus
    record: TimeRecord
    work_hours: Optional[float] = None

    def to_dict(self) -> dict:
        data = {"status": self.status.value, "record": self.record.to_dict()}
        if self.work_hours is not None:
            data["work_hours"] = report_hours(self.work_hours)
        return data


class ClockService:
    """Use case: live clock-in/clock-out by employees, and record queries."""

    def __init__(
        self,
        records: TimeRecordRepository,
        employees: EmployeeRepository,
        *,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._records = records
        self._employees = employees
        self._clock = clock

    def _schedule_for(self, employee_id: str) -> Schedule:
        schedule = self._employees.get_schedule(employee_id)
        if schedule is None:
            raise NotFoundError("Employee not found")
        return schedule

    def clock_in(self, employee_id: str, *, at: Optional[datetime] = None) -> ClockResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        at = at or self._clock()
        today = record_date_for(at)
        schedule = self._schedule_for(employee_id)
        evaluation = evaluate(at, None, schedule)

        with self._records.atomic() as tx:
            existing = tx.lock(employee_id, today)
            if existing is not None and existing.clock_out_time is not None:
                raise ValidationError("Already clocked out today")
            if existing is None:
                existing = TimeRecord(
                    employee_id=employee_id,
                    record_date=today,
                    clock_in_time=at,
                    clock_out_time=None,
                )
            # insert, or rewrite the open record of the day
            record = tx.upsert(existing.with_changes(clock_in_time=at, status=evaluation.status, work_hours=0.0))

        logger.info("clock-in %s %s -> %s", employee_id, today, evaluation.status.value)
        return ClockResult(status=evaluation.status, record=record)

    def clock_out(self, employee_id: str, *, at: Optional[datetime] = None) -> ClockResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        at = at or self._clock()
        today = record_date_for(at)

        with self._records.atomic() as tx:
            record = tx.lock(employee_id, today)
            if record is None or record.clock_in_time is None:
                raise ValidationError("No clock-in record for today")

            schedule = self._schedule_for(employee_id)
            evaluation = evaluate(record.clock_in_time, at, schedule)
            record = record.with_changes(
                clock_out_time=at,
                status=evaluation.status,
                work_hours=evaluation.work_hours,
            )
            tx.update(record)
            record = tx.get_record(employee_id, today) or record

        logger.info(
            "clock-out %s %s -> %s (%.2fh)",
            employee_id,
            today,
            evaluation.status.value,
            evaluation.work_hours,
        )
        return ClockResult(status=evaluation.status, record=record, work_hours=evaluation.work_hours)

    def list_records(self) -> Sequence[TimeRecordRow]:
        return self._records.list_rows()

    def list_employee_records(
        self,
        employee_id: str,
        *,
        year: Optional[int] = None,
        month: Optional[int] = None,
    ) -> Sequence[TimeRecordRow]:
        start = end = None
        if year and month:
            if not 1 <= int(month) <= 12:
                raise ValidationError("month must be between 1 and 12")
            start = date(int(year), int(month), 1)
            end = date(int(year), int(month), monthrange(int(year), int(month))[1])
        return self._records.list_rows(employee_id=employee_id, start_date=start, end_date=end)

    def get_today_record(self, employee_id: str, *, now: Optional[datetime] = None) -> Optional[TimeRecord]:
        today = record_date_for(now or self._clock())
        return self._records.get_record(employee_id, today)
