from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

from ..audit.service import AuditRecorder
from ..common.validators import optional_instant, require_date, require_instant, require_non_empty
from ..core.enums import AuditAction, CorrectionAction
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Schedule
from ..employees.repository import EmployeeRepository
from ..time_records.evaluation import evaluate
from ..time_records.model import TimeRecord, record_key
from ..time_records.repository import TimeRecordRepository

logger = logging.getLogger("timeclock.corrections")


@dataclass(frozen=True)
class Correction:
    """Validated administrator correction for one (employee, date)."""

    employee_id: str
    record_date: date
    clock_in_time: datetime
    clock_out_time: Optional[datetime]
    reason: str

    @classmethod
    def parse(
        cls,
        *,
        employee_id: Any,
        record_date: Any,
        clock_in_time: Any,
        clock_out_time: Any,
        reason: Any,
    ) -> "Correction":
        return cls(
            employee_id=require_non_empty(employee_id, "employee_id"),
            record_date=require_date(record_date, "record_date"),
            reason=require_non_empty(reason, "reason"),
            clock_in_time=require_instant(clock_in_time, "clock_in_time"),
            clock_out_time=optional_instant(clock_out_time, "clock_out_time"),
        )

    @property
    def key(self) -> str:
        return record_key(self.employee_id, self.record_date)


@dataclass(frozen=True)
class DeletionResult:
    deleted_count: int

    def to_dict(self) -> dict:
        return {"deleted_count": self.deleted_count}


class CorrectionService:
    """Use case: administrator corrections of stored time records.

    Every successful call appends exactly one audit entry. The entry is
    written after the record transaction commits and a failed write never
    undoes the correction.
    """

    def __init__(self, records: TimeRecordRepository, employees: EmployeeRepository, audit: AuditRecorder):
        self._records = records
        self._employees = employees
        self._audit = audit

    def _schedule_for(self, employee_id: str) -> Schedule:
        schedule = self._employees.get_schedule(employee_id)
        if schedule is None:
            raise NotFoundError("Employee not found")
        return schedule

    def correct_record(
        self,
        *,
        action: Any,
        employee_id: Any,
        record_date: Any,
        clock_in_time: Any,
        clock_out_time: Any = None,
        reason: Any,
    ) -> TimeRecord:
        try:
            action = CorrectionAction(action)
        except ValueError:
            raise ValidationError("Invalid action")

        correction = Correction.parse(
            employee_id=employee_id,
            record_date=record_date,
            clock_in_time=clock_in_time,
            clock_out_time=clock_out_time,
            reason=reason,
        )
        if action == CorrectionAction.DELETE_AND_CREATE:
            return self.delete_and_recreate(correction)
        return self.update_in_place(correction)

    def update_in_place(self, correction: Correction) -> TimeRecord:
        schedule = self._schedule_for(correction.employee_id)
        evaluation = evaluate(correction.clock_in_time, correction.clock_out_time, schedule)

        with self._records.atomic() as tx:
            existing = tx.lock(correction.employee_id, correction.record_date)
            if existing is None:
                raise NotFoundError("Time record not found")

            record = existing.with_changes(
                clock_in_time=correction.clock_in_time,
                clock_out_time=correction.clock_out_time,
                status=evaluation.status,
                work_hours=evaluation.work_hours,
                is_manual_entry=True,
            )
            tx.update(record)
            record = tx.get_record(correction.employee_id, correction.record_date) or record

        logger.info("record %s updated in place -> %s", correction.key, evaluation.status.value)
        self._audit.record(record_id=correction.key, action=AuditAction.UPDATE, reason=correction.reason)
        return record

    def delete_and_recreate(self, correction: Correction) -> TimeRecord:
        with self._records.atomic() as tx:
            tx.lock(correction.employee_id, correction.record_date)
            removed = tx.delete(correction.employee_id, correction.record_date)

            schedule = self._schedule_for(correction.employee_id)
            evaluation = evaluate(correction.clock_in_time, correction.clock_out_time, schedule)

            record = tx.insert(
                TimeRecord(
                    employee_id=correction.employee_id,
                    record_date=correction.record_date,
                    clock_in_time=correction.clock_in_time,
                    clock_out_time=correction.clock_out_time,
                    status=evaluation.status,
                    work_hours=evaluation.work_hours,
                    is_manual_entry=True,
                )
            )

        logger.info(
            "record %s recreated (%d removed) -> %s",
            correction.key,
            removed,
            evaluation.status.value,
        )
        self._audit.record(
            record_id=correction.key,
            action=AuditAction.DELETE_AND_CREATE,
            reason=correction.reason,
        )
        return record

    def delete_record(self, *, employee_id: Any, record_date: Any, reason: Any) -> DeletionResult:
        employee_id = require_non_empty(employee_id, "employee_id")
        record_date = require_date(record_date, "record_date")
        reason = require_non_empty(reason, "reason")

        with self._records.atomic() as tx:
            deleted = tx.delete(employee_id, record_date)
            if deleted == 0:
                raise NotFoundError("Time record not found")

        key = record_key(employee_id, record_date)
        logger.info("record %s deleted", key)
        self._audit.record(record_id=key, action=AuditAction.DELETE, reason=reason)
        return DeletionResult(deleted_count=deleted)
