from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_hhmm, require_non_empty
from ..core.constants import DEFAULT_WORK_END, DEFAULT_WORK_START
from ..core.exceptions import ConflictError, NotFoundError
from ..time_records.repository import TimeRecordRepository
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger("timeclock.employees")


class EmployeeService:
    """Use case: manage employee master data (admin)."""

    def __init__(self, employees: EmployeeRepository, records: TimeRecordRepository):
        self._employees = employees
        self._records = records

    def list_employees(self) -> Sequence[Employee]:
        return self._employees.list_all()

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_employee_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        employee_id: str,
        name: str,
        department: Optional[str] = None,
        work_start_time: Optional[str] = None,
        work_end_time: Optional[str] = None,
    ) -> int:
        employee_id = require_non_empty(employee_id, "employee_id")
        name = require_non_empty(name, "name")
        start = require_hhmm(work_start_time or DEFAULT_WORK_START, "work_start_time")
        end = require_hhmm(work_end_time or DEFAULT_WORK_END, "work_end_time")

        if self._employees.get_by_employee_id(employee_id):
            raise ConflictError("Employee ID already exists")

        new_id = self._employees.create(
            employee_id=employee_id,
            name=name,
            department=(department or "").strip() or None,
            work_start_time=start,
            work_end_time=end,
        )
        logger.info("employee %s created", employee_id)
        return new_id

    def update_employee(
        self,
        *,
        id: int,
        employee_id: str,
        name: str,
        department: Optional[str],
        work_start_time: str,
        work_end_time: str,
    ) -> None:
        employee_id = require_non_empty(employee_id, "employee_id")
        name = require_non_empty(name, "name")
        start = require_hhmm(work_start_time, "work_start_time")
        end = require_hhmm(work_end_time, "work_end_time")

        existing = self._employees.get_by_employee_id(employee_id)
        if existing and existing.id != int(id):
            raise ConflictError("Employee ID already exists")

        ok = self._employees.update(
            id=int(id),
            employee_id=employee_id,
            name=name,
            department=(department or "").strip() or None,
            work_start_time=start,
            work_end_time=end,
        )
        if not ok:
            raise NotFoundError("Employee not found")

    def delete_employee(self, id: int) -> None:
        """Delete an employee that has no time records.

        Records are never removed as a side effect; they have to be deleted
        (and audited) through the correction workflow first.
        """
        employee = self._employees.get_by_id(int(id))
        if employee is None:
            raise NotFoundError("Employee not found")
        if self._records.count_for_employee(employee.employee_id):
            raise ConflictError("Employee has time records")
        if not self._employees.delete(int(id)):
            raise NotFoundError("Employee not found")
        logger.info("employee row %s deleted", id)
