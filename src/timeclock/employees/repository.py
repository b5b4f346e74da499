from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Employee, Schedule


class EmployeeRepository(Protocol):
    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_id(self, id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_schedule(self, employee_id: str) -> Optional[Schedule]:
        raise NotImplementedError

    def create(
        self,
        *,
        employee_id: str,
        name: str,
        department: Optional[str],
        work_start_time: str,
        work_end_time: str,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        *,
        id: int,
        employee_id: str,
        name: str,
        department: Optional[str],
        work_start_time: str,
        work_end_time: str,
    ) -> bool:
        raise NotImplementedError

    def delete(self, id: int) -> bool:
        raise NotImplementedError
