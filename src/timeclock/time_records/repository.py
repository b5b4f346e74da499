from __future__ import annotations

from datetime import date
from typing import ContextManager, Iterable, Optional, Protocol, Sequence, Tuple

from ..core.enums import WorkStatus
from ..employees.model import Schedule
from .model import TimeRecord, TimeRecordRow


class TimeRecordRepository(Protocol):
    def atomic(self) -> ContextManager["TimeRecordRepository"]:
        """Run the enclosed calls as one transaction.

        The yielded repository commits when the block exits normally and
        rolls every write back when it raises.
        """
        raise NotImplementedError

    def lock(self, employee_id: str, record_date: date) -> Optional[TimeRecord]:
        """Read the (employee, date) record and hold it until the transaction ends."""
        raise NotImplementedError

    def get_record(self, employee_id: str, record_date: date) -> Optional[TimeRecord]:
        raise NotImplementedError

    def insert(self, record: TimeRecord) -> TimeRecord:
        raise NotImplementedError

    def update(self, record: TimeRecord) -> int:
        """Rewrite the (employee, date) record. Returns rows affected."""
        raise NotImplementedError

    def upsert(self, record: TimeRecord) -> TimeRecord:
        raise NotImplementedError

    def delete(self, employee_id: str, record_date: date) -> int:
        raise NotImplementedError

    def list_stale_incomplete(self, before: date) -> Sequence[TimeRecord]:
        raise NotImplementedError

    def delete_by_ids(self, ids: Iterable[int]) -> int:
        raise NotImplementedError

    def list_complete_with_schedules(self) -> Sequence[Tuple[TimeRecord, Schedule]]:
        raise NotImplementedError

    def update_computed(self, record_id: int, *, status: WorkStatus, work_hours: float) -> bool:
        raise NotImplementedError

    def count_for_employee(self, employee_id: str) -> int:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TimeRecordRow]:
        raise NotImplementedError
