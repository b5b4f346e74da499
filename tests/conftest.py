from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import pytest
from werkzeug.security import generate_password_hash

from timeclock.admins.model import Admin
from timeclock.audit.model import AuditLogEntry
from timeclock.container import ContainerOptions, assemble_container
from timeclock.core.exceptions import ConflictError, StorageError
from timeclock.employees.model import Employee, Schedule
from timeclock.time_records.model import TimeRecord, TimeRecordRow

JST = timezone(timedelta(hours=9))
NOW = datetime(2024, 4, 15, 9, 0, tzinfo=JST)


def jst(day: date, hour: int, minute: int = 0, second: int = 0) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, second, tzinfo=JST)


class FixedClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


class InMemoryEmployees:
    def __init__(self):
        self._by_id: dict[int, Employee] = {}
        self._next_id = 1

    def add(self, employee_id: str, name: str = "Test", start: str = "09:00", end: str = "17:00", department=None):
        return self.create(
            employee_id=employee_id,
            name=name,
            department=department,
            work_start_time=start,
            work_end_time=end,
        )

    def list_all(self):
        return sorted(self._by_id.values(), key=lambda e: e.employee_id)

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        return next((e for e in self._by_id.values() if e.employee_id == employee_id), None)

    def get_by_id(self, id: int) -> Optional[Employee]:
        return self._by_id.get(id)

    def get_schedule(self, employee_id: str) -> Optional[Schedule]:
        e = self.get_by_employee_id(employee_id)
        return e.schedule if e else None

    def create(self, *, employee_id, name, department, work_start_time, work_end_time) -> int:
        new_id = self._next_id
        self._next_id += 1
        self._by_id[new_id] = Employee(
            id=new_id,
            employee_id=employee_id,
            name=name,
            department=department,
            work_start_time=work_start_time,
            work_end_time=work_end_time,
        )
        return new_id

    def update(self, *, id, employee_id, name, department, work_start_time, work_end_time) -> bool:
        if id not in self._by_id:
            return False
        self._by_id[id] = replace(
            self._by_id[id],
            employee_id=employee_id,
            name=name,
            department=department,
            work_start_time=work_start_time,
            work_end_time=work_end_time,
        )
        return True

    def delete(self, id: int) -> bool:
        return self._by_id.pop(id, None) is not None


class InMemoryTimeRecords:
    """Fake store with (employee, date) uniqueness and transactional rollback."""

    def __init__(self, employees: InMemoryEmployees, clock=None):
        self._rows: dict[int, TimeRecord] = {}
        self._next_id = 1
        self._employees = employees
        self._clock = clock or FixedClock(NOW)
        self.fail_insert = False
        self.fail_update_ids: set[int] = set()
        self.calls: list[str] = []

    @contextmanager
    def atomic(self):
        snapshot = (dict(self._rows), self._next_id)
        try:
            yield self
        except Exception:
            self._rows, self._next_id = snapshot
            raise

    def _matching(self, employee_id: str, record_date: date) -> list[TimeRecord]:
        rows = [r for r in self._rows.values() if r.employee_id == employee_id and r.record_date == record_date]
        return sorted(rows, key=lambda r: r.id, reverse=True)

    def all(self) -> list[TimeRecord]:
        return sorted(self._rows.values(), key=lambda r: r.id)

    def lock(self, employee_id, record_date):
        self.calls.append("lock")
        return self.get_record(employee_id, record_date)

    def get_record(self, employee_id, record_date):
        rows = self._matching(employee_id, record_date)
        return rows[0] if rows else None

    def insert(self, record: TimeRecord) -> TimeRecord:
        self.calls.append("insert")
        if self.fail_insert:
            raise StorageError("insert failed")
        if self._matching(record.employee_id, record.record_date):
            raise ConflictError("duplicate record")
        now = self._clock()
        stored = replace(record, id=self._next_id, created_at=now, updated_at=now)
        self._rows[self._next_id] = stored
        self._next_id += 1
        return stored

    def update(self, record: TimeRecord) -> int:
        self.calls.append("update")
        rows = self._matching(record.employee_id, record.record_date)
        for r in rows:
            self._rows[r.id] = replace(
                record,
                id=r.id,
                is_manual_entry=record.is_manual_entry,
                created_at=r.created_at,
                updated_at=self._clock(),
            )
        return len(rows)

    def upsert(self, record: TimeRecord) -> TimeRecord:
        if self.update(record) == 0:
            return self.insert(record)
        return self.get_record(record.employee_id, record.record_date)

    def delete(self, employee_id, record_date) -> int:
        self.calls.append("delete")
        rows = self._matching(employee_id, record_date)
        for r in rows:
            del self._rows[r.id]
        return len(rows)

    def list_stale_incomplete(self, before: date):
        rows = [r for r in self._rows.values() if r.clock_out_time is None and r.record_date < before]
        return sorted(rows, key=lambda r: (r.record_date, r.employee_id))

    def delete_by_ids(self, ids) -> int:
        count = 0
        for i in ids:
            if self._rows.pop(i, None) is not None:
                count += 1
        return count

    def list_complete_with_schedules(self):
        out = []
        for r in self.all():
            schedule = self._employees.get_schedule(r.employee_id)
            if r.is_complete and schedule is not None:
                out.append((r, schedule))
        return out

    def update_computed(self, record_id, *, status, work_hours) -> bool:
        if record_id in self.fail_update_ids:
            raise StorageError("row update failed")
        if record_id not in self._rows:
            return False
        self._rows[record_id] = replace(self._rows[record_id], status=status, work_hours=work_hours)
        return True

    def count_for_employee(self, employee_id) -> int:
        return sum(1 for r in self._rows.values() if r.employee_id == employee_id)

    def list_rows(self, *, employee_id=None, start_date=None, end_date=None):
        rows = []
        for r in self._rows.values():
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if start_date is not None and r.record_date < start_date:
                continue
            if end_date is not None and r.record_date > end_date:
                continue
            e = self._employees.get_by_employee_id(r.employee_id)
            rows.append(TimeRecordRow(record=r, employee_name=e.name if e else "", department=e.department if e else None))
        rows.sort(key=lambda row: row.record.employee_id)
        rows.sort(key=lambda row: row.record.record_date, reverse=True)
        return rows


class InMemoryAudit:
    def __init__(self):
        self.entries: list[AuditLogEntry] = []
        self.fail = False

    def append(self, entry: AuditLogEntry) -> None:
        if self.fail:
            raise StorageError("audit table unavailable")
        self.entries.append(replace(entry, id=len(self.entries) + 1))

    def list_recent(self, *, limit, record_id=None):
        items = [e for e in self.entries if record_id is None or e.record_id == record_id]
        return list(reversed(items))[:limit]


@dataclass
class InMemoryAdmins:
    admins: dict[str, Admin]

    def get_by_username(self, username):
        return self.admins.get(username)

    def get_by_id(self, admin_id):
        return next((a for a in self.admins.values() if a.id == admin_id), None)


@pytest.fixture
def clock():
    return FixedClock(NOW)


@pytest.fixture
def employees():
    repo = InMemoryEmployees()
    repo.add("E001", name="Sato", department="Sales")
    repo.add("E002", name="Suzuki", start="10:00", end="19:00")
    return repo


@pytest.fixture
def records(employees, clock):
    return InMemoryTimeRecords(employees, clock)


@pytest.fixture
def audit():
    return InMemoryAudit()


@pytest.fixture
def admins():
    return InMemoryAdmins(
        {"admin": Admin(id=1, username="admin", password_hash=generate_password_hash("secret123"), name="Admin")}
    )


@pytest.fixture
def container(employees, records, audit, admins, clock):
    return assemble_container(
        employees_repo=employees,
        records_repo=records,
        audit_repo=audit,
        admins_repo=admins,
        options=ContainerOptions(),
        clock=clock,
    )


@pytest.fixture
def app(container):
    from timeclock.main import create_app

    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()
