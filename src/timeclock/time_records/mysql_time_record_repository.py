from __future__ import annotations

from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional, Sequence, Tuple

from ..common.datetime_utils import from_storage, to_storage
from ..core.enums import WorkStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from ..employees.model import Schedule
from .model import TimeRecord, TimeRecordRow
from .repository import TimeRecordRepository

_COLUMNS = (
    "tr.id, tr.employee_id, tr.record_date, tr.clock_in_time, tr.clock_out_time, "
    "tr.status, tr.work_hours, tr.is_manual_entry, tr.created_at, tr.updated_at"
)


def _to_record(r: dict) -> TimeRecord:
    return TimeRecord(
        id=int(r["id"]),
        employee_id=str(r["employee_id"]),
        record_date=r["record_date"],
        clock_in_time=from_storage(r.get("clock_in_time")),
        clock_out_time=from_storage(r.get("clock_out_time")),
        status=WorkStatus(r["status"]),
        work_hours=float(r.get("work_hours") or 0),
        is_manual_entry=bool(r.get("is_manual_entry")),
        created_at=from_storage(r.get("created_at")),
        updated_at=from_storage(r.get("updated_at")),
    )


class MySQLTimeRecordRepository(TimeRecordRepository):
    """time_records table access.

    Outside ``atomic()`` every call is its own short transaction. Inside it,
    the yielded repository shares one connection until the block exits.
    """

    def __init__(self, conn_factory: DatabaseConnection, *, _bound=None):
        self._conn_factory = conn_factory
        self._bound = _bound

    @contextmanager
    def _cursor(self) -> Iterator:
        if self._bound is not None:
            yield self._bound
            return
        with db_cursor(self._conn_factory) as (conn, cur):
            yield conn, cur

    @contextmanager
    def atomic(self) -> Iterator["MySQLTimeRecordRepository"]:
        if self._bound is not None:
            yield self
            return
        with db_cursor(self._conn_factory) as (conn, cur):
            yield MySQLTimeRecordRepository(self._conn_factory, _bound=(conn, cur))

    def lock(self, employee_id: str, record_date: date) -> Optional[TimeRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM time_records tr
                WHERE tr.employee_id=%s AND tr.record_date=%s
                FOR UPDATE
                """,
                (employee_id, record_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def get_record(self, employee_id: str, record_date: date) -> Optional[TimeRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM time_records tr
                WHERE tr.employee_id=%s AND tr.record_date=%s
                ORDER BY tr.id DESC
                LIMIT 1
                """,
                (employee_id, record_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def _get_by_id(self, cur, record_id: int) -> TimeRecord:
        cur.execute(f"SELECT {_COLUMNS} FROM time_records tr WHERE tr.id=%s", (int(record_id),))
        return _to_record(fetchone(cur))

    def insert(self, record: TimeRecord) -> TimeRecord:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records
                    (employee_id, record_date, clock_in_time, clock_out_time, status, work_hours, is_manual_entry,
                     created_at, updated_at)
                VALUES (%s,%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP(),UTC_TIMESTAMP())
                """,
                (
                    record.employee_id,
                    record.record_date,
                    to_storage(record.clock_in_time),
                    to_storage(record.clock_out_time),
                    record.status.value,
                    float(record.work_hours),
                    int(record.is_manual_entry),
                ),
            )
            return self._get_by_id(cur, int(cur.lastrowid))

    def update(self, record: TimeRecord) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET clock_in_time=%s, clock_out_time=%s, status=%s, work_hours=%s,
                    is_manual_entry=%s, updated_at=UTC_TIMESTAMP()
                WHERE employee_id=%s AND record_date=%s
                """,
                (
                    to_storage(record.clock_in_time),
                    to_storage(record.clock_out_time),
                    record.status.value,
                    float(record.work_hours),
                    int(record.is_manual_entry),
                    record.employee_id,
                    record.record_date,
                ),
            )
            return int(cur.rowcount)

    def upsert(self, record: TimeRecord) -> TimeRecord:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                INSERT INTO time_records
                    (employee_id, record_date, clock_in_time, clock_out_time, status, work_hours, is_manual_entry,
                     created_at, updated_at)
                VALUES (%s,%s,%s,%s,%s,%s,%s,UTC_TIMESTAMP(),UTC_TIMESTAMP())
                ON DUPLICATE KEY UPDATE
                    clock_in_time=VALUES(clock_in_time),
                    clock_out_time=VALUES(clock_out_time),
                    status=VALUES(status),
                    work_hours=VALUES(work_hours),
                    is_manual_entry=VALUES(is_manual_entry),
                    updated_at=UTC_TIMESTAMP()
                """,
                (
                    record.employee_id,
                    record.record_date,
                    to_storage(record.clock_in_time),
                    to_storage(record.clock_out_time),
                    record.status.value,
                    float(record.work_hours),
                    int(record.is_manual_entry),
                ),
            )
            cur.execute(
                f"SELECT {_COLUMNS} FROM time_records tr WHERE tr.employee_id=%s AND tr.record_date=%s",
                (record.employee_id, record.record_date),
            )
            return _to_record(fetchone(cur))

    def delete(self, employee_id: str, record_date: date) -> int:
        with self._cursor() as (_, cur):
            cur.execute(
                "DELETE FROM time_records WHERE employee_id=%s AND record_date=%s",
                (employee_id, record_date),
            )
            return int(cur.rowcount)

    def list_stale_incomplete(self, before: date) -> Sequence[TimeRecord]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM time_records tr
                WHERE tr.clock_out_time IS NULL AND tr.record_date < %s
                ORDER BY tr.record_date ASC, tr.employee_id ASC
                """,
                (before,),
            )
            return [_to_record(r) for r in fetchall(cur)]

    def delete_by_ids(self, ids: Iterable[int]) -> int:
        ids = [int(i) for i in ids]
        if not ids:
            return 0
        placeholders = ",".join(["%s"] * len(ids))
        with self._cursor() as (_, cur):
            cur.execute(f"DELETE FROM time_records WHERE id IN ({placeholders})", tuple(ids))
            return int(cur.rowcount)

    def list_complete_with_schedules(self) -> Sequence[Tuple[TimeRecord, Schedule]]:
        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.work_start_time, e.work_end_time
                FROM time_records tr
                JOIN employees e ON e.employee_id = tr.employee_id
                WHERE tr.clock_in_time IS NOT NULL AND tr.clock_out_time IS NOT NULL
                ORDER BY tr.record_date ASC, tr.employee_id ASC
                """
            )
            return [
                (
                    _to_record(r),
                    Schedule(
                        start_time=str(r.get("work_start_time") or ""),
                        end_time=str(r.get("work_end_time") or ""),
                    ),
                )
                for r in fetchall(cur)
            ]

    def update_computed(self, record_id: int, *, status: WorkStatus, work_hours: float) -> bool:
        with self._cursor() as (_, cur):
            cur.execute(
                """
                UPDATE time_records
                SET status=%s, work_hours=%s, updated_at=UTC_TIMESTAMP()
                WHERE id=%s
                """,
                (status.value, float(work_hours), int(record_id)),
            )
            return cur.rowcount > 0

    def count_for_employee(self, employee_id: str) -> int:
        with self._cursor() as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM time_records WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def list_rows(
        self,
        *,
        employee_id: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[TimeRecordRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if employee_id is not None:
            clauses.append("tr.employee_id=%s")
            params.append(employee_id)
        if start_date is not None:
            clauses.append("tr.record_date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("tr.record_date <= %s")
            params.append(end_date)

        where = " AND ".join(clauses)

        with self._cursor() as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}, e.name AS employee_name, e.department
                FROM time_records tr
                JOIN employees e ON e.employee_id = tr.employee_id
                WHERE {where}
                ORDER BY tr.record_date DESC, tr.employee_id ASC
                """,
                tuple(params),
            )
            return [
                TimeRecordRow(
                    record=_to_record(r),
                    employee_name=r["employee_name"],
                    department=r.get("department"),
                )
                for r in fetchall(cur)
            ]
