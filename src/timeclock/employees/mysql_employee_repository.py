from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Employee, Schedule
from .repository import EmployeeRepository

_COLUMNS = "id, employee_id, name, department, work_start_time, work_end_time, created_at, updated_at"


def _to_employee(r: dict) -> Employee:
    return Employee(
        id=int(r["id"]),
        employee_id=str(r["employee_id"]),
        name=r["name"],
        department=r.get("department"),
        work_start_time=str(r.get("work_start_time") or ""),
        work_end_time=str(r.get("work_end_time") or ""),
        created_at=r.get("created_at"),
        updated_at=r.get("updated_at"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY employee_id ASC")
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_employee_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE employee_id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_id(self, id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (int(id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_schedule(self, employee_id: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT work_start_time, work_end_time FROM employees WHERE employee_id=%s",
                (employee_id,),
            )
            r = fetchone(cur)
            if not r:
                return None
            # Stored values are passed through untouched; the status engine validates them.
            return Schedule(
                start_time=str(r.get("work_start_time") or ""),
                end_time=str(r.get("work_end_time") or ""),
            )

    def create(
        self,
        *,
        employee_id: str,
        name: str,
        department: Optional[str],
        work_start_time: str,
        work_end_time: str,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(employee_id, name, department, work_start_time, work_end_time)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (employee_id, name, department, work_start_time, work_end_time),
            )
            return int(cur.lastrowid)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE employees
                SET employee_id=%s, name=%s, department=%s, work_start_time=%s, work_end_time=%s,
                    updated_at=UTC_TIMESTAMP()
                WHERE id=%s
                """,
                (employee_id, name, department, work_start_time, work_end_time, int(id)),
            )
            return cur.rowcount > 0

    def delete(self, id: int) -> bool:
        with db_cursor(self._conn_factory, conflict_message="Employee has time records") as (_, cur):
            cur.execute("DELETE FROM employees WHERE id=%s", (int(id),))
            return cur.rowcount > 0
