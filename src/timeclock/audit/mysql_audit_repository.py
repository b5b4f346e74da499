from __future__ import annotations

from typing import Optional, Sequence

from ..common.datetime_utils import from_storage, to_storage
from ..core.enums import AuditAction
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import AuditLogEntry
from .repository import AuditRepository


class MySQLAuditRepository(AuditRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def append(self, entry: AuditLogEntry) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO audit_logs(table_name, record_id, action, reason, created_at)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (entry.table_name, entry.record_id, entry.action.value, entry.reason, to_storage(entry.created_at)),
            )

    def list_recent(self, *, limit: int, record_id: Optional[str] = None) -> Sequence[AuditLogEntry]:
        clauses = ["1=1"]
        params: list[object] = []
        if record_id is not None:
            clauses.append("record_id=%s")
            params.append(record_id)
        params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT id, table_name, record_id, action, reason, created_at
                FROM audit_logs
                WHERE {" AND ".join(clauses)}
                ORDER BY id DESC
                LIMIT %s
                """,
                tuple(params),
            )
            return [
                AuditLogEntry(
                    id=int(r["id"]),
                    table_name=r["table_name"],
                    record_id=r["record_id"],
                    action=AuditAction(r["action"]),
                    reason=r["reason"] or "",
                    created_at=from_storage(r["created_at"]),
                )
                for r in fetchall(cur)
            ]
