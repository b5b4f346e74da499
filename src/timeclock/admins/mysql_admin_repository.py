from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .model import Admin
from .repository import AdminRepository


def _to_admin(r: dict) -> Admin:
    return Admin(id=int(r["id"]), username=r["username"], password_hash=r["password_hash"], name=r["name"])


class MySQLAdminRepository(AdminRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_username(self, username: str) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, username, password_hash, name FROM admins WHERE username=%s", (username,))
            r = fetchone(cur)
            return _to_admin(r) if r else None

    def get_by_id(self, admin_id: int) -> Optional[Admin]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT id, username, password_hash, name FROM admins WHERE id=%s", (int(admin_id),))
            r = fetchone(cur)
            return _to_admin(r) if r else None
