from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .repository import AdminRepository


@dataclass(frozen=True)
class SessionAdmin:
    """What we store into Flask session after login."""

    admin_id: int
    username: str
    name: str

    def to_dict(self) -> dict:
        return {"id": self.admin_id, "username": self.username, "name": self.name}


class AuthService:
    """Use case: authenticate administrators (login)."""

    def __init__(self, admins: AdminRepository):
        self._admins = admins

    def authenticate(self, username: str, password: str) -> SessionAdmin:
        username = require_non_empty(username, "username")
        password = require_non_empty(password, "password")

        admin = self._admins.get_by_username(username)
        if not admin:
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(admin.password_hash, password)
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid username or password")

        return SessionAdmin(admin_id=admin.id, username=admin.username, name=admin.name)
