from __future__ import annotations

from enum import Enum
from typing import Iterable

from .constants import STATUS_SEPARATOR


class WorkStatus(str, Enum):
    """Attendance status stored with each time record."""

    NORMAL = "Normal"
    LATE = "Late"
    EARLY_LEAVE = "EarlyLeave"
    OVERTIME = "Overtime"
    LATE_EARLY_LEAVE = "Late+EarlyLeave"
    LATE_OVERTIME = "Late+Overtime"
    SETTINGS_ERROR = "SettingsError"

    @classmethod
    def from_parts(cls, parts: Iterable[str]) -> "WorkStatus":
        """Join status parts ("Late", "Overtime", ...) into one status."""
        parts = list(parts)
        if not parts:
            return cls.NORMAL
        return cls(STATUS_SEPARATOR.join(parts))


class AuditAction(str, Enum):
    """Kinds of administrative mutation written to the audit log."""

    UPDATE = "update"
    DELETE = "delete"
    DELETE_AND_CREATE = "delete_and_create"
    BULK_DELETE = "bulk_delete"
    BULK_UPDATE = "bulk_update"


class CorrectionAction(str, Enum):
    """How an administrator correction is applied to the stored record."""

    UPDATE = "update"
    DELETE_AND_CREATE = "delete_and_create"
