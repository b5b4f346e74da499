from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import format_iso_instant
from ..core.constants import AUDIT_TABLE_NAME
from ..core.enums import AuditAction


@dataclass(frozen=True)
class AuditLogEntry:
    """Append-only record of one administrative mutation."""

    record_id: str
    action: AuditAction
    reason: str
    created_at: datetime
    table_name: str = AUDIT_TABLE_NAME
    id: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "table_name": self.table_name,
            "record_id": self.record_id,
            "action": self.action.value,
            "reason": self.reason,
            "created_at": format_iso_instant(self.created_at),
        }
