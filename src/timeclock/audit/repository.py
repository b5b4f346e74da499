from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AuditLogEntry


class AuditRepository(Protocol):
    def append(self, entry: AuditLogEntry) -> None:
        raise NotImplementedError

    def list_recent(self, *, limit: int, record_id: Optional[str] = None) -> Sequence[AuditLogEntry]:
        raise NotImplementedError
