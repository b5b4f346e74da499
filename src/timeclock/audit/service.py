from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..core.constants import DEFAULT_AUDIT_LIMIT
from ..core.enums import AuditAction
from ..core.exceptions import AuditWriteError, DomainError
from .model import AuditLogEntry
from .repository import AuditRepository

logger = logging.getLogger("timeclock.audit")


class AuditRecorder:
    """Best-effort writer for the audit log.

    A failed append is logged with the full entry and never propagates: the
    mutation it describes has already been committed.
    """

    def __init__(self, audit: AuditRepository, *, clock: Callable[[], datetime] = now_utc):
        self._audit = audit
        self._clock = clock

    def record(self, *, record_id: str, action: AuditAction, reason: str) -> Optional[AuditLogEntry]:
        entry = AuditLogEntry(record_id=record_id, action=action, reason=reason, created_at=self._clock())
        try:
            self._append(entry)
        except AuditWriteError as e:
            logger.error("audit write failed (%s): %s", e, entry.to_dict())
            return None
        return entry

    def _append(self, entry: AuditLogEntry) -> None:
        try:
            self._audit.append(entry)
        except (DomainError, OSError) as e:
            raise AuditWriteError(str(e) or type(e).__name__) from e

    def list_recent(self, *, limit: int = DEFAULT_AUDIT_LIMIT, record_id: Optional[str] = None) -> Sequence[AuditLogEntry]:
        return self._audit.list_recent(limit=int(limit), record_id=record_id)
