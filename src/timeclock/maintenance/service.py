from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Callable, Optional, Sequence

from ..audit.service import AuditRecorder
from ..common.datetime_utils import cutoff_date, format_iso_date, now_utc, record_date_for
from ..common.validators import require_positive_int
from ..core.constants import DEFAULT_CLEANUP_DAYS
from ..core.enums import AuditAction
from ..core.exceptions import DomainError
from ..time_records.evaluation import evaluate
from ..time_records.model import TimeRecord
from ..time_records.repository import TimeRecordRepository

logger = logging.getLogger("timeclock.maintenance")


@dataclass(frozen=True)
class CleanupResult:
    cleaned_count: int
    cutoff: date
    found_records: Sequence[TimeRecord] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "cleaned_count": self.cleaned_count,
            "cutoff_date": format_iso_date(self.cutoff),
            "found_records": [r.to_dict() for r in self.found_records],
        }


@dataclass(frozen=True)
class RecalculationResult:
    total_considered: int
    updated_count: int

    @property
    def failed_count(self) -> int:
        return self.total_considered - self.updated_count

    def to_dict(self) -> dict:
        return {
            "total_considered": self.total_considered,
            "updated_count": self.updated_count,
            "failed_count": self.failed_count,
        }


class MaintenanceService:
    """Use case: bulk cleanup and recalculation over all time records."""

    def __init__(
        self,
        records: TimeRecordRepository,
        audit: AuditRecorder,
        *,
        default_window_days: int = DEFAULT_CLEANUP_DAYS,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._records = records
        self._audit = audit
        self._default_window_days = int(default_window_days)
        self._clock = clock

    def cleanup_incomplete(self, window_days: Optional[int] = None) -> CleanupResult:
        """Delete records without a clock-out dated before today - window.

        The cutoff is computed here and bound as a query parameter. Running
        it again with nothing stale left deletes nothing and writes no audit
        entry.
        """
        window = require_positive_int(
            self._default_window_days if window_days is None else window_days,
            "window_days",
        )
        cutoff = cutoff_date(record_date_for(self._clock()), window)

        with self._records.atomic() as tx:
            found = list(tx.list_stale_incomplete(cutoff))
            cleaned = tx.delete_by_ids([r.id for r in found if r.id is not None]) if found else 0

        if cleaned:
            logger.info("cleanup removed %d incomplete records before %s", cleaned, cutoff)
            self._audit.record(
                record_id=f"before-{format_iso_date(cutoff)}",
                action=AuditAction.BULK_DELETE,
                reason=f"Cleanup of incomplete records older than {window} days: {cleaned} deleted",
            )
        return CleanupResult(cleaned_count=cleaned, cutoff=cutoff, found_records=tuple(found))

    def recalculate_all(self) -> RecalculationResult:
        """Recompute status and work hours of every completed record.

        Rows are written one by one; a failing row is logged and skipped.
        """
        rows = self._records.list_complete_with_schedules()
        updated = 0

        for record, schedule in rows:
            try:
                evaluation = evaluate(record.clock_in_time, record.clock_out_time, schedule)
                if self._records.update_computed(
                    record.id,
                    status=evaluation.status,
                    work_hours=evaluation.work_hours,
                ):
                    updated += 1
            except DomainError as e:
                logger.warning("recalculation failed for %s: %s", record.key, e)

        result = RecalculationResult(total_considered=len(rows), updated_count=updated)
        logger.info("recalculated %d of %d records", updated, len(rows))
        self._audit.record(
            record_id="all",
            action=AuditAction.BULK_UPDATE,
            reason=f"Recalculated statuses: {updated} of {len(rows)} records updated",
        )
        return result
