from datetime import date, datetime, timedelta, timezone

import pytest

from timeclock.audit.service import AuditRecorder
from timeclock.core.enums import AuditAction, WorkStatus
from timeclock.maintenance.service import MaintenanceService
from timeclock.time_records.model import TimeRecord

JST = timezone(timedelta(hours=9))


def make(records, employee_id, day, *, out_hour=None, status=WorkStatus.NORMAL, work_hours=0.0):
    clock_in = datetime(day.year, day.month, day.day, 9, 0, tzinfo=JST)
    clock_out = clock_in.replace(hour=out_hour) if out_hour is not None else None
    return records.insert(
        TimeRecord(
            employee_id=employee_id,
            record_date=day,
            clock_in_time=clock_in,
            clock_out_time=clock_out,
            status=status,
            work_hours=work_hours,
        )
    )


@pytest.fixture
def service(records, audit, clock):
    return MaintenanceService(records, AuditRecorder(audit, clock=clock), default_window_days=30, clock=clock)


def test_cleanup_removes_only_stale_incomplete(service, records, audit):
    # today is 2024-04-15 (JST), cutoff 2024-03-16
    stale = make(records, "E001", date(2024, 3, 1))
    make(records, "E002", date(2024, 3, 1), out_hour=17)
    make(records, "E001", date(2024, 3, 16))
    make(records, "E001", date(2024, 4, 14))

    result = service.cleanup_incomplete()

    assert result.cleaned_count == 1
    assert result.cutoff == date(2024, 3, 16)
    assert [r.id for r in result.found_records] == [stale.id]
    assert len(records.all()) == 3
    assert [e.action for e in audit.entries] == [AuditAction.BULK_DELETE]
    assert audit.entries[0].record_id == "before-2024-03-16"


def test_cleanup_is_idempotent(service, records, audit):
    make(records, "E001", date(2024, 1, 10))

    first = service.cleanup_incomplete()
    second = service.cleanup_incomplete()

    assert first.cleaned_count == 1
    assert second.cleaned_count == 0
    assert len(audit.entries) == 1


def test_cleanup_window_override(service, records):
    make(records, "E001", date(2024, 4, 10))

    assert service.cleanup_incomplete(3).cleaned_count == 1


def test_cleanup_rejects_bad_window(service):
    from timeclock.core.exceptions import ValidationError

    with pytest.raises(ValidationError):
        service.cleanup_incomplete(0)


def test_recalculate_fixes_stale_values(service, records, audit):
    rec = make(records, "E001", date(2024, 4, 1), out_hour=18, status=WorkStatus.NORMAL, work_hours=1.0)
    make(records, "E001", date(2024, 4, 2))

    result = service.recalculate_all()

    assert result.total_considered == 1
    assert result.updated_count == 1
    stored = records.get_record("E001", rec.record_date)
    assert stored.status == WorkStatus.OVERTIME
    assert stored.work_hours == pytest.approx(9.0)
    assert audit.entries[-1].action == AuditAction.BULK_UPDATE
    assert audit.entries[-1].record_id == "all"


def test_recalculate_is_deterministic(service, records):
    make(records, "E001", date(2024, 4, 1), out_hour=16)
    make(records, "E002", date(2024, 4, 1), out_hour=20)

    service.recalculate_all()
    first = records.all()
    service.recalculate_all()

    assert records.all() == first


def test_recalculate_isolates_row_failures(service, records, caplog):
    bad = make(records, "E001", date(2024, 4, 1), out_hour=18)
    good = make(records, "E002", date(2024, 4, 1), out_hour=20)
    records.fail_update_ids.add(bad.id)

    result = service.recalculate_all()

    assert result.total_considered == 2
    assert result.updated_count == 1
    assert result.failed_count == 1
    assert records.get_record("E002", good.record_date).status == WorkStatus.OVERTIME
    assert records.get_record("E001", bad.record_date).status == WorkStatus.NORMAL
    assert "recalculation failed" in caplog.text


def test_recalculate_marks_unparsable_schedule_without_stopping(service, records, employees):
    employees.add("E003", start="²:00", end="17:00")
    broken = make(records, "E003", date(2024, 4, 1), out_hour=17)
    make(records, "E001", date(2024, 4, 1), out_hour=18)

    result = service.recalculate_all()

    assert result.updated_count == 2
    assert records.get_record("E003", broken.record_date).status == WorkStatus.SETTINGS_ERROR
    assert records.get_record("E001", date(2024, 4, 1)).status == WorkStatus.OVERTIME
