import csv
import io
from datetime import date, datetime, timedelta, timezone

from openpyxl import load_workbook

from timeclock.core.enums import WorkStatus
from timeclock.reports.service import EXPORT_FIELDS, SUMMARY_FIELDS, ReportService
from timeclock.time_records.model import TimeRecord

JST = timezone(timedelta(hours=9))


def add(records, employee_id, day, in_hm, out_hm=None, status=WorkStatus.NORMAL):
    clock_in = datetime(day.year, day.month, day.day, *in_hm, tzinfo=JST)
    clock_out = datetime(day.year, day.month, day.day, *out_hm, tzinfo=JST) if out_hm else None
    records.insert(
        TimeRecord(
            employee_id=employee_id,
            record_date=day,
            clock_in_time=clock_in,
            clock_out_time=clock_out,
            status=status,
        )
    )


def test_build_export_rows_and_summary(records):
    add(records, "E001", date(2024, 4, 1), (9, 0), (18, 30), WorkStatus.OVERTIME)
    add(records, "E001", date(2024, 4, 2), (9, 0), (17, 0))
    add(records, "E002", date(2024, 4, 2), (10, 0))

    report = ReportService(records).build_export(start=date(2024, 4, 1), end=date(2024, 4, 30))

    first = next(r for r in report.rows if r["record_date"] == "2024-04-01")
    assert first["clock_in"] == "09:00"
    assert first["clock_out"] == "18:30"
    assert first["work_time"] == "9h 30m"
    assert first["work_hours"] == 9.5
    assert first["over_standard_day"] is True
    assert first["department"] == "Sales"

    open_row = next(r for r in report.rows if r["employee_id"] == "E002")
    assert open_row["clock_out"] == "-"
    assert open_row["work_time"] == "-"

    assert report.summary[0] == {
        "employee_id": "E001",
        "name": "Sato",
        "days": 2,
        "total_time": "17h 30m",
        "total_hours": 17.5,
    }


def test_build_export_filters_employee_and_dates(records):
    add(records, "E001", date(2024, 3, 31), (9, 0), (17, 0))
    add(records, "E001", date(2024, 4, 1), (9, 0), (17, 0))
    add(records, "E002", date(2024, 4, 1), (10, 0), (19, 0))

    report = ReportService(records).build_export(start=date(2024, 4, 1), employee_id="E001")

    assert [(r["employee_id"], r["record_date"]) for r in report.rows] == [("E001", "2024-04-01")]


def test_to_csv_has_bom_and_header(records):
    add(records, "E001", date(2024, 4, 1), (9, 0), (17, 0))
    service = ReportService(records, standard_work_hours=7)

    data = service.to_csv(service.build_export())

    assert data.startswith(b"\xef\xbb\xbf")
    rows = list(csv.DictReader(io.StringIO(data.decode("utf-8-sig"))))
    assert list(rows[0].keys()) == EXPORT_FIELDS
    assert rows[0]["over_standard_day"] == "True"


def test_to_xlsx_has_records_and_summary_sheets(records):
    add(records, "E001", date(2024, 4, 1), (9, 0), (18, 30), WorkStatus.OVERTIME)
    add(records, "E002", date(2024, 4, 1), (10, 0))
    service = ReportService(records)

    data = service.to_xlsx(service.build_export())

    workbook = load_workbook(io.BytesIO(data))
    assert workbook.sheetnames == ["TimeRecords", "Summary"]
    rows = list(workbook["TimeRecords"].iter_rows(values_only=True))
    assert list(rows[0]) == EXPORT_FIELDS
    assert len(rows) == 3
    by_employee = {row[1]: row for row in rows[1:]}
    assert by_employee["E001"][4:8] == ("09:00", "18:30", "Overtime", "9h 30m")
    summary = list(workbook["Summary"].iter_rows(values_only=True))
    assert list(summary[0]) == SUMMARY_FIELDS
    assert summary[1][:3] == ("E001", "Sato", 1)
