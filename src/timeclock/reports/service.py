from __future__ import annotations

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd

from ..common.datetime_utils import format_iso_date, to_business_time
from ..core.constants import DEFAULT_STANDARD_WORK_HOURS
from ..time_records.repository import TimeRecordRepository
from ..time_records.work_hours import exceeds_standard_day, format_duration, report_hours, work_minutes

EXPORT_FIELDS = [
    "record_date",
    "employee_id",
    "name",
    "department",
    "clock_in",
    "clock_out",
    "status",
    "work_time",
    "work_hours",
    "over_standard_day",
    "manual_entry",
]

SUMMARY_FIELDS = ["employee_id", "name", "days", "total_time", "total_hours"]

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class ReportService:
    """Export of time records (admin)."""

    def __init__(self, records: TimeRecordRepository, *, standard_work_hours: float = DEFAULT_STANDARD_WORK_HOURS):
        self._records = records
        self._standard_work_hours = float(standard_work_hours)

    def build_export(
        self,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> ReportData:
        query_rows = self._records.list_rows(employee_id=employee_id, start_date=start, end_date=end)

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for row in query_rows:
            r = row.record
            minutes = work_minutes(r.clock_in_time, r.clock_out_time)

            out_rows.append(
                {
                    "record_date": format_iso_date(r.record_date),
                    "employee_id": r.employee_id,
                    "name": row.employee_name,
                    "department": row.department or "",
                    "clock_in": _hhmm(r.clock_in_time),
                    "clock_out": _hhmm(r.clock_out_time),
                    "status": r.status.value,
                    "work_time": format_duration(minutes) if r.clock_out_time else "-",
                    "work_hours": report_hours(minutes / 60),
                    "over_standard_day": exceeds_standard_day(minutes, self._standard_work_hours),
                    "manual_entry": r.is_manual_entry,
                }
            )

            s = summary_map.get(r.employee_id)
            if not s:
                s = {"employee_id": r.employee_id, "name": row.employee_name, "days": 0, "total_minutes": 0}
                summary_map[r.employee_id] = s
            s["days"] += 1
            s["total_minutes"] += minutes

        summary = [
            {
                "employee_id": s["employee_id"],
                "name": s["name"],
                "days": s["days"],
                "total_time": format_duration(s["total_minutes"]),
                "total_hours": report_hours(s["total_minutes"] / 60),
            }
            for s in summary_map.values()
        ]
        summary.sort(key=lambda x: x["employee_id"])
        return ReportData(rows=out_rows, summary=summary)

    @staticmethod
    def to_csv(report: ReportData) -> bytes:
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for row in report.rows:
            writer.writerow(row)
        return out.getvalue().encode("utf-8-sig")

    @staticmethod
    def to_xlsx(report: ReportData) -> bytes:
        """Workbook with a records sheet and a per-employee summary sheet."""
        output = io.BytesIO()
        with pd.ExcelWriter(output, engine="openpyxl") as writer:
            pd.DataFrame(report.rows, columns=EXPORT_FIELDS).to_excel(writer, index=False, sheet_name="TimeRecords")
            pd.DataFrame(report.summary, columns=SUMMARY_FIELDS).to_excel(writer, index=False, sheet_name="Summary")
        return output.getvalue()


def _hhmm(value) -> str:
    if value is None:
        return "-"
    return to_business_time(value).strftime("%H:%M")
