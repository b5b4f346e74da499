from __future__ import annotations

from flask import Flask, request

from ..common.http import admin_required, json_endpoint
from ..common.validators import require_date
from ..container import Container
from .service import XLSX_MIMETYPE, ReportData


def register(app: Flask, container: Container) -> None:
    def _build() -> tuple[ReportData, str]:
        start_s = request.args.get("start_date")
        end_s = request.args.get("end_date")
        report = container.report_service.build_export(
            start=require_date(start_s, "start_date") if start_s else None,
            end=require_date(end_s, "end_date") if end_s else None,
            employee_id=request.args.get("employee_id") or None,
        )
        return report, f"time_records_{start_s or 'all'}_{end_s or 'all'}"

    def _attachment(body: bytes, mimetype: str, filename: str):
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/admin/export/time-records.csv", methods=["GET"], endpoint="admin_export_csv")
    @admin_required
    @json_endpoint
    def admin_export_csv():
        report, name = _build()
        return _attachment(container.report_service.to_csv(report), "text/csv", f"{name}.csv")

    @app.route("/api/admin/export/time-records.xlsx", methods=["GET"], endpoint="admin_export_xlsx")
    @app.route("/api/admin/export/timerecords", methods=["GET"], endpoint="admin_export_xlsx_legacy")
    @admin_required
    @json_endpoint
    def admin_export_xlsx():
        report, name = _build()
        return _attachment(container.report_service.to_xlsx(report), XLSX_MIMETYPE, f"{name}.xlsx")
