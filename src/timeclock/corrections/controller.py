from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import admin_required, json_body, json_endpoint
from ..container import Container
from ..core.constants import DEFAULT_AUDIT_LIMIT


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/time-records", methods=["GET"], endpoint="admin_time_records")
    @admin_required
    @json_endpoint
    def admin_time_records():
        return jsonify([row.to_dict() for row in container.clock_service.list_records()])

    @app.route("/api/admin/time-records/correct", methods=["POST"], endpoint="admin_correct_time_record")
    @admin_required
    @json_endpoint
    def admin_correct_time_record():
        data = json_body()
        record = container.correction_service.correct_record(
            action=data.get("action"),
            employee_id=data.get("employee_id"),
            record_date=data.get("record_date"),
            clock_in_time=data.get("clock_in_time"),
            clock_out_time=data.get("clock_out_time"),
            reason=data.get("reason"),
        )
        return jsonify({"message": "Time record corrected", "record": record.to_dict()})

    @app.route("/api/admin/time-records", methods=["DELETE"], endpoint="admin_delete_time_record")
    @admin_required
    @json_endpoint
    def admin_delete_time_record():
        data = json_body()
        result = container.correction_service.delete_record(
            employee_id=data.get("employee_id"),
            record_date=data.get("record_date"),
            reason=data.get("reason"),
        )
        return jsonify({"message": "Time record deleted", **result.to_dict()})

    @app.route("/api/admin/audit-logs", methods=["GET"], endpoint="admin_audit_logs")
    @admin_required
    @json_endpoint
    def admin_audit_logs():
        entries = container.audit_recorder.list_recent(
            limit=request.args.get("limit", DEFAULT_AUDIT_LIMIT, type=int),
            record_id=request.args.get("record_id") or None,
        )
        return jsonify([e.to_dict() for e in entries])
