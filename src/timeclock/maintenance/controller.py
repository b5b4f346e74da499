from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import admin_required, json_body, json_endpoint
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/maintenance/cleanup", methods=["POST"], endpoint="admin_cleanup_incomplete")
    @admin_required
    @json_endpoint
    def admin_cleanup_incomplete():
        result = container.maintenance_service.cleanup_incomplete(json_body().get("window_days"))
        return jsonify(result.to_dict())

    @app.route("/api/admin/maintenance/recalculate", methods=["POST"], endpoint="admin_recalculate_all")
    @admin_required
    @json_endpoint
    def admin_recalculate_all():
        result = container.maintenance_service.recalculate_all()
        return jsonify(result.to_dict())
