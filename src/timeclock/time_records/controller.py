from __future__ import annotations

from typing import Optional

from flask import Flask, jsonify, request

from ..common.http import json_body, json_endpoint
from ..common.ip_restriction import client_ip
from ..common.validators import require_non_empty
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    def _request_ip() -> str:
        return client_ip(request.remote_addr)

    def _bearer_token() -> Optional[str]:
        header = request.headers.get("Authorization", "")
        if header.startswith("Bearer "):
            return header[len("Bearer "):].strip() or None
        return request.cookies.get("sessionToken")

    def _employee_id() -> str:
        """Employee from a valid session token, else from the request body."""
        token = _bearer_token()
        if token:
            session = container.session_store.validate(token, _request_ip())
            if session is None:
                raise AuthenticationError("Session expired or invalid")
            return session.employee_id
        return require_non_empty(json_body().get("employee_id"), "employee_id")

    @app.route("/api/sessions", methods=["POST"], endpoint="create_session")
    @json_endpoint
    def create_session():
        employee = container.employee_service.get_employee(
            require_non_empty(json_body().get("employee_id"), "employee_id")
        )
        token = container.session_store.create(employee.employee_id, _request_ip())
        return jsonify({"token": token, "employee_id": employee.employee_id, "name": employee.name}), 201

    @app.route("/api/sessions", methods=["DELETE"], endpoint="delete_session")
    @json_endpoint
    def delete_session():
        token = _bearer_token()
        if token:
            container.session_store.remove(token)
        return jsonify({"message": "Signed out"})

    @app.route("/api/time-records/clock-in", methods=["POST"], endpoint="clock_in")
    @json_endpoint
    def clock_in():
        result = container.clock_service.clock_in(_employee_id())
        return jsonify({"message": "Clocked in", **result.to_dict()})

    @app.route("/api/time-records/clock-out", methods=["POST"], endpoint="clock_out")
    @json_endpoint
    def clock_out():
        result = container.clock_service.clock_out(_employee_id())
        return jsonify({"message": "Clocked out", **result.to_dict()})

    @app.route("/api/time-records", methods=["GET"], endpoint="list_time_records")
    @json_endpoint
    def list_time_records():
        return jsonify([row.to_dict() for row in container.clock_service.list_records()])

    @app.route("/api/time-records/employee/<employee_id>", methods=["GET"], endpoint="employee_time_records")
    @json_endpoint
    def employee_time_records(employee_id: str):
        rows = container.clock_service.list_employee_records(
            employee_id,
            year=request.args.get("year", type=int),
            month=request.args.get("month", type=int),
        )
        return jsonify([row.to_dict() for row in rows])

    @app.route("/api/time-records/today/<employee_id>", methods=["GET"], endpoint="today_time_record")
    @json_endpoint
    def today_time_record(employee_id: str):
        record = container.clock_service.get_today_record(employee_id)
        return jsonify(record.to_dict() if record else None)
