from __future__ import annotations

from flask import Flask, jsonify

from ..common.datetime_utils import format_iso_instant
from ..common.http import admin_required, json_body, json_endpoint
from ..container import Container
from .model import Employee


def _to_dict(e: Employee) -> dict:
    return {
        "id": e.id,
        "employee_id": e.employee_id,
        "name": e.name,
        "department": e.department,
        "work_start_time": e.work_start_time,
        "work_end_time": e.work_end_time,
        "created_at": format_iso_instant(e.created_at),
        "updated_at": format_iso_instant(e.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/employees", methods=["GET"], endpoint="list_employees")
    @json_endpoint
    def list_employees():
        return jsonify([_to_dict(e) for e in container.employee_service.list_employees()])

    @app.route("/api/employees", methods=["POST"], endpoint="create_employee")
    @admin_required
    @json_endpoint
    def create_employee():
        data = json_body()
        new_id = container.employee_service.create_employee(
            employee_id=data.get("employee_id"),
            name=data.get("name"),
            department=data.get("department"),
            work_start_time=data.get("work_start_time"),
            work_end_time=data.get("work_end_time"),
        )
        return jsonify({"id": new_id, "message": "Employee created"}), 201

    @app.route("/api/employees/<int:id>", methods=["PUT"], endpoint="update_employee")
    @admin_required
    @json_endpoint
    def update_employee(id: int):
        data = json_body()
        container.employee_service.update_employee(
            id=id,
            employee_id=data.get("employee_id"),
            name=data.get("name"),
            department=data.get("department"),
            work_start_time=data.get("work_start_time"),
            work_end_time=data.get("work_end_time"),
        )
        return jsonify({"message": "Employee updated"})

    @app.route("/api/employees/<int:id>", methods=["DELETE"], endpoint="delete_employee")
    @admin_required
    @json_endpoint
    def delete_employee(id: int):
        container.employee_service.delete_employee(id)
        return jsonify({"message": "Employee deleted"})
