from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import admin_required, json_body, json_endpoint
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.route("/api/admin/login", methods=["POST"], endpoint="admin_login")
    @json_endpoint
    def admin_login():
        data = json_body()
        admin = container.auth_service.authenticate(data.get("username"), data.get("password"))

        session.clear()
        session["admin_id"] = admin.admin_id
        session["username"] = admin.username
        session["name"] = admin.name
        return jsonify({"message": "Logged in", "admin": admin.to_dict()})

    @app.route("/api/admin/logout", methods=["POST"], endpoint="admin_logout")
    def admin_logout():
        session.clear()
        return jsonify({"message": "Logged out"})

    @app.route("/api/admin/me", methods=["GET"], endpoint="admin_me")
    @admin_required
    def admin_me():
        return jsonify(
            {"admin": {"id": session["admin_id"], "username": session.get("username"), "name": session.get("name")}}
        )
