from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request
from werkzeug.middleware.proxy_fix import ProxyFix

from config import get_settings_module

from .admins.controller import register as register_admins
from .common.http import error_response
from .common.ip_restriction import client_ip
from .common.logging_setup import configure_logging
from .container import Container, ContainerOptions, build_container
from .core.exceptions import AuthorizationError
from .corrections.controller import register as register_corrections
from .database.bootstrap import apply_schema, ensure_admin
from .employees.controller import register as register_employees
from .maintenance.controller import register as register_maintenance
from .reports.controller import register as register_reports
from .time_records.controller import register as register_time_records

SCHEMA_PATH = Path(__file__).resolve().parents[2] / "database" / "schema.sql"


def _register_ip_restriction(app: Flask, container: Container) -> None:
    allowed = container.options.allowed_ips
    admin_allowed = container.options.admin_allowed_ips
    if allowed is None and admin_allowed is None:
        return

    logger = logging.getLogger("timeclock.http")

    @app.before_request
    def restrict_by_ip():
        ip = client_ip(request.remote_addr)
        if request.path.startswith("/api/admin") and admin_allowed is not None:
            if not admin_allowed.is_allowed(ip):
                logger.warning("admin access denied for %s", ip)
                return error_response(AuthorizationError("Administrator network required"))
        elif allowed is not None and not allowed.is_allowed(ip):
            logger.warning("access denied for %s", ip)
            return error_response(AuthorizationError("Internal network required"))
        return None


def create_app(*, container: Optional[Container] = None, settings_module: Optional[str] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logger = configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    proxy_hops = int(getattr(settings, "TRUSTED_PROXY_HOPS", 0))
    if proxy_hops > 0:
        # remote_addr is taken from X-Forwarded-For only for this many proxies
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=proxy_hops)

    if container is None:
        db_config = getattr(settings, "DB_CONFIG")
        container = build_container(db_config=db_config, options=ContainerOptions.from_settings(settings))
        logger.info(
            "settings=%s db=%s@%s:%s/%s",
            settings_module,
            db_config.get("user"),
            db_config.get("host"),
            db_config.get("port", 3306),
            db_config.get("database"),
        )

        if getattr(settings, "AUTO_INIT_DB", False):
            apply_schema(container.conn, schema_path=SCHEMA_PATH)

        admin_username = getattr(settings, "ADMIN_USERNAME", "")
        admin_password = getattr(settings, "ADMIN_PASSWORD", "")
        if admin_username and admin_password:
            ensure_admin(
                container.conn,
                username=admin_username,
                password=admin_password,
                name=getattr(settings, "ADMIN_NAME", "Administrator"),
            )

    app.extensions["timeclock"] = container
    _register_ip_restriction(app, container)

    register_employees(app, container)
    register_time_records(app, container)
    register_admins(app, container)
    register_corrections(app, container)
    register_maintenance(app, container)
    register_reports(app, container)

    @app.route("/", endpoint="index")
    def index():
        return jsonify({"message": "Time clock API"})

    return app
