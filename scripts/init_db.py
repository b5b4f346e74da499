from __future__ import annotations

import importlib
from pathlib import Path

from config import get_settings_module

from timeclock.database.bootstrap import apply_schema, ensure_admin
from timeclock.database.connection import DatabaseConnection, DBConfig


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    conn = DatabaseConnection(DBConfig.from_dict(db_config))

    schema_path = Path(__file__).resolve().parents[1] / "database" / "schema.sql"
    apply_schema(conn, schema_path=schema_path)

    if settings.ADMIN_USERNAME and settings.ADMIN_PASSWORD:
        ensure_admin(conn, username=settings.ADMIN_USERNAME, password=settings.ADMIN_PASSWORD, name=settings.ADMIN_NAME)

    print(
        "OK: Applied schema.sql -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
