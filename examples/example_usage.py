"""Example: using the service layer directly (without Flask).

Controllers are a thin layer; business rules live in services.
"""

import importlib
import sys

from config import get_settings_module

from timeclock.container import build_container


def main():
    employee_id = sys.argv[1] if len(sys.argv) > 1 else "E001"
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG)

    record = container.clock_service.get_today_record(employee_id)
    print(record.to_dict() if record else f"No record today for {employee_id}")


if __name__ == "__main__":
    main()
