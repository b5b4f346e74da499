"""Run bulk maintenance from cron or a scheduler.

    python scripts/maintenance.py cleanup --days 30
    python scripts/maintenance.py recalculate
"""

from __future__ import annotations

import argparse
import importlib
import json

from config import get_settings_module

from timeclock.common.logging_setup import configure_logging
from timeclock.container import ContainerOptions, build_container


def main() -> None:
    parser = argparse.ArgumentParser(description="Time record maintenance")
    sub = parser.add_subparsers(dest="command", required=True)
    cleanup = sub.add_parser("cleanup", help="delete incomplete records older than the retention window")
    cleanup.add_argument("--days", type=int, default=None, help="retention window in days")
    sub.add_parser("recalculate", help="recompute status and work hours of every completed record")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(db_config=settings.DB_CONFIG, options=ContainerOptions.from_settings(settings))

    if args.command == "cleanup":
        result = container.maintenance_service.cleanup_incomplete(args.days)
    else:
        result = container.maintenance_service.recalculate_all()
    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


if __name__ == "__main__":
    main()
