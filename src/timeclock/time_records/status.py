"""Work-status determination.

The engine is pure: it reads the hour and minute fields of the instants it
is given and compares them with the employee's schedule. Callers must pass
instants already expressed in the business time zone (see
``common.datetime_utils.to_business_time``); the engine never converts them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import minutes_of_day, parse_hhmm
from ..core.enums import WorkStatus
from .factory import StatusRuleFactory
from .strategies.base import ClockMinutes

logger = logging.getLogger("timeclock.status")

_default_factory = StatusRuleFactory()


def determine_status(
    clock_in: datetime,
    clock_out: Optional[datetime],
    scheduled_start: str,
    scheduled_end: str,
    *,
    factory: Optional[StatusRuleFactory] = None,
) -> WorkStatus:
    """Classify one clock-in/clock-out pair against a schedule.

    Returns ``WorkStatus.SETTINGS_ERROR`` when either schedule string cannot
    be parsed, whatever the clock values are. Exact matches with the
    scheduled start or end are neither late, early leave nor overtime.
    """
    start = parse_hhmm(scheduled_start)
    if start is None:
        logger.error("invalid scheduled start time: %r", scheduled_start)
        return WorkStatus.SETTINGS_ERROR
    end = parse_hhmm(scheduled_end)
    if end is None:
        logger.error("invalid scheduled end time: %r", scheduled_end)
        return WorkStatus.SETTINGS_ERROR

    factory = factory or _default_factory
    minutes = ClockMinutes(
        clock_in=minutes_of_day(clock_in),
        clock_out=minutes_of_day(clock_out) if clock_out is not None else None,
        scheduled_start=start,
        scheduled_end=end,
    )

    parts = [rule.part for rule in factory.for_checkin() if rule.matches(minutes)]
    if minutes.clock_out is not None:
        for rule in factory.for_checkout():
            if rule.matches(minutes):
                parts.append(rule.part)
                break

    status = WorkStatus.from_parts(parts)
    logger.debug(
        "status: in=%s out=%s schedule=%s-%s -> %s",
        minutes.clock_in,
        minutes.clock_out,
        start,
        end,
        status.value,
    )
    return status
