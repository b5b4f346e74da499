from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .strategies.base import StatusRule
from .strategies.early_leave_rule import EarlyLeaveRule
from .strategies.late_rule import LateRule
from .strategies.overtime_rule import OvertimeRule


@dataclass
class StatusRuleFactory:
    """Factory Pattern: the rules evaluated at each clock event.

    Check-in rules all apply. Check-out rules are ordered and only the first
    match contributes, so early leave wins over overtime.
    """

    def for_checkin(self) -> Sequence[StatusRule]:
        return (LateRule(),)

    def for_checkout(self) -> Sequence[StatusRule]:
        return (EarlyLeaveRule(), OvertimeRule())
