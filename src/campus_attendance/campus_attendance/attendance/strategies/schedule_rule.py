from __future__ import annotations

from typing import Optional

from ...core.enums import DenyReason
from ..model import EligibilityDecision
from .base import EligibilityContext, EligibilityRule


class ScheduledRule(EligibilityRule):
    """Course must have a class time other than TBD."""

    def check(self, ctx: EligibilityContext) -> Optional[EligibilityDecision]:
        if not ctx.course.is_scheduled:
            return EligibilityDecision.deny(DenyReason.NOT_SCHEDULED, "not scheduled")
        return None
