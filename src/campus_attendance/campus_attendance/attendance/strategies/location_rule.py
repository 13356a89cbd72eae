from __future__ import annotations

from typing import Optional

from ...core.enums import DenyReason
from ..model import EligibilityDecision
from .base import EligibilityContext, EligibilityRule


class LocationConfiguredRule(EligibilityRule):
    """Course must carry both fixed coordinates."""

    def check(self, ctx: EligibilityContext) -> Optional[EligibilityDecision]:
        if not ctx.course.has_location:
            return EligibilityDecision.deny(DenyReason.LOCATION_NOT_CONFIGURED, "location not configured")
        return None
