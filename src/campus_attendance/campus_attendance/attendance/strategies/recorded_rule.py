from __future__ import annotations

from typing import Optional

from ...core.enums import DenyReason
from ..model import EligibilityDecision
from ..repository import AttendanceRepository
from .base import EligibilityContext, EligibilityRule


class NotYetRecordedRule(EligibilityRule):
    """At most one entry per student per course per day."""

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def check(self, ctx: EligibilityContext) -> Optional[EligibilityDecision]:
        session = self._attendance.get_session(ctx.course.course_id, ctx.today)
        if session and session.has_student(ctx.principal.principal_id):
            return EligibilityDecision.deny(DenyReason.ALREADY_RECORDED, "already recorded today")
        return None
