from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..catalog.model import Course
from ..core.enums import DenyReason
from ..location.provider import GeolocationProvider
from ..principals.model import Principal
from .model import EligibilityDecision
from .strategies.base import EligibilityContext, EligibilityRule

# What the user can do about each denial.
REMEDIATION = {
    DenyReason.NOT_SCHEDULED: "This class is not yet scheduled. Please check back during scheduled class hours.",
    DenyReason.ALREADY_RECORDED: "Your attendance is already marked for today.",
    DenyReason.LOCATION_NOT_CONFIGURED: "The class location has not been set by the administrator yet.",
    DenyReason.LOCATION_UNAVAILABLE: "Location required: enable location access and try again.",
    DenyReason.OUT_OF_RANGE: "You must be at the class location to mark attendance.",
    DenyReason.UNAUTHORIZED_DEVICE: "This device is not authorized for your account.",
}


class EligibilityEvaluator:
    """Runs the eligibility rules in order; the first Deny wins.

    A denial is final for this call. Callers re-invoke ``evaluate`` to retry.
    """

    def __init__(self, rules: Sequence[EligibilityRule]):
        self._rules = tuple(rules)

    def evaluate(
        self,
        course: Course,
        principal: Principal,
        today: date,
        geolocation: Optional[GeolocationProvider] = None,
    ) -> EligibilityDecision:
        ctx = EligibilityContext(course=course, principal=principal, today=today, geolocation=geolocation)
        distance_m = None
        for rule in self._rules:
            decision = rule.check(ctx)
            if decision is None:
                continue
            if not decision.permitted:
                return decision
            distance_m = decision.distance_m if decision.distance_m is not None else distance_m
        return EligibilityDecision.permit(distance_m=distance_m)
