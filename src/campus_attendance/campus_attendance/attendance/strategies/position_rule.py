from __future__ import annotations

import logging
from typing import Optional

from ...common.geo import haversine_meters
from ...core.enums import DenyReason
from ...core.exceptions import PermissionDeniedError, UnavailableError
from ..model import EligibilityDecision
from .base import EligibilityContext, EligibilityRule

logger = logging.getLogger(__name__)


class PositionRule(EligibilityRule):
    """Device must report a position within ``max_distance_m`` of the course location."""

    def __init__(self, max_distance_m: float):
        self._max_distance_m = float(max_distance_m)

    def check(self, ctx: EligibilityContext) -> Optional[EligibilityDecision]:
        if ctx.geolocation is None:
            return EligibilityDecision.deny(DenyReason.LOCATION_UNAVAILABLE, "location unavailable")

        try:
            ctx.geolocation.request_permission()
            position = ctx.geolocation.current_position()
        except (PermissionDeniedError, UnavailableError) as e:
            logger.info("Location unavailable for %s: %s", ctx.principal.principal_id, e)
            return EligibilityDecision.deny(DenyReason.LOCATION_UNAVAILABLE, "location unavailable")

        distance = haversine_meters(
            position.latitude,
            position.longitude,
            float(ctx.course.fixed_latitude),  # type: ignore[arg-type]
            float(ctx.course.fixed_longitude),  # type: ignore[arg-type]
        )
        if distance > self._max_distance_m:
            return EligibilityDecision.deny(
                DenyReason.OUT_OF_RANGE,
                "outside the class location",
                distance_m=distance,
            )
        return EligibilityDecision.permit(distance_m=distance)
