from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import DEFAULT_GEOFENCE_RADIUS_METERS
from .repository import AttendanceRepository
from .strategies.base import EligibilityRule
from .strategies.location_rule import LocationConfiguredRule
from .strategies.position_rule import PositionRule
from .strategies.recorded_rule import NotYetRecordedRule
from .strategies.schedule_rule import ScheduledRule


@dataclass
class EligibilityRuleFactory:
    """Factory Pattern: assemble the ordered eligibility rules."""

    attendance: AttendanceRepository
    geofence_radius_m: float = DEFAULT_GEOFENCE_RADIUS_METERS

    def for_check_in(self) -> list[EligibilityRule]:
        return [
            ScheduledRule(),
            NotYetRecordedRule(self.attendance),
            LocationConfiguredRule(),
            PositionRule(self.geofence_radius_m),
        ]

    def for_listing(self) -> list[EligibilityRule]:
        """Rules that need no device position, used to badge course lists."""

        return [
            ScheduledRule(),
            NotYetRecordedRule(self.attendance),
            LocationConfiguredRule(),
        ]
