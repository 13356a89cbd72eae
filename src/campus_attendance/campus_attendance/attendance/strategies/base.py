from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ...catalog.model import Course
from ...location.provider import GeolocationProvider
from ...principals.model import Principal
from ..model import EligibilityDecision


@dataclass(frozen=True)
class EligibilityContext:
    course: Course
    principal: Principal
    today: date
    geolocation: Optional[GeolocationProvider] = None


class EligibilityRule(ABC):
    """Strategy Pattern: one condition of the eligibility window.

    ``check`` returns a Deny decision to stop evaluation, or None (or a Permit
    carrying details such as the measured distance) to let the next rule run.
    """

    @abstractmethod
    def check(self, ctx: EligibilityContext) -> Optional[EligibilityDecision]:
        raise NotImplementedError
