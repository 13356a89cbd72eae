from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional

from ..core.constants import CLASS_TIME_TBD


@dataclass(frozen=True)
class AcademicYear:
    """Domain entity: a catalog year. ``order`` ranks years for display only."""

    year_id: str
    name: str
    order: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "AcademicYear":
        return cls(year_id=str(data["year_id"]), name=str(data["name"]), order=int(data["order"]))


@dataclass(frozen=True)
class Semester:
    semester_id: str
    year_id: str
    name: str
    order: int


@dataclass(frozen=True)
class Course:
    """Domain entity: a course offered in one (year, semester)."""

    course_id: str
    year_id: str
    semester_id: str
    name: str
    code: str
    class_time: str = CLASS_TIME_TBD
    fixed_latitude: Optional[float] = None
    fixed_longitude: Optional[float] = None

    @property
    def is_scheduled(self) -> bool:
        return bool(self.class_time) and self.class_time != CLASS_TIME_TBD

    @property
    def has_location(self) -> bool:
        return self.fixed_latitude is not None and self.fixed_longitude is not None
