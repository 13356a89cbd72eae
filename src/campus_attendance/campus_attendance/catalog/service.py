from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..common.validators import require_coordinate, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError, UnavailableError, ValidationError
from .cache import CatalogCache, CatalogSnapshot, sort_by_order
from .model import Course, Semester
from .repository import CatalogRepository

logger = logging.getLogger(__name__)

_SCHEDULERS = {Role.ADMIN, Role.SUPER_ADMIN}


class CatalogService:
    """Read and maintain the year → semester → course catalog.

    Years come from the cache; semesters and courses are always fetched live.
    """

    def __init__(self, catalog: CatalogRepository, cache: CatalogCache):
        self._catalog = catalog
        self._cache = cache

    def get_years(self, *, force_refresh: bool = False) -> CatalogSnapshot:
        return self._cache.get_years(force_refresh=force_refresh)

    def list_semesters(self, year_id: str) -> Sequence[Semester]:
        if not self._catalog.get_year(year_id):
            raise UnavailableError("Year could not be resolved")
        return sort_by_order(self._catalog.list_semesters(year_id))

    def list_courses(self, year_id: str, semester_id: str) -> Sequence[Course]:
        if not self._catalog.get_semester(year_id, semester_id):
            raise UnavailableError("Semester could not be resolved")
        return tuple(self._catalog.list_courses(year_id, semester_id))

    def get_course(self, course_id: str) -> Course:
        course = self._catalog.get_course(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    # Super-Admin catalog maintenance

    @staticmethod
    def _require_super_admin(current_role: Role) -> None:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")

    @staticmethod
    def _parse_order(order: object) -> int:
        try:
            return int(order)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            raise ValidationError("Order must be a whole number")

    def create_year(self, *, current_role: Role, name: str, order: object) -> str:
        self._require_super_admin(current_role)
        year_id = self._catalog.create_year(name=require_non_empty(name, "Year name"), order=self._parse_order(order))
        self._cache.invalidate()
        return year_id

    def create_semester(self, *, current_role: Role, year_id: str, name: str, order: object) -> str:
        self._require_super_admin(current_role)
        if not self._catalog.get_year(year_id):
            raise NotFoundError("Year not found")
        return self._catalog.create_semester(
            year_id=year_id,
            name=require_non_empty(name, "Semester name"),
            order=self._parse_order(order),
        )

    def create_course(self, *, current_role: Role, year_id: str, semester_id: str, name: str, code: str) -> str:
        self._require_super_admin(current_role)
        if not self._catalog.get_semester(year_id, semester_id):
            raise NotFoundError("Semester not found")
        return self._catalog.create_course(
            year_id=year_id,
            semester_id=semester_id,
            name=require_non_empty(name, "Course name"),
            code=require_non_empty(code, "Course code").upper(),
        )

    def update_year(self, *, current_role: Role, year_id: str, name: str, order: object) -> None:
        self._require_super_admin(current_role)
        if not self._catalog.update_year(
            year_id,
            name=require_non_empty(name, "Year name"),
            order=self._parse_order(order),
        ):
            raise NotFoundError("Year not found")
        self._cache.invalidate()

    def update_semester(self, *, current_role: Role, year_id: str, semester_id: str, name: str, order: object) -> None:
        self._require_super_admin(current_role)
        if not self._catalog.update_semester(
            year_id,
            semester_id,
            name=require_non_empty(name, "Semester name"),
            order=self._parse_order(order),
        ):
            raise NotFoundError("Semester not found")

    def update_course(self, *, current_role: Role, course_id: str, name: str, code: str) -> Course:
        self._require_super_admin(current_role)
        if not self._catalog.update_course(
            course_id,
            name=require_non_empty(name, "Course name"),
            code=require_non_empty(code, "Course code").upper(),
        ):
            raise NotFoundError("Course not found")
        return self.get_course(course_id)

    def delete_year(self, *, current_role: Role, year_id: str) -> None:
        self._require_super_admin(current_role)
        if not self._catalog.delete_year(year_id):
            raise NotFoundError("Year not found")
        self._cache.invalidate()

    def delete_semester(self, *, current_role: Role, year_id: str, semester_id: str) -> None:
        self._require_super_admin(current_role)
        if not self._catalog.delete_semester(year_id, semester_id):
            raise NotFoundError("Semester not found")

    def delete_course(self, *, current_role: Role, course_id: str) -> None:
        self._require_super_admin(current_role)
        if not self._catalog.delete_course(course_id):
            raise NotFoundError("Course not found")

    # Admin scheduling

    def set_schedule(
        self,
        *,
        current_role: Role,
        course_id: str,
        class_time: str,
        latitude: Optional[object],
        longitude: Optional[object],
    ) -> Course:
        """Set class time and the fixed location students must be near.

        ``class_time="TBD"`` takes the course out of the attendance window.
        """

        if current_role not in _SCHEDULERS:
            raise AuthorizationError("You do not have permission")

        class_time = require_non_empty(class_time, "Class time")
        if (latitude is None) != (longitude is None):
            raise ValidationError("Both latitude and longitude are required")

        lat = require_coordinate(latitude, "Latitude", limit=90) if latitude is not None else None
        lng = require_coordinate(longitude, "Longitude", limit=180) if longitude is not None else None

        if not self._catalog.update_schedule(
            course_id=course_id,
            class_time=class_time,
            fixed_latitude=lat,
            fixed_longitude=lng,
        ):
            raise NotFoundError("Course not found")

        logger.info("Course %s scheduled at %s", course_id, class_time)
        return self.get_course(course_id)
