from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AcademicYear, Course, Semester


class CatalogRepository(Protocol):
    """Document-store view of the year → semester → course hierarchy.

    Implementations raise UnavailableError when the store cannot be reached.
    """

    def list_years(self) -> Sequence[AcademicYear]:
        raise NotImplementedError

    def get_year(self, year_id: str) -> Optional[AcademicYear]:
        raise NotImplementedError

    def list_semesters(self, year_id: str) -> Sequence[Semester]:
        raise NotImplementedError

    def get_semester(self, year_id: str, semester_id: str) -> Optional[Semester]:
        raise NotImplementedError

    def list_courses(self, year_id: str, semester_id: str) -> Sequence[Course]:
        raise NotImplementedError

    def get_course(self, course_id: str) -> Optional[Course]:
        raise NotImplementedError

    def create_year(self, *, name: str, order: int) -> str:
        raise NotImplementedError

    def create_semester(self, *, year_id: str, name: str, order: int) -> str:
        raise NotImplementedError

    def create_course(self, *, year_id: str, semester_id: str, name: str, code: str) -> str:
        raise NotImplementedError

    def update_year(self, year_id: str, *, name: str, order: int) -> bool:
        raise NotImplementedError

    def update_semester(self, year_id: str, semester_id: str, *, name: str, order: int) -> bool:
        raise NotImplementedError

    def update_course(self, course_id: str, *, name: str, code: str) -> bool:
        raise NotImplementedError

    def update_schedule(
        self,
        *,
        course_id: str,
        class_time: str,
        fixed_latitude: Optional[float],
        fixed_longitude: Optional[float],
    ) -> bool:
        """Merge-update of the schedule fields only."""

        raise NotImplementedError

    def delete_year(self, year_id: str) -> bool:
        raise NotImplementedError

    def delete_semester(self, year_id: str, semester_id: str) -> bool:
        raise NotImplementedError

    def delete_course(self, course_id: str) -> bool:
        raise NotImplementedError
