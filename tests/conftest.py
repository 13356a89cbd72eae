from __future__ import annotations

import copy
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Optional
from zoneinfo import ZoneInfo

import pytest

from src.campus_attendance.campus_attendance.attendance.model import AttendanceEntry, AttendanceSession
from src.campus_attendance.campus_attendance.catalog.model import AcademicYear, Course, Semester
from src.campus_attendance.campus_attendance.container import assemble_container
from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import UnavailableError, WriteConflictError
from src.campus_attendance.campus_attendance.principals.model import Principal
from src.campus_attendance.campus_attendance.storage.object_storage import LocalObjectStorage

# Mathematics is held here; tests report positions about 11 m and 1.1 km north of it.
CAMPUS = (12.9716, 77.5946)


class MemoryStore:
    def __init__(self, data: Optional[dict] = None):
        self.data: dict[str, Any] = dict(data or {})

    def get(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self.data.get(key))

    def set(self, key: str, value: Any) -> None:
        self.data[key] = copy.deepcopy(value)

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class InMemoryPrincipals:
    def __init__(self):
        self.by_id: dict[str, Principal] = {}
        self.devices: dict[str, str] = {}
        self._seq = 0

    def add(self, principal: Principal) -> Principal:
        self.by_id[principal.principal_id] = principal
        return principal

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        return self.by_id.get(principal_id)

    def get_by_email(self, email: str) -> Optional[Principal]:
        return next((p for p in self.by_id.values() if p.email == email), None)

    def create_principal(self, *, email, full_name, password_hash, role, device_id) -> str:
        self._seq += 1
        principal_id = f"p{self._seq}"
        self.add(
            Principal(
                principal_id=principal_id,
                email=email,
                full_name=full_name,
                password_hash=password_hash,
                role=role,
                device_id=device_id,
            )
        )
        return principal_id

    def register_device(self, *, device_id: str, device_type: str) -> None:
        self.devices[device_id] = device_type

    def add_course_name(self, principal_id: str, course_name: str):
        p = self.by_id[principal_id]
        self.by_id[principal_id] = replace(p, enrolled_course_names=p.enrolled_course_names | {course_name})
        return self.by_id[principal_id].enrolled_course_names

    def remove_course_name(self, principal_id: str, course_name: str):
        p = self.by_id[principal_id]
        self.by_id[principal_id] = replace(p, enrolled_course_names=p.enrolled_course_names - {course_name})
        return self.by_id[principal_id].enrolled_course_names

    def set_term(self, principal_id: str, *, year_id, semester_id) -> bool:
        p = self.by_id.get(principal_id)
        if not p:
            return False
        self.by_id[principal_id] = replace(p, year_id=year_id, semester_id=semester_id)
        return True

    def update_principal(self, principal_id: str, *, full_name, email, role) -> bool:
        p = self.by_id.get(principal_id)
        if not p:
            return False
        self.by_id[principal_id] = replace(p, full_name=full_name, email=email, role=role)
        return True

    def delete_by_id(self, principal_id: str) -> bool:
        return self.by_id.pop(principal_id, None) is not None

    def list_all(self):
        return sorted(self.by_id.values(), key=lambda p: p.full_name)


class InMemoryCatalog:
    def __init__(self):
        self.years: dict[str, AcademicYear] = {}
        self.semesters: dict[str, Semester] = {}
        self.courses: dict[str, Course] = {}
        self.list_years_calls = 0
        self.fail = False
        self._seq = 100

    def _next_id(self, prefix: str) -> str:
        self._seq += 1
        return f"{prefix}{self._seq}"

    def list_years(self):
        self.list_years_calls += 1
        if self.fail:
            raise UnavailableError("Network error. Please check your connection")
        return list(self.years.values())

    def get_year(self, year_id: str):
        return self.years.get(year_id)

    def list_semesters(self, year_id: str):
        return [s for s in self.semesters.values() if s.year_id == year_id]

    def get_semester(self, year_id: str, semester_id: str):
        s = self.semesters.get(semester_id)
        return s if s and s.year_id == year_id else None

    def list_courses(self, year_id: str, semester_id: str):
        return [c for c in self.courses.values() if c.year_id == year_id and c.semester_id == semester_id]

    def get_course(self, course_id: str):
        return self.courses.get(course_id)

    def create_year(self, *, name: str, order: int) -> str:
        year_id = self._next_id("y")
        self.years[year_id] = AcademicYear(year_id=year_id, name=name, order=order)
        return year_id

    def create_semester(self, *, year_id: str, name: str, order: int) -> str:
        semester_id = self._next_id("s")
        self.semesters[semester_id] = Semester(semester_id=semester_id, year_id=year_id, name=name, order=order)
        return semester_id

    def create_course(self, *, year_id: str, semester_id: str, name: str, code: str) -> str:
        course_id = self._next_id("c")
        self.courses[course_id] = Course(
            course_id=course_id, year_id=year_id, semester_id=semester_id, name=name, code=code
        )
        return course_id

    def update_year(self, year_id: str, *, name: str, order: int) -> bool:
        y = self.years.get(year_id)
        if not y:
            return False
        self.years[year_id] = replace(y, name=name, order=order)
        return True

    def update_semester(self, year_id: str, semester_id: str, *, name: str, order: int) -> bool:
        s = self.get_semester(year_id, semester_id)
        if not s:
            return False
        self.semesters[semester_id] = replace(s, name=name, order=order)
        return True

    def update_course(self, course_id: str, *, name: str, code: str) -> bool:
        c = self.courses.get(course_id)
        if not c:
            return False
        self.courses[course_id] = replace(c, name=name, code=code)
        return True

    def update_schedule(self, *, course_id, class_time, fixed_latitude, fixed_longitude) -> bool:
        c = self.courses.get(course_id)
        if not c:
            return False
        self.courses[course_id] = replace(
            c, class_time=class_time, fixed_latitude=fixed_latitude, fixed_longitude=fixed_longitude
        )
        return True

    def delete_year(self, year_id: str) -> bool:
        return self.years.pop(year_id, None) is not None

    def delete_semester(self, year_id: str, semester_id: str) -> bool:
        if not self.get_semester(year_id, semester_id):
            return False
        del self.semesters[semester_id]
        return True

    def delete_course(self, course_id: str) -> bool:
        return self.courses.pop(course_id, None) is not None


class InMemoryAttendance:
    def __init__(self):
        self.sessions: dict[tuple[str, date], AttendanceSession] = {}
        self.fail = False
        self.fail_reads = False

    def get_session(self, course_id: str, session_date: date):
        if self.fail_reads:
            raise UnavailableError("Network error. Please check your connection")
        return self.sessions.get((course_id, session_date))

    def append_entry(self, *, course_id: str, session_date: date, class_time: str, entry: AttendanceEntry) -> None:
        if self.fail:
            raise UnavailableError("Network error. Please check your connection")
        key = (course_id, session_date)
        session = self.sessions.get(key) or AttendanceSession(
            course_id=course_id, session_date=session_date, class_time=class_time
        )
        if session.has_student(entry.student_id):
            raise WriteConflictError("Attendance already recorded for today")
        self.sessions[key] = replace(session, students=session.students + (entry,))

    def list_sessions(self, course_id: str):
        return [s for (cid, _), s in self.sessions.items() if cid == course_id]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 3, 2, 10, 15, 30, tzinfo=ZoneInfo("Asia/Kolkata"))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def principals() -> InMemoryPrincipals:
    return InMemoryPrincipals()


@pytest.fixture
def attendance() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def catalog() -> InMemoryCatalog:
    """One year/semester with a located course, a TBD course and an unlocated course."""

    cat = InMemoryCatalog()
    cat.years["y1"] = AcademicYear(year_id="y1", name="First Year", order=1)
    cat.semesters["s1"] = Semester(semester_id="s1", year_id="y1", name="Semester 1", order=1)
    cat.courses["math"] = Course(
        course_id="math",
        year_id="y1",
        semester_id="s1",
        name="Mathematics",
        code="MA101",
        class_time="09:00 - 10:00",
        fixed_latitude=CAMPUS[0],
        fixed_longitude=CAMPUS[1],
    )
    cat.courses["physics"] = Course(
        course_id="physics", year_id="y1", semester_id="s1", name="Physics", code="PH101"
    )
    cat.courses["chem"] = Course(
        course_id="chem", year_id="y1", semester_id="s1", name="Chemistry", code="CH101", class_time="11:00 - 12:00"
    )
    return cat


def _make_principal(principal_id: str, role: Role = Role.STUDENT, **kwargs) -> Principal:
    defaults = dict(
        email=f"{principal_id}@campus.test",
        full_name=principal_id.title(),
        password_hash="x",
        device_id=f"device-{principal_id}",
    )
    defaults.update(kwargs)
    return Principal(principal_id=principal_id, role=role, **defaults)


@pytest.fixture
def make_principal():
    return _make_principal


@pytest.fixture
def student(principals: InMemoryPrincipals) -> Principal:
    return principals.add(
        _make_principal(
            "alice",
            enrolled_course_names=frozenset({"Mathematics", "Physics"}),
            year_id="y1",
            semester_id="s1",
        )
    )


@pytest.fixture
def container(principals, catalog, attendance, store, tmp_path):
    return assemble_container(
        principals_repo=principals,
        catalog_repo=catalog,
        attendance_repo=attendance,
        local_store=store,
        device_fallback_store=MemoryStore(),
        storage=LocalObjectStorage(tmp_path / "notes"),
    )
