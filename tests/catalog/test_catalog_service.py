from __future__ import annotations

import pytest

from src.campus_attendance.campus_attendance.catalog.model import Semester
from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    UnavailableError,
    ValidationError,
)


def test_semesters_are_sorted_by_order(container, catalog):
    catalog.semesters["s0"] = Semester(semester_id="s0", year_id="y1", name="Bridge", order=0)

    names = [s.name for s in container.catalog_service.list_semesters("y1")]

    assert names == ["Bridge", "Semester 1"]


def test_unresolvable_parent_scope_is_unavailable(container):
    with pytest.raises(UnavailableError):
        container.catalog_service.list_semesters("missing")
    with pytest.raises(UnavailableError):
        container.catalog_service.list_courses("y1", "missing")


def test_courses_keep_creation_order(container):
    names = [c.name for c in container.catalog_service.list_courses("y1", "s1")]

    assert names == ["Mathematics", "Physics", "Chemistry"]


def test_super_admin_builds_the_catalog(container, catalog):
    service = container.catalog_service

    year_id = service.create_year(current_role=Role.SUPER_ADMIN, name="Second Year", order="2")
    semester_id = service.create_semester(current_role=Role.SUPER_ADMIN, year_id=year_id, name="Semester 3", order=1)
    course_id = service.create_course(
        current_role=Role.SUPER_ADMIN, year_id=year_id, semester_id=semester_id, name="Networks", code="CS301"
    )

    course = service.get_course(course_id)
    assert course.class_time == "TBD"
    assert not course.is_scheduled
    assert catalog.years[year_id].order == 2


@pytest.mark.parametrize("role", [Role.ADMIN, Role.STUDENT])
def test_only_super_admin_edits_the_catalog(container, role):
    with pytest.raises(AuthorizationError):
        container.catalog_service.create_year(current_role=role, name="X", order=1)
    with pytest.raises(AuthorizationError):
        container.catalog_service.delete_course(current_role=role, course_id="math")


def test_bad_order_is_rejected(container):
    with pytest.raises(ValidationError):
        container.catalog_service.create_year(current_role=Role.SUPER_ADMIN, name="X", order="first")


def test_year_edits_expire_cached_years(container, catalog):
    service = container.catalog_service
    service.get_years()

    service.create_year(current_role=Role.SUPER_ADMIN, name="Second Year", order=2)
    years = service.get_years().years

    assert catalog.list_years_calls == 2
    assert [y.name for y in years] == ["First Year", "Second Year"]


def test_delete_missing_entities_is_not_found(container):
    with pytest.raises(NotFoundError):
        container.catalog_service.delete_year(current_role=Role.SUPER_ADMIN, year_id="nope")
    with pytest.raises(NotFoundError):
        container.catalog_service.delete_semester(current_role=Role.SUPER_ADMIN, year_id="y1", semester_id="nope")


def test_admin_sets_schedule_and_location(container):
    course = container.catalog_service.set_schedule(
        current_role=Role.ADMIN, course_id="physics", class_time="14:00 - 15:00", latitude="12.97", longitude=77.59
    )

    assert course.is_scheduled
    assert (course.fixed_latitude, course.fixed_longitude) == (12.97, 77.59)


def test_schedule_back_to_tbd_closes_attendance(container):
    course = container.catalog_service.set_schedule(
        current_role=Role.ADMIN, course_id="math", class_time="TBD", latitude=None, longitude=None
    )

    assert not course.is_scheduled
    assert not course.has_location


@pytest.mark.parametrize(
    "latitude, longitude",
    [(12.97, None), (None, 77.59), (91, 0), (0, 181), ("north", 0)],
)
def test_invalid_coordinates_are_rejected(container, latitude, longitude):
    with pytest.raises(ValidationError):
        container.catalog_service.set_schedule(
            current_role=Role.ADMIN, course_id="math", class_time="09:00", latitude=latitude, longitude=longitude
        )


def test_students_cannot_schedule(container):
    with pytest.raises(AuthorizationError):
        container.catalog_service.set_schedule(
            current_role=Role.STUDENT, course_id="math", class_time="09:00", latitude=None, longitude=None
        )


def test_super_admin_renames_and_reorders(container, catalog):
    service = container.catalog_service
    service.get_years()

    service.update_year(current_role=Role.SUPER_ADMIN, year_id="y1", name="Freshman Year", order="3")
    service.update_semester(current_role=Role.SUPER_ADMIN, year_id="y1", semester_id="s1", name="Autumn", order=2)
    course = service.update_course(current_role=Role.SUPER_ADMIN, course_id="math", name="Calculus", code="ma102")

    assert [y.name for y in service.get_years().years] == ["Freshman Year"]
    assert catalog.list_years_calls == 2
    assert (catalog.semesters["s1"].name, catalog.semesters["s1"].order) == ("Autumn", 2)
    assert (course.name, course.code) == ("Calculus", "MA102")
    # Scheduling fields are left alone.
    assert course.class_time == "09:00 - 10:00"
    assert course.has_location


def test_saving_unchanged_values_succeeds(container):
    service = container.catalog_service

    for _ in range(2):
        service.update_year(current_role=Role.SUPER_ADMIN, year_id="y1", name="First Year", order=1)
        course = service.set_schedule(
            current_role=Role.ADMIN, course_id="math", class_time="09:00 - 10:00", latitude=12.9716, longitude=77.5946
        )

    assert course.is_scheduled


def test_edit_missing_entities_is_not_found(container):
    service = container.catalog_service

    with pytest.raises(NotFoundError):
        service.update_year(current_role=Role.SUPER_ADMIN, year_id="nope", name="X", order=1)
    with pytest.raises(NotFoundError):
        service.update_semester(current_role=Role.SUPER_ADMIN, year_id="nope", semester_id="s1", name="X", order=1)
    with pytest.raises(NotFoundError):
        service.update_course(current_role=Role.SUPER_ADMIN, course_id="nope", name="X", code="X1")


@pytest.mark.parametrize(
    "kwargs",
    [{"name": " ", "order": 1}, {"name": "Year", "order": "one"}],
)
def test_year_edit_validates_input(container, catalog, kwargs):
    with pytest.raises(ValidationError):
        container.catalog_service.update_year(current_role=Role.SUPER_ADMIN, year_id="y1", **kwargs)
    assert catalog.years["y1"].name == "First Year"


@pytest.mark.parametrize("role", [Role.ADMIN, Role.STUDENT])
def test_only_super_admin_renames(container, role):
    with pytest.raises(AuthorizationError):
        container.catalog_service.update_year(current_role=role, year_id="y1", name="X", order=1)
    with pytest.raises(AuthorizationError):
        container.catalog_service.update_course(current_role=role, course_id="math", name="X", code="X1")
