from __future__ import annotations

import pytest

from src.campus_attendance.campus_attendance.core.enums import Role
from src.campus_attendance.campus_attendance.core.exceptions import (
    AuthorizationError,
    NotFoundError,
    ValidationError,
)


def test_toggle_adds_then_removes(container, student):
    service = container.enrollment_service

    added = service.toggle_enrollment(student.principal_id, "Chemistry")
    assert added.enrolled
    assert "Chemistry" in added.course_names

    removed = service.toggle_enrollment(student.principal_id, "Chemistry")
    assert not removed.enrolled
    assert removed.course_names == student.enrolled_course_names


def test_double_toggle_restores_enrollments(container, principals, student):
    before = principals.get_by_id(student.principal_id).enrolled_course_names

    container.enrollment_service.toggle_enrollment(student.principal_id, "Mathematics")
    container.enrollment_service.toggle_enrollment(student.principal_id, "Mathematics")

    assert principals.get_by_id(student.principal_id).enrolled_course_names == before


def test_toggle_requires_course_name_and_principal(container, student):
    with pytest.raises(ValidationError):
        container.enrollment_service.toggle_enrollment(student.principal_id, " ")
    with pytest.raises(NotFoundError):
        container.enrollment_service.toggle_enrollment("ghost", "Mathematics")


def test_select_term(container, principals, student):
    container.enrollment_service.select_term(student.principal_id, year_id="y2", semester_id="")

    stored = principals.get_by_id(student.principal_id)
    assert (stored.year_id, stored.semester_id) == ("y2", None)


def test_super_admin_lists_and_deletes(container, principals, student, make_principal):
    root = principals.add(make_principal("root", Role.SUPER_ADMIN))
    admin_service = container.principal_admin_service

    assert {p.principal_id for p in admin_service.list_principals(current_role=Role.SUPER_ADMIN)} == {"alice", "root"}

    admin_service.delete_principal(
        current_role=Role.SUPER_ADMIN, current_principal_id=root.principal_id, principal_id=student.principal_id
    )
    assert principals.get_by_id(student.principal_id) is None


def test_super_admin_cannot_delete_self_or_missing(container, principals, make_principal):
    root = principals.add(make_principal("root", Role.SUPER_ADMIN))
    admin_service = container.principal_admin_service

    with pytest.raises(ValidationError):
        admin_service.delete_principal(current_role=Role.SUPER_ADMIN, current_principal_id="root", principal_id="root")
    with pytest.raises(NotFoundError):
        admin_service.delete_principal(
            current_role=Role.SUPER_ADMIN, current_principal_id=root.principal_id, principal_id="ghost"
        )


@pytest.mark.parametrize("role", [Role.ADMIN, Role.STUDENT])
def test_principal_tooling_is_super_admin_only(container, role):
    with pytest.raises(AuthorizationError):
        container.principal_admin_service.list_principals(current_role=role)


def test_super_admin_edits_a_principal(container, principals, student, make_principal):
    principals.add(make_principal("root", Role.SUPER_ADMIN))

    updated = container.principal_admin_service.update_principal(
        current_role=Role.SUPER_ADMIN,
        current_principal_id="root",
        principal_id=student.principal_id,
        full_name="Alice Rao",
        email="Alice.Rao@Campus.test",
        role="Admin",
    )

    assert (updated.full_name, updated.email, updated.role) == ("Alice Rao", "alice.rao@campus.test", Role.ADMIN)
    stored = principals.get_by_id(student.principal_id)
    assert stored.device_id == student.device_id
    assert stored.enrolled_course_names == student.enrolled_course_names


def test_principal_edit_keeps_emails_unique(container, principals, student, make_principal):
    principals.add(make_principal("root", Role.SUPER_ADMIN))

    with pytest.raises(ValidationError, match="already exists"):
        container.principal_admin_service.update_principal(
            current_role=Role.SUPER_ADMIN,
            current_principal_id="root",
            principal_id=student.principal_id,
            full_name="Alice",
            email="root@campus.test",
            role="Student",
        )
    # Keeping one's own email is fine.
    container.principal_admin_service.update_principal(
        current_role=Role.SUPER_ADMIN,
        current_principal_id="root",
        principal_id=student.principal_id,
        full_name="Alice",
        email=student.email,
        role="Student",
    )


def test_principal_edit_rejects_bad_input_and_missing(container, principals, make_principal):
    principals.add(make_principal("root", Role.SUPER_ADMIN))
    admin_service = container.principal_admin_service
    base = dict(current_role=Role.SUPER_ADMIN, current_principal_id="root", full_name="X", email="x@campus.test")

    with pytest.raises(ValidationError):
        admin_service.update_principal(principal_id="root", role="Student", **base)
    with pytest.raises(ValidationError):
        admin_service.update_principal(principal_id="root", role="Teacher", **base)
    with pytest.raises(NotFoundError):
        admin_service.update_principal(principal_id="ghost", role="Student", **base)
    assert principals.get_by_id("root").role is Role.SUPER_ADMIN


@pytest.mark.parametrize("role", [Role.ADMIN, Role.STUDENT])
def test_principal_edit_is_super_admin_only(container, student, role):
    with pytest.raises(AuthorizationError):
        container.principal_admin_service.update_principal(
            current_role=role,
            current_principal_id="x",
            principal_id=student.principal_id,
            full_name="X",
            email="x@campus.test",
            role="Student",
        )
