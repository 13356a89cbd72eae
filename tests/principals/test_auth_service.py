from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from src.campus_attendance.campus_attendance.core.enums import DenyReason, Role
from src.campus_attendance.campus_attendance.core.exceptions import (
    AuthenticationError,
    PermissionDeniedError,
    ValidationError,
)
from src.campus_attendance.campus_attendance.principals.service import home_route_for


def _sign_up(container, **overrides):
    data = dict(
        email="Asha@Campus.test",
        password="secret1",
        full_name="Asha",
        role="Student",
        device_id="phone-1",
    )
    data.update(overrides)
    return container.auth_service.sign_up(**data)


def test_sign_up_binds_device_and_returns_home(container, principals):
    s = _sign_up(container)

    stored = principals.get_by_id(s.principal_id)
    assert stored.email == "asha@campus.test"
    assert stored.device_id == "phone-1"
    assert stored.password_hash != "secret1"
    assert principals.devices == {"phone-1": "web"}
    assert s.role is Role.STUDENT
    assert s.home == "/me/courses"


@pytest.mark.parametrize(
    "overrides",
    [
        {"email": "not-an-email"},
        {"password": "12345"},
        {"full_name": "   "},
        {"role": "Teacher"},
        {"role": ""},
    ],
)
def test_sign_up_validates_input(container, overrides):
    with pytest.raises(ValidationError):
        _sign_up(container, **overrides)


def test_sign_up_rejects_duplicate_email(container):
    _sign_up(container)

    with pytest.raises(ValidationError, match="already exists"):
        _sign_up(container, email="asha@campus.test", device_id="phone-2")


@pytest.mark.parametrize("device_id", [None, "", "   "])
def test_student_sign_up_needs_a_device_id(container, principals, device_id):
    with pytest.raises(PermissionDeniedError) as exc:
        _sign_up(container, device_id=device_id)

    assert exc.value.reason is DenyReason.UNAUTHORIZED_DEVICE
    assert principals.get_by_email("asha@campus.test") is None
    assert principals.devices == {}


def test_staff_sign_up_without_device_id_is_not_bound_to_a_shared_id(container, principals):
    first = _sign_up(container, email="admin@campus.test", role="Admin", device_id=None)
    second = _sign_up(container, email="root@campus.test", role="Super-Admin", device_id=None)

    first_device = principals.get_by_id(first.principal_id).device_id
    second_device = principals.get_by_id(second.principal_id).device_id
    assert first_device.startswith("unbound-")
    assert first_device != second_device
    assert principals.devices == {}


def test_sign_in_on_bound_device(container):
    created = _sign_up(container)

    s = container.auth_service.sign_in("asha@campus.test", "secret1", device_id="phone-1")

    assert s.principal_id == created.principal_id


def test_student_on_other_device_is_denied(container):
    _sign_up(container)

    with pytest.raises(PermissionDeniedError) as e:
        container.auth_service.sign_in("asha@campus.test", "secret1", device_id="phone-2")

    assert e.value.reason == DenyReason.UNAUTHORIZED_DEVICE
    assert str(e.value) == "Login failed: This device is not authorized for your account"


def test_admin_may_use_any_device(container):
    _sign_up(container, email="admin@campus.test", role="Admin")

    s = container.auth_service.sign_in("admin@campus.test", "secret1", device_id="laptop-9")

    assert s.home == "/catalog/years"


@pytest.mark.parametrize("email, password", [("asha@campus.test", "wrong"), ("nobody@campus.test", "secret1")])
def test_bad_credentials(container, email, password):
    _sign_up(container)

    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in(email, password, device_id="phone-1")


def test_unreadable_password_hash_counts_as_bad_credentials(container, principals, make_principal):
    principals.add(make_principal("legacy", password_hash="CHANGE_ME", email="legacy@campus.test"))

    with pytest.raises(AuthenticationError):
        container.auth_service.sign_in("legacy@campus.test", "CHANGE_ME", device_id="device-legacy")


def test_current_rechecks_device(container, principals, make_principal):
    principals.add(make_principal("bala", password_hash=generate_password_hash("pw1234")))

    assert container.auth_service.current("bala", device_id="device-bala").principal_id == "bala"
    with pytest.raises(PermissionDeniedError):
        container.auth_service.current("bala", device_id="someone-else")
    with pytest.raises(AuthenticationError):
        container.auth_service.current("ghost", device_id="device-bala")


def test_every_role_has_a_home_route():
    assert {home_route_for(role) for role in Role} == {"/me/courses", "/catalog/years", "/superadmin/principals"}
