from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import FrozenSet, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import DenyReason, Role
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from ..devices.service import DeviceBindingService
from .model import Principal
from .repository import PrincipalRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionPrincipal:
    """What we store into the Flask session after sign-in."""

    principal_id: str
    full_name: str
    email: str
    role: Role
    home: str


def home_route_for(role: Role) -> str:
    """Landing route per role. Every Role member must be handled here."""

    if role is Role.STUDENT:
        return "/me/courses"
    if role is Role.ADMIN:
        return "/catalog/years"
    if role is Role.SUPER_ADMIN:
        return "/superadmin/principals"
    raise ValueError(f"Unhandled role: {role!r}")


def _parse_role(value: object) -> Role:
    try:
        return value if isinstance(value, Role) else Role(str(value))
    except ValueError:
        raise ValidationError("Please select your role")


class AuthService:
    """Use case: sign up / sign in with email and password, bound to a device."""

    def __init__(self, principals: PrincipalRepository, devices: DeviceBindingService):
        self._principals = principals
        self._devices = devices

    def _to_session(self, principal: Principal) -> SessionPrincipal:
        return SessionPrincipal(
            principal_id=principal.principal_id,
            full_name=principal.full_name,
            email=principal.email,
            role=principal.role,
            home=home_route_for(principal.role),
        )

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        full_name: str,
        role: object,
        device_id: Optional[str],
        device_type: str = "web",
    ) -> SessionPrincipal:
        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        full_name = require_non_empty(full_name, "Full name")
        parsed_role = _parse_role(role)
        device_id = (device_id or "").strip()
        client_device = bool(device_id)
        if not client_device:
            if parsed_role is Role.STUDENT:
                raise PermissionDeniedError(
                    "This device could not be identified. Student accounts must be created on their own device",
                    reason=DenyReason.UNAUTHORIZED_DEVICE,
                )
            # Staff accounts are not device-bound.
            device_id = f"unbound-{uuid.uuid4().hex}"

        if self._principals.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        principal_id = self._principals.create_principal(
            email=email,
            full_name=full_name,
            password_hash=generate_password_hash(password),
            role=parsed_role,
            device_id=device_id,
        )
        if client_device:
            self._principals.register_device(device_id=device_id, device_type=device_type)
        logger.info("Created %s account %s", parsed_role.value, principal_id)

        principal = self._principals.get_by_id(principal_id)
        if not principal:
            raise NotFoundError("User data not found")
        return self._to_session(principal)

    def sign_in(self, email: str, password: str, *, device_id: Optional[str]) -> SessionPrincipal:
        principal = self._principals.get_by_email((email or "").strip().lower())
        if not principal:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(principal.password_hash, password or "")
        except (ValueError, TypeError):
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        self._devices.require_device(principal, device_id)
        return self._to_session(principal)

    def current(self, principal_id: str, *, device_id: Optional[str]) -> Principal:
        """Reload the signed-in principal and re-check its device binding."""

        principal = self._principals.get_by_id(principal_id)
        if not principal:
            raise AuthenticationError("User data not found")
        self._devices.require_device(principal, device_id)
        return principal


@dataclass(frozen=True)
class EnrollmentResult:
    course_name: str
    enrolled: bool
    course_names: FrozenSet[str]


class EnrollmentService:
    """Use case: students pick their term and enroll in courses by name."""

    def __init__(self, principals: PrincipalRepository):
        self._principals = principals

    def toggle_enrollment(self, principal_id: str, course_name: str) -> EnrollmentResult:
        course_name = require_non_empty(course_name, "Course name")
        principal = self._principals.get_by_id(principal_id)
        if not principal:
            raise NotFoundError("User data not found")

        if principal.is_enrolled(course_name):
            names = self._principals.remove_course_name(principal_id, course_name)
        else:
            names = self._principals.add_course_name(principal_id, course_name)

        return EnrollmentResult(course_name=course_name, enrolled=course_name in names, course_names=names)

    def select_term(self, principal_id: str, *, year_id: str, semester_id: Optional[str] = None) -> None:
        year_id = require_non_empty(year_id, "Year")
        if not self._principals.set_term(principal_id, year_id=year_id, semester_id=semester_id or None):
            raise NotFoundError("User data not found")


class PrincipalAdminService:
    """Use case: Super-Admin tooling over accounts."""

    def __init__(self, principals: PrincipalRepository):
        self._principals = principals

    def list_principals(self, *, current_role: Role):
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._principals.list_all()

    def delete_principal(self, *, current_role: Role, current_principal_id: str, principal_id: str) -> None:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")
        if principal_id == current_principal_id:
            raise ValidationError("You cannot delete your own account")

        if not self._principals.get_by_id(principal_id):
            raise NotFoundError("User not found")
        if not self._principals.delete_by_id(principal_id):
            raise ValidationError("Failed to delete the user")

    def update_principal(
        self,
        *,
        current_role: Role,
        current_principal_id: str,
        principal_id: str,
        full_name: str,
        email: str,
        role: object,
    ) -> Principal:
        if current_role != Role.SUPER_ADMIN:
            raise AuthorizationError("You do not have permission")

        full_name = require_non_empty(full_name, "Full name")
        email = require_email(email)
        parsed_role = _parse_role(role)

        existing = self._principals.get_by_id(principal_id)
        if not existing:
            raise NotFoundError("User not found")
        if principal_id == current_principal_id and parsed_role != existing.role:
            raise ValidationError("You cannot change your own role")
        owner = self._principals.get_by_email(email)
        if owner and owner.principal_id != principal_id:
            raise ValidationError("An account with this email already exists")

        if not self._principals.update_principal(principal_id, full_name=full_name, email=email, role=parsed_role):
            raise NotFoundError("User not found")
        logger.info("Updated account %s", principal_id)
        return self._principals.get_by_id(principal_id) or existing
