from __future__ import annotations

from typing import Optional

from .enums import DenyReason


class DomainError(Exception):
    """Base exception for business rule violations.

    ``reason`` is set when the error comes from a denied eligibility or device check.
    """

    def __init__(self, message: str = "", *, reason: Optional[DenyReason] = None):
        super().__init__(message)
        self.reason = reason


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class PermissionDeniedError(AuthorizationError):
    """Raised when the device binding or a platform permission refuses the action."""


class NotFoundError(DomainError):
    """Raised when a principal, course or session is absent but expected."""


class AlreadyRecordedError(DomainError):
    """Raised when the student already has an entry in today's session."""


class NotConfiguredError(DomainError):
    """Raised when a course is missing its schedule or location."""


class UnavailableError(DomainError):
    """Raised when a collaborator (database, storage, geolocation) cannot be reached."""


class WriteConflictError(DomainError):
    """Raised when an attendance write collides with an existing entry."""
