from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles a principal can hold. Values match what is stored in the database."""

    STUDENT = "Student"
    ADMIN = "Admin"
    SUPER_ADMIN = "Super-Admin"


class AttendanceStatus(str, Enum):
    PRESENT = "Present"
    ABSENT = "Absent"


class DenyReason(str, Enum):
    """Why an attendance action is not permitted right now."""

    NOT_SCHEDULED = "NOT_SCHEDULED"
    ALREADY_RECORDED = "ALREADY_RECORDED"
    LOCATION_NOT_CONFIGURED = "LOCATION_NOT_CONFIGURED"
    LOCATION_UNAVAILABLE = "LOCATION_UNAVAILABLE"
    OUT_OF_RANGE = "OUT_OF_RANGE"
    UNAUTHORIZED_DEVICE = "UNAUTHORIZED_DEVICE"
