from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters long")
    return value


def require_email(value: Optional[str]) -> str:
    email = (value or "").strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError("Please enter a valid email address")
    return email


def require_coordinate(value: object, field_name: str, *, limit: float) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not -limit <= number <= limit:
        raise ValidationError(f"{field_name} out of range")
    return number
