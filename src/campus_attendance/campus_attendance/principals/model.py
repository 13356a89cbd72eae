from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Principal:
    """Domain entity: an authenticated account.

    Note: Plain data object, no database access here. ``device_id`` is bound at
    sign-up and is not changed by any regular flow.
    """

    principal_id: str
    email: str
    full_name: str
    password_hash: str
    role: Role
    device_id: str
    enrolled_course_names: FrozenSet[str] = field(default_factory=frozenset)
    year_id: Optional[str] = None
    semester_id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_enrolled(self, course_name: str) -> bool:
        return course_name in self.enrolled_course_names
