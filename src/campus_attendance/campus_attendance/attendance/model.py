from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from typing import Optional

from ..core.enums import AttendanceStatus, DenyReason


@dataclass(frozen=True)
class AttendanceEntry:
    """One student's check-in inside a session."""

    student_id: str
    student_name: str
    status: AttendanceStatus
    check_in_time: time


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: who checked in to a course on one local calendar day."""

    course_id: str
    session_date: date
    class_time: str
    students: tuple[AttendanceEntry, ...] = ()

    def entry_for(self, student_id: str) -> Optional[AttendanceEntry]:
        for entry in self.students:
            if entry.student_id == student_id:
                return entry
        return None

    def has_student(self, student_id: str) -> bool:
        return self.entry_for(student_id) is not None


@dataclass(frozen=True)
class SessionStats:
    present: int
    total: int
    percentage: int

    @classmethod
    def of(cls, session: AttendanceSession) -> "SessionStats":
        total = len(session.students)
        present = sum(1 for s in session.students if s.status == AttendanceStatus.PRESENT)
        percentage = round(present / total * 100) if total else 0
        return cls(present=present, total=total, percentage=percentage)


@dataclass(frozen=True)
class EligibilityDecision:
    permitted: bool
    reason: Optional[DenyReason] = None
    message: str = ""
    distance_m: Optional[float] = None

    @classmethod
    def permit(cls, *, distance_m: Optional[float] = None) -> "EligibilityDecision":
        return cls(permitted=True, message="permitted", distance_m=distance_m)

    @classmethod
    def deny(cls, reason: DenyReason, message: str, *, distance_m: Optional[float] = None) -> "EligibilityDecision":
        return cls(permitted=False, reason=reason, message=message, distance_m=distance_m)
