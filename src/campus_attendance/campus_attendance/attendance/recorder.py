from __future__ import annotations

import logging
from datetime import date, datetime

from ..catalog.model import Course
from ..common.validators import require_non_empty
from ..core.enums import AttendanceStatus
from ..core.exceptions import UnavailableError, ValidationError, WriteConflictError
from .model import AttendanceEntry
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceRecorder:
    """Appends a student's entry to the course's session for ``session_date``.

    Uniqueness is checked by the evaluator beforehand and enforced again by the
    repository's atomic append. Failures are not retried here.
    """

    def __init__(self, attendance: AttendanceRepository):
        self._attendance = attendance

    def record(
        self,
        course: Course,
        session_date: date,
        student_id: str,
        student_name: str,
        status: AttendanceStatus,
        *,
        now: datetime,
    ) -> AttendanceEntry:
        if not isinstance(status, AttendanceStatus):
            try:
                status = AttendanceStatus(status)
            except ValueError:
                raise ValidationError("Status must be Present or Absent")

        entry = AttendanceEntry(
            student_id=require_non_empty(student_id, "Student id"),
            student_name=require_non_empty(student_name, "Student name"),
            status=status,
            check_in_time=now.time().replace(microsecond=0, tzinfo=None),
        )

        try:
            self._attendance.append_entry(
                course_id=course.course_id,
                session_date=session_date,
                class_time=course.class_time,
                entry=entry,
            )
        except WriteConflictError:
            logger.warning("Duplicate attendance for %s in %s on %s", student_id, course.course_id, session_date)
            raise
        except UnavailableError:
            logger.warning("Attendance write failed for %s in %s", student_id, course.course_id)
            raise

        logger.info("Recorded %s for %s in %s on %s", status.value, student_id, course.course_id, session_date)
        return entry
