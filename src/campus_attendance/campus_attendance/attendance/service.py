from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..catalog.model import Course
from ..catalog.repository import CatalogRepository
from ..common.datetime_utils import now_local, to_local
from ..core.constants import DEFAULT_LOCAL_TIMEZONE
from ..core.enums import AttendanceStatus, DenyReason, Role
from ..core.exceptions import (
    AlreadyRecordedError,
    AuthorizationError,
    DomainError,
    NotConfiguredError,
    NotFoundError,
    PermissionDeniedError,
)
from ..location.provider import GeolocationProvider
from ..principals.model import Principal
from .evaluator import REMEDIATION, EligibilityEvaluator
from .model import AttendanceEntry, AttendanceSession, EligibilityDecision, SessionStats
from .recorder import AttendanceRecorder
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_DENIAL_ERRORS: dict[DenyReason, type[DomainError]] = {
    DenyReason.NOT_SCHEDULED: NotConfiguredError,
    DenyReason.LOCATION_NOT_CONFIGURED: NotConfiguredError,
    DenyReason.ALREADY_RECORDED: AlreadyRecordedError,
    DenyReason.LOCATION_UNAVAILABLE: PermissionDeniedError,
    DenyReason.OUT_OF_RANGE: PermissionDeniedError,
}

_VIEWERS = {Role.ADMIN, Role.SUPER_ADMIN}


@dataclass(frozen=True)
class CheckInResult:
    course: Course
    session_date: date
    entry: AttendanceEntry
    decision: EligibilityDecision


@dataclass(frozen=True)
class CourseStatus:
    course: Course
    decision: EligibilityDecision


@dataclass(frozen=True)
class SessionSummary:
    session: AttendanceSession
    stats: SessionStats


def denial_error(decision: EligibilityDecision) -> DomainError:
    """Map a Deny decision onto the error taxonomy, keeping the reason."""

    if decision.reason is None:
        raise ValueError("Only a Deny decision maps onto an error")
    error_cls = _DENIAL_ERRORS.get(decision.reason, PermissionDeniedError)
    return error_cls(REMEDIATION.get(decision.reason, decision.message), reason=decision.reason)


class AttendanceService:
    """Use cases around marking and reviewing attendance."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        catalog: CatalogRepository,
        *,
        evaluator: EligibilityEvaluator,
        listing_evaluator: EligibilityEvaluator,
        recorder: AttendanceRecorder,
        tz_name: str = DEFAULT_LOCAL_TIMEZONE,
    ):
        self._attendance = attendance
        self._catalog = catalog
        self._evaluator = evaluator
        self._listing_evaluator = listing_evaluator
        self._recorder = recorder
        self._tz_name = tz_name

    def _get_course(self, course_id: str) -> Course:
        course = self._catalog.get_course(course_id)
        if not course:
            raise NotFoundError("Course not found")
        return course

    def _local_now(self, now: Optional[datetime]) -> datetime:
        return to_local(now, self._tz_name) if now else now_local(self._tz_name)

    def evaluate(
        self,
        principal: Principal,
        course_id: str,
        geolocation: Optional[GeolocationProvider],
        *,
        now: Optional[datetime] = None,
    ) -> EligibilityDecision:
        course = self._get_course(course_id)
        return self._evaluator.evaluate(course, principal, self._local_now(now).date(), geolocation)

    def check_in(
        self,
        principal: Principal,
        course_id: str,
        geolocation: Optional[GeolocationProvider],
        *,
        status: AttendanceStatus = AttendanceStatus.PRESENT,
        now: Optional[datetime] = None,
    ) -> CheckInResult:
        """Evaluate eligibility and record in one go.

        Raises the taxonomy error matching the denial (NotConfiguredError,
        AlreadyRecordedError, PermissionDeniedError); recorder failures
        (WriteConflictError, UnavailableError) propagate unchanged.
        """

        if principal.role != Role.STUDENT:
            raise AuthorizationError("Only students can mark attendance")

        local_now = self._local_now(now)
        today = local_now.date()
        course = self._get_course(course_id)

        decision = self._evaluator.evaluate(course, principal, today, geolocation)
        if not decision.permitted:
            logger.info("Attendance denied for %s in %s: %s", principal.principal_id, course_id, decision.message)
            raise denial_error(decision)

        entry = self._recorder.record(
            course,
            today,
            principal.principal_id,
            principal.full_name,
            status,
            now=local_now,
        )
        return CheckInResult(course=course, session_date=today, entry=entry, decision=decision)

    def my_courses(self, principal: Principal, *, now: Optional[datetime] = None) -> list[CourseStatus]:
        """Enrolled courses of the student's selected term, badged with today's status."""

        if not principal.year_id or not principal.semester_id:
            return []

        today = self._local_now(now).date()
        courses = self._catalog.list_courses(principal.year_id, principal.semester_id)
        return [
            CourseStatus(course=c, decision=self._listing_evaluator.evaluate(c, principal, today))
            for c in courses
            if principal.is_enrolled(c.name)
        ]

    def list_sessions(self, *, current_role: Role, course_id: str) -> list[SessionSummary]:
        if current_role not in _VIEWERS:
            raise AuthorizationError("You do not have permission")

        self._get_course(course_id)
        sessions = sorted(self._attendance.list_sessions(course_id), key=lambda s: s.session_date, reverse=True)
        return [SessionSummary(session=s, stats=SessionStats.of(s)) for s in sessions]

    def get_session(self, *, current_role: Role, course_id: str, session_date: date) -> AttendanceSession:
        if current_role not in _VIEWERS:
            raise AuthorizationError("You do not have permission")

        session = self._attendance.get_session(course_id, session_date)
        if not session:
            raise NotFoundError("No attendance session for this date")
        return session
