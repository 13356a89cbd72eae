from __future__ import annotations

import io

from flask import Flask, g, send_file

from ..catalog.controller import course_dict
from ..common.datetime_utils import parse_iso_date
from ..common.http import Guards, current_role, json_body, ok
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..container import Container
from ..location.provider import ReportedPosition
from .evaluator import REMEDIATION
from .export import XLSX_MIMETYPE, export_filename, session_to_xlsx
from .model import AttendanceEntry, EligibilityDecision


def _decision_dict(d: EligibilityDecision) -> dict:
    return {
        "permitted": d.permitted,
        "reason": d.reason.value if d.reason else None,
        "message": d.message,
        "hint": REMEDIATION.get(d.reason) if d.reason else None,
        "distance_m": round(d.distance_m, 1) if d.distance_m is not None else None,
    }


def _entry_dict(e: AttendanceEntry) -> dict:
    return {
        "student_id": e.student_id,
        "student_name": e.student_name,
        "status": e.status.value,
        "in": e.check_in_time.strftime("%H:%M:%S"),
    }


def register(app: Flask, container: Container) -> None:
    guards = Guards(container)
    attendance = container.attendance_service

    @app.route("/me/courses", endpoint="my_courses")
    @guards.roles_required(Role.STUDENT)
    def my_courses():
        statuses = attendance.my_courses(g.principal)
        return ok(
            {
                "year_id": g.principal.year_id,
                "semester_id": g.principal.semester_id,
                "courses": [
                    {"course": course_dict(s.course), "today": _decision_dict(s.decision)} for s in statuses
                ],
            }
        )

    @app.route("/courses/<course_id>/attendance", methods=["POST"], endpoint="check_in")
    @guards.roles_required(Role.STUDENT)
    def check_in(course_id: str):
        result = attendance.check_in(g.principal, course_id, ReportedPosition.from_payload(json_body()))
        return ok(
            {
                "message": "Attendance marked successfully",
                "course_id": result.course.course_id,
                "session_date": result.session_date.isoformat(),
                "entry": _entry_dict(result.entry),
                "distance_m": _decision_dict(result.decision)["distance_m"],
            },
            201,
        )

    @app.route("/courses/<course_id>/sessions", endpoint="list_sessions")
    @guards.roles_required(Role.ADMIN, Role.SUPER_ADMIN)
    def list_sessions(course_id: str):
        summaries = attendance.list_sessions(current_role=current_role(), course_id=course_id)
        return ok(
            {
                "sessions": [
                    {
                        "session_date": s.session.session_date.isoformat(),
                        "class_time": s.session.class_time,
                        "students": [_entry_dict(e) for e in s.session.students],
                        "present": s.stats.present,
                        "total": s.stats.total,
                        "percentage": s.stats.percentage,
                    }
                    for s in summaries
                ]
            }
        )

    @app.route("/courses/<course_id>/sessions/<session_date>.xlsx", endpoint="export_session")
    @guards.roles_required(Role.ADMIN, Role.SUPER_ADMIN)
    def export_session(course_id: str, session_date: str):
        try:
            day = parse_iso_date(session_date)
        except ValueError:
            raise ValidationError("Date must be YYYY-MM-DD")

        session_obj = attendance.get_session(current_role=current_role(), course_id=course_id, session_date=day)
        return send_file(
            io.BytesIO(session_to_xlsx(session_obj)),
            mimetype=XLSX_MIMETYPE,
            as_attachment=True,
            download_name=export_filename(session_obj),
        )
