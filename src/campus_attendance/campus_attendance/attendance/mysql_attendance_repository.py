from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

import mysql.connector

from ..core.enums import AttendanceStatus
from ..core.exceptions import WriteConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import AttendanceEntry, AttendanceSession
from .repository import AttendanceRepository


def _group_sessions(rows: list[dict]) -> list[AttendanceSession]:
    """Fold session LEFT JOIN entry rows into sessions, keeping row order."""

    sessions: dict[int, dict] = {}
    for r in rows:
        s = sessions.get(int(r["session_id"]))
        if s is None:
            s = {
                "course_id": str(r["course_id"]),
                "session_date": r["session_date"],
                "class_time": r.get("class_time") or "",
                "students": [],
            }
            sessions[int(r["session_id"])] = s
        if r.get("student_id") is not None:
            s["students"].append(
                AttendanceEntry(
                    student_id=str(r["student_id"]),
                    student_name=r["student_name"],
                    status=AttendanceStatus(r["status"]),
                    check_in_time=normalize_mysql_time(r["check_in_time"]),
                )
            )
    return [
        AttendanceSession(
            course_id=s["course_id"],
            session_date=s["session_date"],
            class_time=s["class_time"],
            students=tuple(s["students"]),
        )
        for s in sessions.values()
    ]


_SESSION_SELECT = """
    SELECT
        s.session_id, s.course_id, s.session_date, s.class_time,
        e.student_id, e.student_name, e.status, e.check_in_time
    FROM attendance_sessions s
    LEFT JOIN attendance_entries e ON e.session_id = s.session_id
"""


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_session(self, course_id: str, session_date: date) -> Optional[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SESSION_SELECT
                + """
                WHERE s.course_id=%s AND s.session_date=%s
                ORDER BY e.entry_id ASC
                """,
                (course_id, session_date),
            )
            sessions = _group_sessions(fetchall(cur))
            return sessions[0] if sessions else None

    def append_entry(
        self,
        *,
        course_id: str,
        session_date: date,
        class_time: str,
        entry: AttendanceEntry,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            # Lazily create the day's session; the unique key makes this a no-op when it exists.
            cur.execute(
                """
                INSERT IGNORE INTO attendance_sessions(course_id, session_date, class_time, created_at)
                VALUES(%s,%s,%s,%s)
                """,
                (course_id, session_date, class_time, datetime.now()),
            )
            cur.execute(
                """
                SELECT session_id FROM attendance_sessions
                WHERE course_id=%s AND session_date=%s
                FOR UPDATE
                """,
                (course_id, session_date),
            )
            session_id = int(fetchall(cur)[0]["session_id"])

            cur.execute(
                "SELECT entry_id FROM attendance_entries WHERE session_id=%s AND student_id=%s",
                (session_id, entry.student_id),
            )
            if fetchall(cur):
                raise WriteConflictError("Attendance already recorded for today")

            try:
                cur.execute(
                    """
                    INSERT INTO attendance_entries(session_id, student_id, student_name, status, check_in_time)
                    VALUES(%s,%s,%s,%s,%s)
                    """,
                    (session_id, entry.student_id, entry.student_name, entry.status.value, entry.check_in_time),
                )
            except mysql.connector.IntegrityError as e:
                raise WriteConflictError("Attendance already recorded for today") from e

    def list_sessions(self, course_id: str) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SESSION_SELECT
                + """
                WHERE s.course_id=%s
                ORDER BY s.session_date DESC, e.entry_id ASC
                """,
                (course_id,),
            )
            return _group_sessions(fetchall(cur))
