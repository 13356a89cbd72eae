from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import AttendanceEntry, AttendanceSession


class AttendanceRepository(Protocol):
    def get_session(self, course_id: str, session_date: date) -> Optional[AttendanceSession]:
        raise NotImplementedError

    def append_entry(
        self,
        *,
        course_id: str,
        session_date: date,
        class_time: str,
        entry: AttendanceEntry,
    ) -> None:
        """Add ``entry`` to the (course, date) session, creating the session if needed.

        Appends for different students never overwrite each other. Raises
        WriteConflictError when the student already has an entry.
        """

        raise NotImplementedError

    def list_sessions(self, course_id: str) -> Sequence[AttendanceSession]:
        """All sessions recorded for a course, any date."""

        raise NotImplementedError
