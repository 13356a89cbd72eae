from __future__ import annotations

import uuid
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AcademicYear, Course, Semester
from .repository import CatalogRepository

_COURSE_COLUMNS = "course_id, year_id, semester_id, name, code, class_time, fixed_latitude, fixed_longitude"


def _to_course(r: dict) -> Course:
    return Course(
        course_id=str(r["course_id"]),
        year_id=str(r["year_id"]),
        semester_id=str(r["semester_id"]),
        name=r["name"],
        code=r.get("code") or "",
        class_time=r.get("class_time") or "TBD",
        fixed_latitude=float(r["fixed_latitude"]) if r.get("fixed_latitude") is not None else None,
        fixed_longitude=float(r["fixed_longitude"]) if r.get("fixed_longitude") is not None else None,
    )


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_years(self) -> Sequence[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT year_id, name, sort_order FROM years ORDER BY sort_order ASC, created_seq ASC")
            return [
                AcademicYear(year_id=str(r["year_id"]), name=r["name"], order=int(r["sort_order"]))
                for r in fetchall(cur)
            ]

    def get_year(self, year_id: str) -> Optional[AcademicYear]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT year_id, name, sort_order FROM years WHERE year_id=%s", (year_id,))
            r = fetchone(cur)
            if not r:
                return None
            return AcademicYear(year_id=str(r["year_id"]), name=r["name"], order=int(r["sort_order"]))

    def list_semesters(self, year_id: str) -> Sequence[Semester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT semester_id, year_id, name, sort_order
                FROM semesters
                WHERE year_id=%s
                ORDER BY sort_order ASC, created_seq ASC
                """,
                (year_id,),
            )
            return [
                Semester(
                    semester_id=str(r["semester_id"]),
                    year_id=str(r["year_id"]),
                    name=r["name"],
                    order=int(r["sort_order"]),
                )
                for r in fetchall(cur)
            ]

    def get_semester(self, year_id: str, semester_id: str) -> Optional[Semester]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT semester_id, year_id, name, sort_order FROM semesters WHERE year_id=%s AND semester_id=%s",
                (year_id, semester_id),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Semester(
                semester_id=str(r["semester_id"]),
                year_id=str(r["year_id"]),
                name=r["name"],
                order=int(r["sort_order"]),
            )

    def list_courses(self, year_id: str, semester_id: str) -> Sequence[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COURSE_COLUMNS}
                FROM courses
                WHERE year_id=%s AND semester_id=%s
                ORDER BY created_seq ASC
                """,
                (year_id, semester_id),
            )
            return [_to_course(r) for r in fetchall(cur)]

    def get_course(self, course_id: str) -> Optional[Course]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COURSE_COLUMNS} FROM courses WHERE course_id=%s", (course_id,))
            r = fetchone(cur)
            return _to_course(r) if r else None

    def create_year(self, *, name: str, order: int) -> str:
        year_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("INSERT INTO years(year_id, name, sort_order) VALUES(%s,%s,%s)", (year_id, name, int(order)))
        return year_id

    def create_semester(self, *, year_id: str, name: str, order: int) -> str:
        semester_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO semesters(semester_id, year_id, name, sort_order) VALUES(%s,%s,%s,%s)",
                (semester_id, year_id, name, int(order)),
            )
        return semester_id

    def create_course(self, *, year_id: str, semester_id: str, name: str, code: str) -> str:
        course_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO courses(course_id, year_id, semester_id, name, code, class_time)
                VALUES(%s,%s,%s,%s,%s,'TBD')
                """,
                (course_id, year_id, semester_id, name, code),
            )
        return course_id

    def update_year(self, year_id: str, *, name: str, order: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE years SET name=%s, sort_order=%s WHERE year_id=%s", (name, int(order), year_id))
            return cur.rowcount > 0

    def update_semester(self, year_id: str, semester_id: str, *, name: str, order: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE semesters SET name=%s, sort_order=%s WHERE year_id=%s AND semester_id=%s",
                (name, int(order), year_id, semester_id),
            )
            return cur.rowcount > 0

    def update_course(self, course_id: str, *, name: str, code: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE courses SET name=%s, code=%s WHERE course_id=%s", (name, code, course_id))
            return cur.rowcount > 0

    def update_schedule(
        self,
        *,
        course_id: str,
        class_time: str,
        fixed_latitude: Optional[float],
        fixed_longitude: Optional[float],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE courses
                SET class_time=%s, fixed_latitude=%s, fixed_longitude=%s
                WHERE course_id=%s
                """,
                (class_time, fixed_latitude, fixed_longitude, course_id),
            )
            return cur.rowcount > 0

    def delete_year(self, year_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM years WHERE year_id=%s", (year_id,))
            return cur.rowcount > 0

    def delete_semester(self, year_id: str, semester_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM semesters WHERE year_id=%s AND semester_id=%s", (year_id, semester_id))
            return cur.rowcount > 0

    def delete_course(self, course_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM courses WHERE course_id=%s", (course_id,))
            return cur.rowcount > 0
