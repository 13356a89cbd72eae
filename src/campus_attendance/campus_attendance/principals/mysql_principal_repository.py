from __future__ import annotations

import uuid
from datetime import datetime
from typing import FrozenSet, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Principal
from .repository import PrincipalRepository

_PRINCIPAL_COLUMNS = "principal_id, email, full_name, password_hash, role, device_id, year_id, semester_id, created_at"


class MySQLPrincipalRepository(PrincipalRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _course_names(cur, principal_id: str) -> FrozenSet[str]:
        cur.execute("SELECT course_name FROM principal_courses WHERE principal_id=%s", (principal_id,))
        return frozenset(r["course_name"] for r in fetchall(cur))

    @staticmethod
    def _to_principal(row: dict, course_names: FrozenSet[str]) -> Principal:
        return Principal(
            principal_id=str(row["principal_id"]),
            email=row["email"],
            full_name=row["full_name"],
            password_hash=row["password_hash"],
            role=Role(row["role"]),
            device_id=row["device_id"],
            enrolled_course_names=course_names,
            year_id=row.get("year_id"),
            semester_id=row.get("semester_id"),
            created_at=row.get("created_at"),
        )

    def get_by_id(self, principal_id: str) -> Optional[Principal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRINCIPAL_COLUMNS} FROM principals WHERE principal_id=%s", (principal_id,))
            row = fetchone(cur)
            if not row:
                return None
            return self._to_principal(row, self._course_names(cur, principal_id))

    def get_by_email(self, email: str) -> Optional[Principal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRINCIPAL_COLUMNS} FROM principals WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                return None
            return self._to_principal(row, self._course_names(cur, str(row["principal_id"])))

    def create_principal(
        self,
        *,
        email: str,
        full_name: str,
        password_hash: str,
        role: Role,
        device_id: str,
    ) -> str:
        principal_id = uuid.uuid4().hex
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO principals(principal_id, email, full_name, password_hash, role, device_id, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (principal_id, email, full_name, password_hash, role.value, device_id, datetime.now()),
            )
        return principal_id

    def register_device(self, *, device_id: str, device_type: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO devices(device_id, device_type, registered_at)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE device_type=VALUES(device_type), registered_at=VALUES(registered_at)
                """,
                (device_id, device_type, datetime.now()),
            )

    def add_course_name(self, principal_id: str, course_name: str) -> FrozenSet[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT IGNORE INTO principal_courses(principal_id, course_name) VALUES(%s,%s)",
                (principal_id, course_name),
            )
            return self._course_names(cur, principal_id)

    def remove_course_name(self, principal_id: str, course_name: str) -> FrozenSet[str]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM principal_courses WHERE principal_id=%s AND course_name=%s",
                (principal_id, course_name),
            )
            return self._course_names(cur, principal_id)

    def set_term(self, principal_id: str, *, year_id: Optional[str], semester_id: Optional[str]) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE principals SET year_id=%s, semester_id=%s WHERE principal_id=%s",
                (year_id, semester_id, principal_id),
            )
            return cur.rowcount > 0

    def update_principal(self, principal_id: str, *, full_name: str, email: str, role: Role) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE principals SET full_name=%s, email=%s, role=%s WHERE principal_id=%s",
                (full_name, email, role.value, principal_id),
            )
            return cur.rowcount > 0

    def delete_by_id(self, principal_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM principal_courses WHERE principal_id=%s", (principal_id,))
            cur.execute("DELETE FROM principals WHERE principal_id=%s", (principal_id,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Principal]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PRINCIPAL_COLUMNS} FROM principals ORDER BY full_name ASC")
            rows = fetchall(cur)
            cur.execute("SELECT principal_id, course_name FROM principal_courses")
            names: dict[str, set[str]] = {}
            for r in fetchall(cur):
                names.setdefault(str(r["principal_id"]), set()).add(r["course_name"])
            return [self._to_principal(r, frozenset(names.get(str(r["principal_id"]), ()))) for r in rows]
