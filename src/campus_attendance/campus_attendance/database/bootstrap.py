from __future__ import annotations

import logging
import re
import uuid
from contextlib import closing
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Iterable, Optional

import mysql.connector
from werkzeug.security import generate_password_hash

from ..core.enums import Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DBTarget:
    host: str
    port: int
    user: str
    password: str
    database: str


@dataclass(frozen=True)
class DemoPrincipal:
    email: str
    full_name: str
    password: str
    role: Role
    device_id: str
    course_names: tuple[str, ...] = ()
    year_id: Optional[str] = None
    semester_id: Optional[str] = None


DEMO_PRINCIPALS: tuple[DemoPrincipal, ...] = (
    DemoPrincipal("superadmin@campus.test", "Super Admin", "super123", Role.SUPER_ADMIN, "demo-device-superadmin"),
    DemoPrincipal("admin@campus.test", "Course Admin", "admin123", Role.ADMIN, "demo-device-admin"),
    DemoPrincipal(
        "student@campus.test",
        "Demo Student",
        "student123",
        Role.STUDENT,
        "demo-device-student",
        course_names=("Engineering Mathematics I", "Engineering Physics"),
        year_id="y1",
        semester_id="y1s1",
    ),
)


def _as_target(db_config: dict) -> DBTarget:
    return DBTarget(
        host=str(db_config.get("host", "localhost")),
        port=int(db_config.get("port", 3306)),
        user=str(db_config.get("user", "root")),
        password=str(db_config.get("password", "")),
        database=str(db_config.get("database", "campus_attendance_db")),
    )


def _connect(target: DBTarget, *, with_database: bool = True):
    kwargs = dict(host=target.host, port=target.port, user=target.user, password=target.password, use_pure=True)
    if with_database:
        kwargs["database"] = target.database
    return mysql.connector.connect(**kwargs)


def _strip_create_db_and_use(sql: str) -> str:
    # schema/seed files name a database; the configured one wins.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def iter_sql_statements(sql: str) -> Iterable[str]:
    """Split a script on ';' outside of quoted literals."""

    buf: list[str] = []
    quote: Optional[str] = None
    escape = False

    for ch in sql:
        if escape:
            escape = False
        elif ch == "\\":
            escape = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in ("'", '"'):
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(db_config: dict, path: str | Path) -> None:
    target = _as_target(db_config)
    sql = _strip_create_db_and_use(Path(path).read_text(encoding="utf-8"))
    with closing(_connect(target)) as conn:
        cur = conn.cursor()
        for stmt in iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()


def ensure_database_exists(db_config: dict) -> None:
    target = _as_target(db_config)
    with closing(_connect(target, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    _run_script(db_config, schema_path)
    logger.info("Applied schema %s", schema_path)


def apply_seed_sql(db_config: dict, *, seed_path: str | Path) -> None:
    _run_script(db_config, seed_path)
    logger.info("Applied seed %s", seed_path)


def ensure_demo_principals(db_config: dict, principals: Iterable[DemoPrincipal] = DEMO_PRINCIPALS) -> None:
    """Upsert demo accounts (one per role) together with their bound devices."""

    target = _as_target(db_config)
    with closing(_connect(target)) as conn:
        cur = conn.cursor(dictionary=True)
        now = datetime.now()

        for p in principals:
            password_hash = generate_password_hash(p.password)
            cur.execute(
                """
                INSERT INTO devices(device_id, device_type, registered_at)
                VALUES(%s,'web',%s)
                ON DUPLICATE KEY UPDATE registered_at=VALUES(registered_at)
                """,
                (p.device_id, now),
            )

            cur.execute("SELECT principal_id FROM principals WHERE email=%s", (p.email,))
            existing = cur.fetchone()
            if existing:
                principal_id = existing["principal_id"]
                cur.execute(
                    """
                    UPDATE principals
                    SET full_name=%s, password_hash=%s, role=%s, device_id=%s, year_id=%s, semester_id=%s
                    WHERE principal_id=%s
                    """,
                    (p.full_name, password_hash, p.role.value, p.device_id, p.year_id, p.semester_id, principal_id),
                )
            else:
                principal_id = uuid.uuid4().hex
                cur.execute(
                    """
                    INSERT INTO principals(principal_id, email, full_name, password_hash, role, device_id,
                                           year_id, semester_id, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (principal_id, p.email, p.full_name, password_hash, p.role.value, p.device_id,
                     p.year_id, p.semester_id, now),
                )

            for name in p.course_names:
                cur.execute(
                    "INSERT IGNORE INTO principal_courses(principal_id, course_name) VALUES(%s,%s)",
                    (principal_id, name),
                )

        conn.commit()
    logger.info("Demo principals ready")


def list_tables(db_config: dict) -> list[str]:
    target = _as_target(db_config)
    with closing(_connect(target)) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
