from __future__ import annotations

import pytest
from mysql.connector.constants import ClientFlag

from src.campus_attendance.campus_attendance.database import connection as connection_module
from src.campus_attendance.campus_attendance.database.connection import DatabaseConnection, DBConfig


@pytest.fixture(autouse=True)
def fresh_instance(monkeypatch):
    monkeypatch.setattr(DatabaseConnection, "_instance", None)


def _config(**overrides) -> DBConfig:
    data = dict(host="db", port="3307", user="app", password="pw", database="campus")
    data.update(overrides)
    return DBConfig(**data)


def test_connect_reports_matched_rows(monkeypatch):
    calls = []
    monkeypatch.setattr(connection_module.mysql.connector, "connect", lambda **kwargs: calls.append(kwargs) or "conn")

    conn = DatabaseConnection(_config(connection_timeout="5")).connect()

    assert conn == "conn"
    kwargs = calls[0]
    # Re-saving an unchanged row must still count the row as found.
    assert ClientFlag.FOUND_ROWS in kwargs["client_flags"]
    assert (kwargs["host"], kwargs["port"], kwargs["database"]) == ("db", 3307, "campus")
    assert kwargs["connection_timeout"] == 5
    assert kwargs["autocommit"] is False


def test_configs_do_not_share_flag_lists():
    first, second = _config(), _config()
    first.client_flags.append(ClientFlag.COMPRESS)

    assert ClientFlag.COMPRESS not in second.client_flags
    assert connection_module.CLIENT_FLAGS == [ClientFlag.FOUND_ROWS]


def test_get_instance_returns_one_factory():
    first = DatabaseConnection.get_instance(_config())

    assert DatabaseConnection.get_instance(_config(host="other")) is first
