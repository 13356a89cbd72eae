from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import mysql.connector
from mysql.connector.constants import ClientFlag

# UPDATE rowcount reports matched rows, so saving unchanged values still finds the row.
CLIENT_FLAGS = [ClientFlag.FOUND_ROWS]


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connection_timeout: int = 10
    client_flags: list[int] = field(default_factory=lambda: list(CLIENT_FLAGS))


class DatabaseConnection:
    """Process-wide connection factory shared by the catalog, principal and
    attendance repositories. Each repository call opens a short-lived
    connection through ``connect`` and runs one transaction on it.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        cfg = self._config
        return mysql.connector.connect(
            host=cfg.host,
            port=int(cfg.port),
            user=cfg.user,
            password=cfg.password,
            database=cfg.database,
            connection_timeout=int(cfg.connection_timeout),
            client_flags=list(cfg.client_flags),
            autocommit=False,
        )
