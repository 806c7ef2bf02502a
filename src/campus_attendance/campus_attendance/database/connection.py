from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, Mapping

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str
    user: str
    password: str
    database: str
    port: int = 3306
    connect_timeout: int = 10
    # Batch jobs hold row locks for a whole slot; give them room before giving up.
    lock_wait_timeout: int = 120

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "DBConfig":
        return cls(
            host=str(values.get("host", "localhost")),
            user=str(values.get("user", "root")),
            password=str(values.get("password", "")),
            database=str(values.get("database", "campus_attendance")),
            port=int(values.get("port", 3306)),
            connect_timeout=int(values.get("connect_timeout", 10)),
            lock_wait_timeout=int(values.get("lock_wait_timeout", 120)),
        )

    def describe(self) -> str:
        return f"{self.user}@{self.host}:{self.port}/{self.database}"


class DatabaseConnection:
    """Connection factory, one per DBConfig.

    Every ``connect()`` opens a fresh connection with autocommit off; commit
    and rollback belong to ``db_cursor``. A batch job keeps the connection it
    got for the whole run.
    """

    _instances: ClassVar[Dict[DBConfig, "DatabaseConnection"]] = {}

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if config not in cls._instances:
            cls._instances[config] = cls(config)
        return cls._instances[config]

    def connect(self, *, with_database: bool = True):
        kwargs: Dict[str, Any] = dict(
            host=self.config.host,
            port=self.config.port,
            user=self.config.user,
            password=self.config.password,
            connection_timeout=self.config.connect_timeout,
            autocommit=False,
        )
        if with_database:
            kwargs["database"] = self.config.database

        conn = mysql.connector.connect(**kwargs)
        cur = conn.cursor()
        try:
            cur.execute("SET SESSION innodb_lock_wait_timeout = %s", (self.config.lock_wait_timeout,))
        finally:
            cur.close()
        return conn
