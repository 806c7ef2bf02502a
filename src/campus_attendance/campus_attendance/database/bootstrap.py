"""Create the database and apply ``database/schema.sql``.

Every statement in the schema is ``CREATE ... IF NOT EXISTS``, so applying it
again is harmless.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, Mapping, Union

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

_CREATE_OR_USE_DB = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a schema script on ';' outside single-quoted literals."""

    sql = _LINE_COMMENT.sub("", _CREATE_OR_USE_DB.sub("", sql))
    start = 0
    quoted = False
    for i, ch in enumerate(sql):
        if ch == "'":
            quoted = not quoted
        elif ch == ";" and not quoted:
            stmt = sql[start:i].strip()
            if stmt:
                yield stmt
            start = i + 1

    tail = sql[start:].strip()
    if tail:
        yield tail


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: Union[str, Path]) -> int:
    """Apply the schema and return the number of statements executed."""

    config = DBConfig.from_mapping(db_config)
    ensure_database_exists(config)

    executed = 0
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        for stmt in iter_sql_statements(Path(schema_path).read_text(encoding="utf-8")):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()

    logger.info("applied %d schema statements to %s", executed, config.describe())
    return executed


def list_tables(db_config: Mapping) -> list[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
