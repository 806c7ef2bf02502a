from __future__ import annotations

from typing import Optional

from ..common.datetime_utils import parse_iso_date
from ..core.constants import DEFAULT_MAX_TEACHING_WEEKS, TERM_MAX_WEEKS_KEY, TERM_START_DATE_KEY
from ..core.exceptions import ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import TermConfig
from .repository import TermConfigRepository


class MySQLTermConfigRepository(TermConfigRepository):
    def __init__(self, conn_factory: DatabaseConnection, *, default_max_weeks: int = DEFAULT_MAX_TEACHING_WEEKS):
        self._conn_factory = conn_factory
        self._default_max_weeks = int(default_max_weeks)

    def get_term_config(self) -> Optional[TermConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT config_key, config_value
                FROM system_configs
                WHERE config_key IN (%s, %s)
                """,
                (TERM_START_DATE_KEY, TERM_MAX_WEEKS_KEY),
            )
            values = {r["config_key"]: r["config_value"] for r in fetchall(cur)}

        start = (values.get(TERM_START_DATE_KEY) or "").strip()
        if not start:
            return None

        raw_weeks = values.get(TERM_MAX_WEEKS_KEY) or self._default_max_weeks
        try:
            max_weeks = int(raw_weeks)
        except ValueError as exc:
            raise ValidationError(f"{TERM_MAX_WEEKS_KEY}={raw_weeks!r} is not a number") from exc

        return TermConfig(start_date=parse_iso_date(start), max_teaching_weeks=max_weeks)

    def save_term_config(self, term: TermConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                """
                INSERT INTO system_configs(config_key, config_value)
                VALUES(%s, %s)
                ON DUPLICATE KEY UPDATE config_value=VALUES(config_value)
                """,
                [
                    (TERM_START_DATE_KEY, term.start_date.isoformat()),
                    (TERM_MAX_WEEKS_KEY, str(term.max_teaching_weeks)),
                ],
            )
