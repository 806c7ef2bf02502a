from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, Iterator, Optional, Sequence

from ..attendance.mapping import record_from_row, session_from_row, window_from_row
from ..attendance.model import AttendanceRecord, CourseSession, VerificationWindow
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AbsenceDetailRow, CourseSessionTotals, Enrollment, RateRow, StatsRow, StudentAbsenceCounts
from .repository import BatchStore, BatchUnit, RateReader, RateStore

logger = logging.getLogger(__name__)

_RECORD_COLUMNS = (
    "record_id, session_id, student_id, final_status, pending_status, live_status, "
    "checkin_time, last_checkin_source, checkin_window_id"
)

_SESSION_COLUMNS = (
    "session_id, course_code, course_name, teacher_names, room, start_time, end_time, "
    "teaching_week, weekday, requires_checkin, deleted_at"
)


def _slot_filter(alias: str, teaching_week: int, weekday: Optional[int]) -> tuple[str, tuple]:
    if weekday is None:
        return f"{alias}.teaching_week=%s", (int(teaching_week),)
    return f"{alias}.teaching_week=%s AND {alias}.weekday=%s", (int(teaching_week), int(weekday))


class MySQLBatchUnit(BatchUnit):
    """All statements run on the one cursor owned by the enclosing transaction."""

    def __init__(self, cur):
        self._cur = cur

    def list_sessions_for_slot(self, *, teaching_week: int, weekday: Optional[int]) -> Sequence[CourseSession]:
        where, params = _slot_filter("cs", teaching_week, weekday)
        self._cur.execute(
            f"""
            SELECT {_SESSION_COLUMNS}
            FROM course_sessions cs
            WHERE {where}
            ORDER BY cs.start_time, cs.session_id
            """,
            params,
        )
        return [session_from_row(r) for r in fetchall(self._cur)]

    def _records(self, table: str, session_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        if not session_ids:
            return []
        placeholders, params = in_clause([int(s) for s in session_ids])
        self._cur.execute(
            f"""
            SELECT {_RECORD_COLUMNS}
            FROM {table}
            WHERE session_id IN {placeholders}
            ORDER BY session_id, student_id
            """,
            params,
        )
        return [record_from_row(r) for r in fetchall(self._cur)]

    def list_live_records(self, *, session_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        return self._records("attendance_records", session_ids)

    def list_history_records(self, *, session_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        return self._records("attendance_records_history", session_ids)

    def latest_windows(self, *, session_ids: Sequence[int]) -> Dict[int, VerificationWindow]:
        if not session_ids:
            return {}
        placeholders, params = in_clause([int(s) for s in session_ids])
        self._cur.execute(
            f"""
            SELECT w.window_id, w.session_id, w.round_number, w.open_time, w.duration_minutes
            FROM verification_windows w
            JOIN (
                SELECT session_id, MAX(round_number) AS round_number
                FROM verification_windows
                WHERE session_id IN {placeholders}
                GROUP BY session_id
            ) latest ON latest.session_id = w.session_id AND latest.round_number = w.round_number
            """,
            params,
        )
        windows = (window_from_row(r) for r in fetchall(self._cur))
        return {w.session_id: w for w in windows if w is not None}

    def insert_stats_if_absent(self, row: StatsRow) -> tuple[int, bool]:
        self._cur.execute(
            "SELECT stats_id FROM course_checkin_stats WHERE report_date=%s AND session_id=%s FOR UPDATE",
            (row.report_date, row.session_id),
        )
        existing = fetchone(self._cur)
        if existing:
            return int(existing["stats_id"]), False

        self._cur.execute(
            """
            INSERT INTO course_checkin_stats(
                report_date, session_id, course_code, teaching_week, weekday,
                total_should_attend, present_count, absent_count, truant_count, leave_count
            )
            VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
            """,
            (
                row.report_date,
                row.session_id,
                row.course_code,
                row.teaching_week,
                row.weekday,
                row.total_should_attend,
                row.present_count,
                row.absent_count,
                row.truant_count,
                row.leave_count,
            ),
        )
        return int(self._cur.lastrowid), True

    def insert_absence_details_if_absent(self, rows: Sequence[AbsenceDetailRow]) -> int:
        if not rows:
            return 0

        placeholders, params = in_clause(sorted({int(d.stats_id) for d in rows}))
        self._cur.execute(
            f"SELECT stats_id, student_id FROM absent_student_relations WHERE stats_id IN {placeholders}",
            params,
        )
        seen = {(int(r["stats_id"]), str(r["student_id"])) for r in fetchall(self._cur)}
        fresh = [d for d in rows if (int(d.stats_id), d.student_id) not in seen]
        if not fresh:
            return 0

        self._cur.executemany(
            """
            INSERT INTO absent_student_relations(stats_id, session_id, student_id, absence_type, report_date)
            VALUES(%s,%s,%s,%s,%s)
            """,
            [(d.stats_id, d.session_id, d.student_id, d.absence_type.value, d.report_date) for d in fresh],
        )
        return len(fresh)

    def delete_stats_for_sessions(self, *, session_ids: Sequence[int]) -> int:
        if not session_ids:
            return 0
        placeholders, params = in_clause([int(s) for s in session_ids])
        self._cur.execute(
            f"""
            DELETE d FROM absent_student_relations d
            JOIN course_checkin_stats st ON st.stats_id = d.stats_id
            WHERE st.session_id IN {placeholders}
            """,
            params,
        )
        self._cur.execute(f"DELETE FROM course_checkin_stats WHERE session_id IN {placeholders}", params)
        return int(self._cur.rowcount)

    def archive_slot(
        self, *, teaching_week: int, weekday: int, session_ids: Sequence[int], archived_at: datetime
    ) -> int:
        if not session_ids:
            return 0
        placeholders, params = in_clause([int(s) for s in session_ids])
        self._cur.execute(
            f"""
            INSERT INTO attendance_records_history({_RECORD_COLUMNS}, archived_at)
            SELECT
                ar.record_id, ar.session_id, ar.student_id, ar.final_status, ar.pending_status,
                ar.live_status, ar.checkin_time, ar.last_checkin_source, ar.checkin_window_id, %s
            FROM attendance_records ar
            JOIN course_sessions cs ON cs.session_id = ar.session_id
            WHERE cs.teaching_week=%s AND cs.weekday=%s AND ar.session_id IN {placeholders}
              AND NOT EXISTS (
                  SELECT 1 FROM attendance_records_history h WHERE h.record_id = ar.record_id
              )
            """,
            (archived_at, int(teaching_week), int(weekday), *params),
        )
        return int(self._cur.rowcount)

    def purge_slot(self, *, teaching_week: int, weekday: int, session_ids: Sequence[int]) -> int:
        if not session_ids:
            return 0
        placeholders, params = in_clause([int(s) for s in session_ids])
        self._cur.execute(
            f"""
            DELETE ar FROM attendance_records ar
            JOIN course_sessions cs ON cs.session_id = ar.session_id
            JOIN attendance_records_history h ON h.record_id = ar.record_id
            WHERE cs.teaching_week=%s AND cs.weekday=%s AND ar.session_id IN {placeholders}
            """,
            (int(teaching_week), int(weekday), *params),
        )
        return int(self._cur.rowcount)


class MySQLBatchStore(BatchStore):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def transaction(self) -> Iterator[MySQLBatchUnit]:
        with db_cursor(self._conn_factory) as (_, cur):
            yield MySQLBatchUnit(cur)


class MySQLRateReader(RateReader):
    """Reads on the cursor of one consistent-snapshot transaction."""

    def __init__(self, cur):
        self._cur = cur

    def list_enrollments(self) -> Sequence[Enrollment]:
        self._cur.execute(
            """
            SELECT roster.student_id, cs.course_code, MAX(cs.course_name) AS course_name
            FROM (
                SELECT student_id, session_id FROM attendance_records
                UNION
                SELECT student_id, session_id FROM attendance_records_history
            ) roster
            JOIN course_sessions cs ON cs.session_id = roster.session_id
            WHERE cs.deleted_at IS NULL AND cs.requires_checkin = 1
            GROUP BY roster.student_id, cs.course_code
            """
        )
        return [
            Enrollment(student_id=str(r["student_id"]), course_code=r["course_code"], course_name=r["course_name"])
            for r in fetchall(self._cur)
        ]

    def course_session_totals(self) -> Sequence[CourseSessionTotals]:
        self._cur.execute(
            """
            SELECT
                cs.course_code,
                COUNT(DISTINCT cs.session_id) AS total_sessions,
                COUNT(DISTINCT st.session_id) AS completed_sessions
            FROM course_sessions cs
            LEFT JOIN course_checkin_stats st ON st.session_id = cs.session_id
            WHERE cs.deleted_at IS NULL AND cs.requires_checkin = 1
            GROUP BY cs.course_code
            """
        )
        return [
            CourseSessionTotals(
                course_code=r["course_code"],
                total_sessions=int(r["total_sessions"] or 0),
                completed_sessions=int(r["completed_sessions"] or 0),
            )
            for r in fetchall(self._cur)
        ]

    def student_absence_counts(self) -> Sequence[StudentAbsenceCounts]:
        self._cur.execute(
            """
            SELECT
                d.student_id,
                cs.course_code,
                SUM(d.absence_type = 'absent') AS absent_count,
                SUM(d.absence_type = 'truant') AS truant_count,
                SUM(d.absence_type IN ('leave', 'leave_pending')) AS leave_count
            FROM absent_student_relations d
            JOIN course_sessions cs ON cs.session_id = d.session_id
            WHERE cs.deleted_at IS NULL
            GROUP BY d.student_id, cs.course_code
            """
        )
        return [
            StudentAbsenceCounts(
                student_id=str(r["student_id"]),
                course_code=r["course_code"],
                absent_count=int(r["absent_count"] or 0),
                truant_count=int(r["truant_count"] or 0),
                leave_count=int(r["leave_count"] or 0),
            )
            for r in fetchall(self._cur)
        ]


class MySQLRateStore(RateStore):
    STAGING_TABLE = "student_absence_rates_staging"
    RETIRED_TABLE = "student_absence_rates_old"

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @contextmanager
    def snapshot(self) -> Iterator[MySQLRateReader]:
        # The three reads share one snapshot; commits made meanwhile stay invisible.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SET TRANSACTION ISOLATION LEVEL REPEATABLE READ")
            cur.execute("START TRANSACTION WITH CONSISTENT SNAPSHOT, READ ONLY")
            yield MySQLRateReader(cur)

    def replace_rates(self, rows: Sequence[RateRow], *, rebuilt_at: datetime) -> int:
        # Build into a staging table, then swap with one atomic RENAME so readers
        # never see an empty table. DDL commits implicitly in MySQL.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"DROP TABLE IF EXISTS {self.STAGING_TABLE}")
            cur.execute(f"DROP TABLE IF EXISTS {self.RETIRED_TABLE}")
            cur.execute(f"CREATE TABLE {self.STAGING_TABLE} LIKE student_absence_rates")
            if rows:
                cur.executemany(
                    f"""
                    INSERT INTO {self.STAGING_TABLE}(
                        student_id, course_code, course_name, total_sessions, completed_sessions,
                        absent_count, truant_count, leave_count,
                        absence_rate, truant_rate, leave_rate, rebuilt_at
                    )
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    [
                        (
                            r.student_id,
                            r.course_code,
                            r.course_name,
                            r.total_sessions,
                            r.completed_sessions,
                            r.absent_count,
                            r.truant_count,
                            r.leave_count,
                            r.absence_rate,
                            r.truant_rate,
                            r.leave_rate,
                            rebuilt_at,
                        )
                        for r in rows
                    ],
                )
            cur.execute(
                f"""
                RENAME TABLE
                    student_absence_rates TO {self.RETIRED_TABLE},
                    {self.STAGING_TABLE} TO student_absence_rates
                """
            )
            cur.execute(f"DROP TABLE {self.RETIRED_TABLE}")

        logger.info("student_absence_rates swapped in (%d rows)", len(rows))
        return len(rows)
