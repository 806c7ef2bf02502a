from __future__ import annotations

from typing import Optional

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone
from .mapping import record_from_row, session_from_row, window_from_row
from .model import AttendanceSnapshot
from .repository import AttendanceRepository


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_snapshot(self, *, session_id: int, student_id: str) -> Optional[AttendanceSnapshot]:
        # Single statement so a concurrent final_status write cannot tear the read.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    ar.record_id, ar.session_id, ar.student_id,
                    ar.final_status, ar.pending_status, ar.live_status,
                    ar.checkin_time, ar.last_checkin_source, ar.checkin_window_id,
                    cs.course_code, cs.course_name, cs.teacher_names, cs.room,
                    cs.start_time, cs.end_time, cs.teaching_week, cs.weekday,
                    cs.requires_checkin, cs.deleted_at,
                    vw.window_id AS vw_window_id, vw.session_id AS vw_session_id,
                    vw.round_number AS vw_round_number, vw.open_time AS vw_open_time,
                    vw.duration_minutes AS vw_duration_minutes
                FROM attendance_records ar
                JOIN course_sessions cs ON cs.session_id = ar.session_id
                LEFT JOIN verification_windows vw ON vw.window_id = (
                    SELECT w.window_id
                    FROM verification_windows w
                    WHERE w.session_id = ar.session_id
                    ORDER BY w.round_number DESC
                    LIMIT 1
                )
                WHERE ar.session_id=%s AND ar.student_id=%s
                """,
                (int(session_id), str(student_id)),
            )
            r = fetchone(cur)
            if not r:
                return None

            return AttendanceSnapshot(
                record=record_from_row(r),
                session=session_from_row(r),
                window=window_from_row(r, prefix="vw_"),
            )
