from __future__ import annotations

from typing import Optional, Protocol

from .model import AttendanceSnapshot


class AttendanceRepository(Protocol):
    def get_snapshot(self, *, session_id: int, student_id: str) -> Optional[AttendanceSnapshot]:
        """Read record, session and latest verification window in one consistent read.

        Returns None when the student has no record for the session.
        """

        raise NotImplementedError
