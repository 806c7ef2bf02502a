from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import InvariantViolation, ValidationError
from .model import AttendanceSnapshot, ResolvedState
from .repository import AttendanceRepository
from .resolver import resolve
from .windows import DEFAULT_POLICY, WindowPolicy

logger = logging.getLogger(__name__)


def check_snapshot(snapshot: AttendanceSnapshot) -> None:
    """Reject snapshots whose parts do not belong together."""

    record, session, window = snapshot.record, snapshot.session, snapshot.window
    if record.session_id != session.session_id:
        raise InvariantViolation(
            f"record {record.record_id} belongs to session {record.session_id}, not {session.session_id}"
        )
    if window is not None and window.session_id != session.session_id:
        raise InvariantViolation(
            f"verification window {window.window_id} references session {window.session_id}, "
            f"expected {session.session_id}"
        )


class AttendanceStatusService:
    def __init__(self, attendance: AttendanceRepository, *, policy: WindowPolicy = DEFAULT_POLICY):
        self._attendance = attendance
        self._policy = policy

    def resolve_for_student(self, *, session_id: int, student_id: str, now: Optional[datetime] = None) -> ResolvedState:
        now = now or now_local()

        snapshot = self._attendance.get_snapshot(session_id=session_id, student_id=student_id)
        if snapshot is None:
            raise ValidationError(f"no attendance record for student {student_id} in session {session_id}")

        check_snapshot(snapshot)
        state = resolve(snapshot.record, snapshot.session, snapshot.window, now, policy=self._policy)
        logger.debug(
            "resolved session=%s student=%s status=%s tier=%s",
            session_id,
            student_id,
            state.status.value,
            state.tier.value,
        )
        return state
