from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import LiveStatus, ResolvedStatus, StatusTier
from ..model import AttendanceRecord, CourseSession, ResolvedState, VerificationWindow
from ..windows import CheckinWindows
from .base import StatusStrategy

_DIRECT = {
    LiveStatus.LEAVE: ResolvedStatus.LEAVE,
    LiveStatus.LEAVE_PENDING: ResolvedStatus.LEAVE_PENDING,
    LiveStatus.PENDING_APPROVAL: ResolvedStatus.CHECKIN_PENDING_TEACHER_CONFIRMATION,
}

# A freshly materialised roster row has not been checked in yet either.
_NOT_CHECKED_IN = (LiveStatus.ABSENT, LiveStatus.UNSTARTED)


def _live(status: ResolvedStatus, *, check_in: bool = False, leave: bool = False) -> ResolvedState:
    return ResolvedState(status, can_check_in=check_in, can_request_leave=leave, tier=StatusTier.LIVE)


class LiveStatusStrategy(StatusStrategy):
    """Real-time check-in state combined with the session's time windows.

    Rules are evaluated top to bottom and the first match wins.
    """

    def decide(
        self,
        *,
        record: AttendanceRecord,
        session: CourseSession,
        window: Optional[VerificationWindow],
        windows: CheckinWindows,
        now: datetime,
    ) -> ResolvedState:
        status = record.live_status
        if status in _DIRECT:
            return _live(_DIRECT[status])

        if windows.before_pre_open(now):
            return _live(ResolvedStatus.NOT_YET_OPEN, leave=True)

        in_makeup = windows.in_makeup(now)
        checked_in_under_window = record.checked_in_under(window)

        if status == LiveStatus.PRESENT:
            # Classified by the recorded check-in source, so it survives the window closing.
            if checked_in_under_window:
                return _live(ResolvedStatus.PRESENT_IN_MAKEUP_WINDOW)
            if not in_makeup:
                return _live(ResolvedStatus.PRESENT)

        if status in _NOT_CHECKED_IN:
            if windows.in_pre_checkin(now):
                return _live(ResolvedStatus.CHECKIN_OPEN, check_in=True, leave=True)
            if windows.in_grace(now):
                return _live(ResolvedStatus.CHECKIN_URGENT, check_in=True)

        if in_makeup and not checked_in_under_window:
            return _live(ResolvedStatus.MAKEUP_IN_PROGRESS, check_in=True)

        if status == LiveStatus.TRUANT:
            return _live(ResolvedStatus.TRUANT)
        if status == LiveStatus.ABSENT and windows.session_ended(now):
            return _live(ResolvedStatus.ABSENT)

        return ResolvedState(ResolvedStatus.CLOSED)
