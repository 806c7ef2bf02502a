from __future__ import annotations

from datetime import datetime
from typing import Optional

from ...core.enums import FinalStatus, PendingStatus, ResolvedStatus, StatusTier
from ..model import AttendanceRecord, CourseSession, ResolvedState, VerificationWindow
from ..windows import CheckinWindows
from .base import StatusStrategy

FINAL_TO_RESOLVED = {
    FinalStatus.PRESENT: ResolvedStatus.PRESENT,
    FinalStatus.ABSENT: ResolvedStatus.ABSENT,
    FinalStatus.TRUANT: ResolvedStatus.TRUANT,
    FinalStatus.LEAVE: ResolvedStatus.LEAVE,
    FinalStatus.LEAVE_PENDING: ResolvedStatus.LEAVE_PENDING,
    FinalStatus.PENDING_APPROVAL: ResolvedStatus.CHECKIN_PENDING_TEACHER_CONFIRMATION,
}


class CheckinNotRequiredStrategy(StatusStrategy):
    """Session never needs check-in; every other field is ignored."""

    def decide(self, *, record, session, window, windows, now) -> ResolvedState:
        return ResolvedState(ResolvedStatus.CHECKIN_NOT_REQUIRED)


class FinalStatusStrategy(StatusStrategy):
    """Administratively closed outcome, never reconsidered."""

    def decide(
        self,
        *,
        record: AttendanceRecord,
        session: CourseSession,
        window: Optional[VerificationWindow],
        windows: CheckinWindows,
        now: datetime,
    ) -> ResolvedState:
        return ResolvedState(FINAL_TO_RESOLVED[record.final_status], tier=StatusTier.FINAL)


class PendingStatusStrategy(StatusStrategy):
    """Leave workflow state written before the session opens."""

    def decide(
        self,
        *,
        record: AttendanceRecord,
        session: CourseSession,
        window: Optional[VerificationWindow],
        windows: CheckinWindows,
        now: datetime,
    ) -> ResolvedState:
        status = record.pending_status
        if status == PendingStatus.LEAVE:
            return ResolvedState(ResolvedStatus.LEAVE, tier=StatusTier.PENDING)
        if status == PendingStatus.LEAVE_PENDING:
            return ResolvedState(ResolvedStatus.LEAVE_PENDING, tier=StatusTier.PENDING)
        return ResolvedState(ResolvedStatus.NOT_YET_OPEN, can_request_leave=True, tier=StatusTier.PENDING)


class ClosedStrategy(StatusStrategy):
    """Fallback when nothing else applies."""

    def decide(self, *, record, session, window, windows, now) -> ResolvedState:
        return ResolvedState(ResolvedStatus.CLOSED)
