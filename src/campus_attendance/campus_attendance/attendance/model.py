from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Union

from ..core.enums import FinalStatus, LiveStatus, PendingStatus, ResolvedStatus, StatusTier


@dataclass(frozen=True)
class CourseSession:
    """One scheduled meeting of a course (owned by the scheduling subsystem)."""

    session_id: int
    course_code: str
    course_name: str
    start_time: datetime
    end_time: datetime
    teaching_week: int
    weekday: int
    requires_checkin: bool = True
    teacher_names: Optional[str] = None
    room: Optional[str] = None
    deleted_at: Optional[datetime] = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


@dataclass(frozen=True)
class VerificationWindow:
    """Supplementary check-in round opened by a teacher for one session.

    A missing ``duration_minutes`` means the configured default applies; the
    close time is only known once a WindowPolicy is applied (compute_windows).
    """

    window_id: str
    session_id: int
    round_number: int
    open_time: datetime
    duration_minutes: Optional[int] = None


StatusValue = Union[FinalStatus, PendingStatus, LiveStatus]


@dataclass(frozen=True)
class StatusSignal:
    """The single authoritative status of a record, tagged with its tier."""

    tier: StatusTier
    value: Optional[StatusValue] = None


NO_SIGNAL = StatusSignal(tier=StatusTier.NONE)


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): one row per (session, student).

    The three status fields are written by different subsystems and are never
    merged; ``authoritative_signal`` picks one of them by fixed priority.
    """

    record_id: str
    session_id: int
    student_id: str
    final_status: Optional[FinalStatus] = None
    pending_status: Optional[PendingStatus] = None
    live_status: Optional[LiveStatus] = LiveStatus.UNSTARTED
    checkin_time: Optional[datetime] = None
    last_checkin_source: Optional[str] = None
    checkin_window_id: Optional[str] = None

    def authoritative_signal(self) -> StatusSignal:
        if self.final_status is not None:
            return StatusSignal(StatusTier.FINAL, self.final_status)
        if self.pending_status is not None:
            return StatusSignal(StatusTier.PENDING, self.pending_status)
        if self.live_status is not None:
            return StatusSignal(StatusTier.LIVE, self.live_status)
        return NO_SIGNAL

    def checked_in_under(self, window: Optional[VerificationWindow]) -> bool:
        return window is not None and self.checkin_window_id is not None and self.checkin_window_id == window.window_id


@dataclass(frozen=True)
class ResolvedState:
    """Canonical resolution result: a status tag plus capability flags."""

    status: ResolvedStatus
    can_check_in: bool = False
    can_request_leave: bool = False
    tier: StatusTier = StatusTier.NONE

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "can_check_in": self.can_check_in,
            "can_request_leave": self.can_request_leave,
            "tier": self.tier.value,
        }


@dataclass(frozen=True)
class AttendanceSnapshot:
    """Record, session and latest verification window read together."""

    record: AttendanceRecord
    session: CourseSession
    window: Optional[VerificationWindow] = None
