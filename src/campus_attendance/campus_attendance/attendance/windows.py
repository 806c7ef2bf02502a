from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from ..core.constants import CHECKIN_GRACE_MINUTES, DEFAULT_MAKEUP_WINDOW_MINUTES, PRE_CHECKIN_MINUTES
from .model import CourseSession, VerificationWindow


@dataclass(frozen=True)
class WindowPolicy:
    pre_checkin_minutes: int = PRE_CHECKIN_MINUTES
    grace_minutes: int = CHECKIN_GRACE_MINUTES
    default_makeup_minutes: int = DEFAULT_MAKEUP_WINDOW_MINUTES


DEFAULT_POLICY = WindowPolicy()


@dataclass(frozen=True)
class CheckinWindows:
    """Named time intervals for one session. Every interval is half-open [a, b)."""

    pre_open: datetime
    start: datetime
    grace_end: datetime
    end: datetime
    makeup_open: Optional[datetime] = None
    makeup_end: Optional[datetime] = None

    @property
    def has_makeup(self) -> bool:
        return self.makeup_open is not None and self.makeup_end is not None

    def before_pre_open(self, now: datetime) -> bool:
        return now < self.pre_open

    def in_pre_checkin(self, now: datetime) -> bool:
        return self.pre_open <= now < self.start

    def in_grace(self, now: datetime) -> bool:
        return self.start <= now < self.grace_end

    def in_makeup(self, now: datetime) -> bool:
        if not self.has_makeup:
            return False
        return self.makeup_open <= now < self.makeup_end

    def session_ended(self, now: datetime) -> bool:
        return now >= self.end


def compute_windows(
    session: CourseSession,
    window: Optional[VerificationWindow] = None,
    *,
    policy: WindowPolicy = DEFAULT_POLICY,
) -> CheckinWindows:
    start = session.start_time
    makeup_open = makeup_end = None
    if window is not None:
        makeup_open = window.open_time
        makeup_end = makeup_open + timedelta(minutes=window.duration_minutes or policy.default_makeup_minutes)

    return CheckinWindows(
        pre_open=start - timedelta(minutes=policy.pre_checkin_minutes),
        start=start,
        grace_end=start + timedelta(minutes=policy.grace_minutes),
        end=session.end_time,
        makeup_open=makeup_open,
        makeup_end=makeup_end,
    )
