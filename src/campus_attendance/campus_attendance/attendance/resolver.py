"""Attendance status resolution.

``resolve`` is pure: it reads nothing but its arguments, keeps no cache and
returns a value for every well-typed input. Callers must pass a record,
session and window read as one consistent snapshot.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from .factory import StatusStrategyFactory
from .model import AttendanceRecord, CourseSession, ResolvedState, VerificationWindow
from .windows import DEFAULT_POLICY, WindowPolicy, compute_windows

_factory = StatusStrategyFactory()


def resolve(
    record: AttendanceRecord,
    session: CourseSession,
    window: Optional[VerificationWindow],
    now: datetime,
    *,
    policy: WindowPolicy = DEFAULT_POLICY,
) -> ResolvedState:
    strategy = _factory.for_record(record=record, session=session)
    windows = compute_windows(session, window, policy=policy)
    return strategy.decide(record=record, session=session, window=window, windows=windows, now=now)
