from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from ..model import AttendanceRecord, CourseSession, ResolvedState, VerificationWindow
from ..windows import CheckinWindows


class StatusStrategy(ABC):
    """Strategy Pattern: encapsulate how one status tier is turned into a state."""

    @abstractmethod
    def decide(
        self,
        *,
        record: AttendanceRecord,
        session: CourseSession,
        window: Optional[VerificationWindow],
        windows: CheckinWindows,
        now: datetime,
    ) -> ResolvedState:
        raise NotImplementedError
