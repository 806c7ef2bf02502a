from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import StatusTier
from .model import AttendanceRecord, CourseSession
from .strategies.base import StatusStrategy
from .strategies.live_strategy import LiveStatusStrategy
from .strategies.terminal_strategy import (
    CheckinNotRequiredStrategy,
    ClosedStrategy,
    FinalStatusStrategy,
    PendingStatusStrategy,
)


@dataclass
class StatusStrategyFactory:
    """Factory Pattern: choose the strategy for the record's authoritative tier."""

    def for_record(self, *, record: AttendanceRecord, session: CourseSession) -> StatusStrategy:
        if not session.requires_checkin:
            return CheckinNotRequiredStrategy()

        tier = record.authoritative_signal().tier
        if tier == StatusTier.FINAL:
            return FinalStatusStrategy()
        if tier == StatusTier.PENDING:
            return PendingStatusStrategy()
        if tier == StatusTier.LIVE:
            return LiveStatusStrategy()
        return ClosedStrategy()
