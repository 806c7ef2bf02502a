from __future__ import annotations

from datetime import date
from typing import Optional

from ..core.exceptions import ConfigurationMissing, OutOfTermRange
from .model import TeachingSlot, TermConfig


def teaching_week_of(day: date, start_date: date) -> int:
    """Week 1 starts on the term start date; days before it give week <= 0."""
    return (day - start_date).days // 7 + 1


def teaching_slot_for(day: date, term: Optional[TermConfig]) -> TeachingSlot:
    if term is None:
        raise ConfigurationMissing("term.start_date is not configured")

    week = teaching_week_of(day, term.start_date)
    if week < 1 or week > term.max_teaching_weeks:
        raise OutOfTermRange(
            f"{day.isoformat()} is teaching week {week}, outside 1..{term.max_teaching_weeks}"
        )
    return TeachingSlot(teaching_week=week, weekday=day.isoweekday())
