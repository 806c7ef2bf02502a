from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..core.constants import DEFAULT_MAX_TEACHING_WEEKS


@dataclass(frozen=True)
class TermConfig:
    """Term boundaries, passed explicitly into jobs instead of read globally."""

    start_date: date
    max_teaching_weeks: int = DEFAULT_MAX_TEACHING_WEEKS


@dataclass(frozen=True)
class TeachingSlot:
    """Academic-calendar address of a day: (teaching week, ISO weekday)."""

    teaching_week: int
    weekday: int
