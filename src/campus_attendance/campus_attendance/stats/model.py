from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from ..core.enums import AbsenceType
from ..attendance.model import AttendanceRecord


@dataclass(frozen=True)
class StatsRow:
    """Per-session rollup; unique on (report_date, session_id)."""

    report_date: date
    session_id: int
    course_code: str
    teaching_week: int
    weekday: int
    total_should_attend: int
    present_count: int
    absent_count: int
    truant_count: int
    leave_count: int
    stats_id: Optional[int] = None

    @property
    def key(self) -> tuple[date, int]:
        return (self.report_date, self.session_id)


@dataclass(frozen=True)
class AbsenceDetailRow:
    """One student of a StatsRow whose resolved state was not present."""

    stats_id: int
    session_id: int
    student_id: str
    absence_type: AbsenceType
    report_date: date


@dataclass(frozen=True)
class HistoryRecord:
    """Archived copy of an AttendanceRecord; keyed by the original record_id."""

    record: AttendanceRecord
    archived_at: datetime

    @property
    def record_id(self) -> str:
        return self.record.record_id


@dataclass(frozen=True)
class Enrollment:
    """(student, course) pair seen on any roster, live or archived."""

    student_id: str
    course_code: str
    course_name: str


@dataclass(frozen=True)
class CourseSessionTotals:
    course_code: str
    total_sessions: int
    completed_sessions: int


@dataclass(frozen=True)
class StudentAbsenceCounts:
    student_id: str
    course_code: str
    absent_count: int = 0
    truant_count: int = 0
    leave_count: int = 0


@dataclass(frozen=True)
class RateRow:
    """Read-model for analytics; rebuilt in full on each run."""

    student_id: str
    course_code: str
    course_name: str
    total_sessions: int
    completed_sessions: int
    absent_count: int
    truant_count: int
    leave_count: int
    absence_rate: float
    truant_rate: float
    leave_rate: float


@dataclass(frozen=True)
class AggregationSummary:
    report_date: Optional[date] = None
    teaching_week: Optional[int] = None
    weekday: Optional[int] = None
    sessions_aggregated: int = 0
    sessions_not_ended: int = 0
    stats_inserted: int = 0
    absence_details_inserted: int = 0
    stats_deleted: int = 0
    records_archived: int = 0
    records_purged: int = 0
    skipped_reason: Optional[str] = None

    @property
    def skipped(self) -> bool:
        return self.skipped_reason is not None


@dataclass(frozen=True)
class RebuildSummary:
    rows_written: int = 0
    students: int = 0
    courses: int = 0
    rebuilt_at: Optional[datetime] = None
    course_codes: list[str] = field(default_factory=list)
