from __future__ import annotations

from datetime import datetime
from typing import ContextManager, Mapping, Optional, Protocol, Sequence

from ..attendance.model import AttendanceRecord, CourseSession, VerificationWindow
from .model import AbsenceDetailRow, CourseSessionTotals, Enrollment, RateRow, StatsRow, StudentAbsenceCounts


class BatchUnit(Protocol):
    """Operations available inside one batch transaction."""

    def list_sessions_for_slot(self, *, teaching_week: int, weekday: Optional[int]) -> Sequence[CourseSession]:
        """Sessions of one teaching week, optionally narrowed to a weekday."""

        raise NotImplementedError

    def list_live_records(self, *, session_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def list_history_records(self, *, session_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def latest_windows(self, *, session_ids: Sequence[int]) -> Mapping[int, VerificationWindow]:
        """Highest verification round per session (sessions without one are absent)."""

        raise NotImplementedError

    def insert_stats_if_absent(self, row: StatsRow) -> tuple[int, bool]:
        """Insert keyed by (report_date, session_id).

        Returns (stats_id, inserted); an existing row is left untouched.
        """

        raise NotImplementedError

    def insert_absence_details_if_absent(self, rows: Sequence[AbsenceDetailRow]) -> int:
        """Insert keyed by (stats_id, student_id); returns the number of new rows."""

        raise NotImplementedError

    def delete_stats_for_sessions(self, *, session_ids: Sequence[int]) -> int:
        """Delete the stats rows (and their absence details) of these sessions only."""

        raise NotImplementedError

    def archive_slot(
        self, *, teaching_week: int, weekday: int, session_ids: Sequence[int], archived_at: datetime
    ) -> int:
        """Copy live records of the given sessions of the slot into history; existing keys are skipped."""

        raise NotImplementedError

    def purge_slot(self, *, teaching_week: int, weekday: int, session_ids: Sequence[int]) -> int:
        """Delete live records of the given sessions of the slot that already exist in history."""

        raise NotImplementedError


class BatchStore(Protocol):
    def transaction(self) -> ContextManager[BatchUnit]:
        """Commit when the block exits normally, roll back everything otherwise."""

        raise NotImplementedError


class RateReader(Protocol):
    """Aggregate reads that must all come from one consistent snapshot."""

    def list_enrollments(self) -> Sequence[Enrollment]:
        raise NotImplementedError

    def course_session_totals(self) -> Sequence[CourseSessionTotals]:
        raise NotImplementedError

    def student_absence_counts(self) -> Sequence[StudentAbsenceCounts]:
        """Counts from absence detail rows of sessions that are not soft-deleted."""

        raise NotImplementedError


class RateStore(Protocol):
    def snapshot(self) -> ContextManager[RateReader]:
        """Read-only transaction over one consistent snapshot of the stats tables."""

        raise NotImplementedError

    def replace_rates(self, rows: Sequence[RateRow], *, rebuilt_at: datetime) -> int:
        """Swap the whole rate table for ``rows``."""

        raise NotImplementedError
