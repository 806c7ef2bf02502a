from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, Optional

from ..attendance.model import AttendanceRecord, CourseSession, VerificationWindow
from ..attendance.resolver import resolve
from ..attendance.windows import DEFAULT_POLICY, WindowPolicy
from ..core.enums import AbsenceType, ResolvedStatus
from .model import AbsenceDetailRow, StatsRow

PRESENT_STATES = frozenset({ResolvedStatus.PRESENT, ResolvedStatus.PRESENT_IN_MAKEUP_WINDOW})

_ABSENCE_BY_STATE = {
    ResolvedStatus.TRUANT: AbsenceType.TRUANT,
    ResolvedStatus.LEAVE: AbsenceType.LEAVE,
    ResolvedStatus.LEAVE_PENDING: AbsenceType.LEAVE_PENDING,
}


def absence_type_for(status: ResolvedStatus) -> Optional[AbsenceType]:
    """Bucket a resolved state for reporting; None means present.

    Any state that is not present, truant or leave (including an unconfirmed
    check-in or a window that closed without a check-in) counts as absent.
    """

    if status in PRESENT_STATES:
        return None
    return _ABSENCE_BY_STATE.get(status, AbsenceType.ABSENT)


class SessionRollup:
    """Counts for one session, built from its roster resolved at one instant."""

    def __init__(self, session: CourseSession, report_date: date):
        self.session = session
        self.report_date = report_date
        self.total = 0
        self.present = 0
        self.absent = 0
        self.truant = 0
        self.leave = 0
        self.absences: list[tuple[str, AbsenceType]] = []

    def add(self, student_id: str, status: ResolvedStatus) -> None:
        self.total += 1
        absence = absence_type_for(status)
        if absence is None:
            self.present += 1
            return

        self.absences.append((student_id, absence))
        if absence == AbsenceType.ABSENT:
            self.absent += 1
        elif absence == AbsenceType.TRUANT:
            self.truant += 1
        else:
            # leave and leave_pending share one bucket in the per-session counts.
            self.leave += 1

    def stats_row(self) -> StatsRow:
        return StatsRow(
            report_date=self.report_date,
            session_id=self.session.session_id,
            course_code=self.session.course_code,
            teaching_week=self.session.teaching_week,
            weekday=self.session.weekday,
            total_should_attend=self.total,
            present_count=self.present,
            absent_count=self.absent,
            truant_count=self.truant,
            leave_count=self.leave,
        )

    def detail_rows(self, stats_id: int) -> list[AbsenceDetailRow]:
        return [
            AbsenceDetailRow(
                stats_id=int(stats_id),
                session_id=self.session.session_id,
                student_id=student_id,
                absence_type=absence,
                report_date=self.report_date,
            )
            for student_id, absence in self.absences
        ]


def rollup_session(
    session: CourseSession,
    records: Iterable[AttendanceRecord],
    window: Optional[VerificationWindow],
    *,
    report_date: date,
    now: datetime,
    policy: WindowPolicy = DEFAULT_POLICY,
) -> SessionRollup:
    rollup = SessionRollup(session, report_date)
    for record in sorted(records, key=lambda r: r.student_id):
        rollup.add(record.student_id, resolve(record, session, window, now, policy=policy).status)
    return rollup
