from __future__ import annotations

from ..model import CourseSessionTotals, Enrollment, RateRow, StudentAbsenceCounts
from .base import RateCalculator

RATE_DECIMALS = 4


def safe_rate(numerator: int, denominator: int) -> float:
    if not denominator:
        return 0.0
    return round(numerator / denominator, RATE_DECIMALS)


class StandardRateCalculator(RateCalculator):
    """absence = (absent + truant) / completed; truant and leave likewise."""

    def rate_row(
        self,
        enrollment: Enrollment,
        totals: CourseSessionTotals,
        counts: StudentAbsenceCounts,
    ) -> RateRow:
        completed = totals.completed_sessions
        return RateRow(
            student_id=enrollment.student_id,
            course_code=enrollment.course_code,
            course_name=enrollment.course_name,
            total_sessions=totals.total_sessions,
            completed_sessions=completed,
            absent_count=counts.absent_count,
            truant_count=counts.truant_count,
            leave_count=counts.leave_count,
            absence_rate=safe_rate(counts.absent_count + counts.truant_count, completed),
            truant_rate=safe_rate(counts.truant_count, completed),
            leave_rate=safe_rate(counts.leave_count, completed),
        )
