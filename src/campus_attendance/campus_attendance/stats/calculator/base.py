from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable, Mapping

from ..model import CourseSessionTotals, Enrollment, RateRow, StudentAbsenceCounts


class RateCalculator(ABC):
    @abstractmethod
    def rate_row(
        self,
        enrollment: Enrollment,
        totals: CourseSessionTotals,
        counts: StudentAbsenceCounts,
    ) -> RateRow:
        raise NotImplementedError

    def build(
        self,
        enrollments: Iterable[Enrollment],
        totals: Mapping[str, CourseSessionTotals],
        counts: Mapping[tuple[str, str], StudentAbsenceCounts],
    ) -> list[RateRow]:
        """Join the three aggregates; a missing aggregate counts as zeros."""

        rows: list[RateRow] = []
        for e in enrollments:
            course_totals = totals.get(e.course_code) or CourseSessionTotals(e.course_code, 0, 0)
            student_counts = counts.get((e.student_id, e.course_code)) or StudentAbsenceCounts(
                e.student_id, e.course_code
            )
            rows.append(self.rate_row(e, course_totals, student_counts))
        rows.sort(key=lambda r: (r.course_code, r.student_id))
        return rows
