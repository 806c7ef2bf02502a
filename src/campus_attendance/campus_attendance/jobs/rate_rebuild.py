from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import TransactionFailure
from ..stats.calculator.base import RateCalculator
from ..stats.calculator.standard_calculator import StandardRateCalculator
from ..stats.model import RebuildSummary
from ..stats.repository import RateStore

logger = logging.getLogger(__name__)


class RateRebuildJob:
    """Full rebuild of student_absence_rates from roster, stats and absence details.

    All inputs are read from one consistent snapshot. Readers of the rate
    table see either the old table or the new one: the store swaps in a fully
    built staging table. The numbers can still lag behind a range correction
    that commits after the snapshot was taken.
    """

    name = "rate-rebuild"

    def __init__(self, store: RateStore, *, calculator: Optional[RateCalculator] = None):
        self._store = store
        self._calculator = calculator or StandardRateCalculator()

    def rebuild_student_absence_rates(self, *, now: Optional[datetime] = None) -> RebuildSummary:
        now = now or now_local()
        logger.info("%s started", self.name)

        try:
            with self._store.snapshot() as reader:
                enrollments = reader.list_enrollments()
                totals = {t.course_code: t for t in reader.course_session_totals()}
                counts = {(c.student_id, c.course_code): c for c in reader.student_absence_counts()}

            rows = self._calculator.build(enrollments, totals, counts)
            written = self._store.replace_rates(rows, rebuilt_at=now)
        except Exception as exc:
            logger.error("%s aborted", self.name, exc_info=True)
            raise TransactionFailure(f"{self.name} failed: {exc}") from exc

        courses = sorted({r.course_code for r in rows})
        summary = RebuildSummary(
            rows_written=written,
            students=len({r.student_id for r in rows}),
            courses=len(courses),
            rebuilt_at=now,
            course_codes=courses,
        )
        logger.info("%s finished: %d rows, %d students, %d courses", self.name, written, summary.students, summary.courses)
        return summary
