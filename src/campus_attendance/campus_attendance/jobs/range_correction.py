from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from ..attendance.windows import DEFAULT_POLICY, WindowPolicy
from ..common.datetime_utils import now_local
from ..common.validators import require_teaching_week, require_weekday
from ..stats.model import AggregationSummary
from ..stats.repository import BatchStore
from ..stats.rollup import rollup_session
from .common import batch_transaction

logger = logging.getLogger(__name__)


class RangeCorrectionJob:
    """Recompute stats for an archived slot from history.

    Only sessions with archived records are touched: their stats and absence
    details are deleted and reinserted. Stats of sessions without history
    (an empty roster, or not archived yet) are left as they are. History
    itself is read-only here; archival is never re-triggered.
    """

    name = "range-correction"

    def __init__(self, store: BatchStore, *, policy: WindowPolicy = DEFAULT_POLICY):
        self._store = store
        self._policy = policy

    def rebuild_aggregation_for_range(
        self,
        teaching_week: int,
        weekday: Optional[int] = None,
        *,
        now: Optional[datetime] = None,
    ) -> AggregationSummary:
        teaching_week = require_teaching_week(teaching_week)
        weekday = require_weekday(weekday)
        now = now or now_local()

        logger.info("%s started week=%s weekday=%s", self.name, teaching_week, weekday or "*")

        sessions_aggregated = stats_inserted = details_inserted = 0
        with batch_transaction(self._store, self.name) as unit:
            sessions = [
                s
                for s in unit.list_sessions_for_slot(teaching_week=teaching_week, weekday=weekday)
                if s.requires_checkin
            ]
            session_ids = [s.session_id for s in sessions]
            records = unit.list_history_records(session_ids=session_ids)
            windows = unit.latest_windows(session_ids=session_ids)

            by_session: dict[int, list] = {sid: [] for sid in session_ids}
            for record in records:
                by_session[record.session_id].append(record)

            archived = [s for s in sessions if by_session[s.session_id]]
            deleted = unit.delete_stats_for_sessions(session_ids=[s.session_id for s in archived])

            for session in archived:
                # Resolve as of the later of "now" and the session end, so history is always evaluated closed.
                as_of = max(now, session.end_time)
                rollup = rollup_session(
                    session,
                    by_session[session.session_id],
                    windows.get(session.session_id),
                    report_date=session.start_time.date(),
                    now=as_of,
                    policy=self._policy,
                )
                stats_id, inserted = unit.insert_stats_if_absent(rollup.stats_row())
                stats_inserted += int(inserted)
                details_inserted += unit.insert_absence_details_if_absent(rollup.detail_rows(stats_id))
                sessions_aggregated += 1

        summary = AggregationSummary(
            teaching_week=teaching_week,
            weekday=weekday,
            sessions_aggregated=sessions_aggregated,
            stats_inserted=stats_inserted,
            absence_details_inserted=details_inserted,
            stats_deleted=deleted,
        )
        logger.info("%s committed: %s", self.name, summary)
        return summary
