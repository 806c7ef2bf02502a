from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional

from ..attendance.service import check_snapshot
from ..attendance.model import AttendanceSnapshot
from ..attendance.windows import DEFAULT_POLICY, WindowPolicy
from ..common.datetime_utils import now_local
from ..core.exceptions import ConfigurationMissing, OutOfTermRange
from ..stats.model import AggregationSummary
from ..stats.repository import BatchStore
from ..stats.rollup import rollup_session
from ..term.calendar import teaching_slot_for
from ..term.model import TermConfig
from .common import batch_transaction

logger = logging.getLogger(__name__)


class AggregationJob:
    """Daily rollup + archival of one (teaching week, weekday) slot.

    Only sessions that have ended by ``now`` are rolled up, archived and
    purged. Stats, absence details, history copies and the live-table purge
    are all written in one transaction. Every insert is keyed, so a re-run for the
    same date never duplicates rows. A session that already has stats keeps
    them (and their absence details) even if late live records arrived since;
    those records are still archived and purged.
    """

    name = "daily-aggregation"

    def __init__(self, store: BatchStore, *, policy: WindowPolicy = DEFAULT_POLICY):
        self._store = store
        self._policy = policy

    def run_daily_aggregation(
        self,
        report_date: date,
        term_config: Optional[TermConfig],
        *,
        now: Optional[datetime] = None,
    ) -> AggregationSummary:
        now = now or now_local()

        try:
            slot = teaching_slot_for(report_date, term_config)
        except (ConfigurationMissing, OutOfTermRange) as exc:
            logger.info("%s skipped for %s: %s", self.name, report_date, exc)
            return AggregationSummary(report_date=report_date, skipped_reason=str(exc))

        logger.info(
            "%s started report_date=%s week=%s weekday=%s",
            self.name,
            report_date,
            slot.teaching_week,
            slot.weekday,
        )

        sessions_aggregated = stats_inserted = details_inserted = 0
        with batch_transaction(self._store, self.name) as unit:
            sessions = unit.list_sessions_for_slot(teaching_week=slot.teaching_week, weekday=slot.weekday)
            # A session still running keeps its live records until a later run.
            ended = [s for s in sessions if s.end_time <= now]
            not_ended = len(sessions) - len(ended)
            checked = [s for s in ended if s.requires_checkin]
            session_ids = [s.session_id for s in checked]
            records = unit.list_live_records(session_ids=session_ids)
            windows = unit.latest_windows(session_ids=session_ids)

            by_session: dict[int, list] = {sid: [] for sid in session_ids}
            for record in records:
                by_session[record.session_id].append(record)

            for session in checked:
                window = windows.get(session.session_id)
                for record in by_session[session.session_id]:
                    check_snapshot(AttendanceSnapshot(record=record, session=session, window=window))

                rollup = rollup_session(
                    session,
                    by_session[session.session_id],
                    window,
                    report_date=report_date,
                    now=now,
                    policy=self._policy,
                )
                stats_id, inserted = unit.insert_stats_if_absent(rollup.stats_row())
                if inserted:
                    stats_inserted += 1
                    details_inserted += unit.insert_absence_details_if_absent(rollup.detail_rows(stats_id))
                else:
                    # Already reported; late live rows are archived without changing the report.
                    logger.info("%s: session %s already has stats for %s", self.name, session.session_id, report_date)
                sessions_aggregated += 1

            ended_ids = [s.session_id for s in ended]
            archived = unit.archive_slot(
                teaching_week=slot.teaching_week,
                weekday=slot.weekday,
                session_ids=ended_ids,
                archived_at=now,
            )
            purged = unit.purge_slot(teaching_week=slot.teaching_week, weekday=slot.weekday, session_ids=ended_ids)

        if not_ended:
            logger.warning("%s left %d session(s) not yet ended in the live table", self.name, not_ended)

        summary = AggregationSummary(
            report_date=report_date,
            teaching_week=slot.teaching_week,
            weekday=slot.weekday,
            sessions_aggregated=sessions_aggregated,
            sessions_not_ended=not_ended,
            stats_inserted=stats_inserted,
            absence_details_inserted=details_inserted,
            records_archived=archived,
            records_purged=purged,
        )
        logger.info("%s committed: %s", self.name, summary)
        return summary
