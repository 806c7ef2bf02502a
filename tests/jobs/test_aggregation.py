from __future__ import annotations

from datetime import date, datetime

import pytest

from src.campus_attendance.campus_attendance.core.enums import AbsenceType
from src.campus_attendance.campus_attendance.core.exceptions import InvariantViolation, TransactionFailure
from src.campus_attendance.campus_attendance.jobs.aggregation import AggregationJob
from src.campus_attendance.campus_attendance.jobs.common import batch_transaction
from tests.builders import make_record, seed_two_weeks

MONDAY = date(2025, 3, 3)
NIGHT = datetime(2025, 3, 3, 23, 0)


def test_daily_aggregation_rolls_up_archives_and_purges(db, term):
    seed_two_weeks(db)

    summary = AggregationJob(db).run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert not summary.skipped
    assert (summary.teaching_week, summary.weekday) == (2, 1)
    assert summary.sessions_aggregated == 1
    assert summary.stats_inserted == 1
    assert summary.absence_details_inserted == 2
    assert summary.records_archived == 4
    assert summary.records_purged == 4

    row = db.stats[(MONDAY, 7)]
    assert (row.total_should_attend, row.present_count, row.absent_count, row.truant_count, row.leave_count) == (
        3,
        1,
        1,
        0,
        1,
    )
    assert {(k[1], d.absence_type) for k, d in db.details.items()} == {
        ("s1", AbsenceType.ABSENT),
        ("s3", AbsenceType.LEAVE),
    }
    assert set(db.history) == {"7-s1", "7-s2", "7-s3", "8-s1"}
    assert all(h.archived_at == NIGHT for h in db.history.values())
    assert db.commits == 1


def test_purge_never_touches_other_slots(db, term):
    seed_two_weeks(db)

    AggregationJob(db).run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert set(db.live) == {"9-s1", "9-s2", "10-s1", "10-s2"}


def test_rerun_for_the_same_date_is_idempotent(db, term):
    seed_two_weeks(db)
    job = AggregationJob(db)
    job.run_daily_aggregation(MONDAY, term, now=NIGHT)
    stats_before = dict(db.stats)
    details_before = dict(db.details)
    history_before = dict(db.history)

    again = job.run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert again.stats_inserted == 0
    assert again.absence_details_inserted == 0
    assert again.records_archived == 0
    assert again.records_purged == 0
    assert db.stats == stats_before
    assert db.details == details_before
    assert db.history == history_before


def test_rerun_after_partial_archive_finishes_the_purge(db, term):
    seed_two_weeks(db)
    job = AggregationJob(db)
    with db.transaction() as unit:
        unit.archive_slot(teaching_week=2, weekday=1, session_ids=[7, 8], archived_at=NIGHT)

    summary = job.run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert summary.records_archived == 0
    assert summary.records_purged == 4
    assert len(db.history) == 4


def test_late_live_record_is_archived_without_touching_the_stats(db, term):
    seed_two_weeks(db)
    job = AggregationJob(db)
    job.run_daily_aggregation(MONDAY, term, now=NIGHT)
    stats_before = dict(db.stats)
    details_before = dict(db.details)

    db.add_record(make_record(db.sessions[7], "s4"))
    again = job.run_daily_aggregation(MONDAY, term, now=NIGHT.replace(hour=23, minute=30))

    assert again.sessions_aggregated == 1
    assert again.stats_inserted == 0
    assert again.absence_details_inserted == 0
    assert again.records_archived == 1
    assert again.records_purged == 1
    assert db.stats == stats_before
    assert db.details == details_before
    assert "7-s4" in db.history
    assert "7-s4" not in db.live


def test_sessions_that_have_not_started_are_left_live(db, term):
    seed_two_weeks(db)
    live_before = dict(db.live)

    summary = AggregationJob(db).run_daily_aggregation(MONDAY, term, now=datetime(2025, 3, 3, 8, 0))

    assert summary.sessions_aggregated == 0
    assert summary.sessions_not_ended == 2
    assert summary.records_archived == 0
    assert summary.records_purged == 0
    assert db.stats == {}
    assert db.details == {}
    assert db.history == {}
    assert db.live == live_before


def test_midday_run_only_closes_finished_sessions(db, term):
    seed_two_weeks(db)
    job = AggregationJob(db)

    midday = job.run_daily_aggregation(MONDAY, term, now=datetime(2025, 3, 3, 12, 0))

    assert midday.sessions_aggregated == 1
    assert midday.sessions_not_ended == 1
    assert set(db.history) == {"7-s1", "7-s2", "7-s3"}
    assert "8-s1" in db.live

    night = job.run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert night.sessions_not_ended == 0
    assert night.stats_inserted == 0
    assert night.records_archived == 1
    assert set(db.history) == {"7-s1", "7-s2", "7-s3", "8-s1"}


@pytest.mark.parametrize("step", ["insert_stats_if_absent", "archive_slot", "purge_slot"])
def test_failure_rolls_back_every_step(db, term, step):
    seed_two_weeks(db)
    live_before = dict(db.live)
    db.fail_on = step

    with pytest.raises(TransactionFailure) as excinfo:
        AggregationJob(db).run_daily_aggregation(MONDAY, term, now=NIGHT)

    assert isinstance(excinfo.value.__cause__, RuntimeError)
    assert db.stats == {}
    assert db.details == {}
    assert db.history == {}
    assert db.live == live_before
    assert db.commits == 0


def test_missing_term_config_is_a_noop(db):
    seed_two_weeks(db)

    summary = AggregationJob(db).run_daily_aggregation(MONDAY, None, now=NIGHT)

    assert summary.skipped
    assert "term.start_date" in summary.skipped_reason
    assert db.commits == 0
    assert len(db.live) == 8


@pytest.mark.parametrize("day", [date(2025, 2, 20), date(2025, 7, 1)])
def test_dates_outside_the_term_are_a_noop(db, term, day):
    seed_two_weeks(db)

    summary = AggregationJob(db).run_daily_aggregation(day, term, now=NIGHT)

    assert summary.skipped
    assert summary.sessions_aggregated == 0
    assert db.commits == 0


def test_slot_without_sessions_still_commits(db, term):
    summary = AggregationJob(db).run_daily_aggregation(date(2025, 3, 5), term, now=NIGHT)

    assert not summary.skipped
    assert summary.sessions_aggregated == 0
    assert db.commits == 1


def test_invariant_violation_is_not_wrapped(db):
    with pytest.raises(InvariantViolation):
        with batch_transaction(db, "test-job"):
            raise InvariantViolation("window points at another session")

    assert db.commits == 0
