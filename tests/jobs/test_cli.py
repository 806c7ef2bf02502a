from __future__ import annotations

import json
from types import SimpleNamespace

import pytest
from flask import Flask

from src.campus_attendance.campus_attendance.attendance.model import AttendanceSnapshot
from src.campus_attendance.campus_attendance.attendance.service import AttendanceStatusService
from src.campus_attendance.campus_attendance.jobs.aggregation import AggregationJob
from src.campus_attendance.campus_attendance.jobs.controller import register
from src.campus_attendance.campus_attendance.jobs.range_correction import RangeCorrectionJob
from src.campus_attendance.campus_attendance.jobs.rate_rebuild import RateRebuildJob
from tests.builders import seed_two_weeks


class InMemoryTerm:
    def __init__(self, term):
        self.term = term

    def get_term_config(self):
        return self.term

    def save_term_config(self, term):
        self.term = term


class InMemoryAttendance:
    def __init__(self, db):
        self._db = db

    def get_snapshot(self, *, session_id, student_id):
        record = self._db.live.get(f"{session_id}-{student_id}")
        if record is None:
            return None
        return AttendanceSnapshot(record=record, session=self._db.sessions[session_id])


@pytest.fixture
def term_repo(term):
    return InMemoryTerm(term)


@pytest.fixture
def runner(db, rate_store, term_repo):
    seed_two_weeks(db)
    container = SimpleNamespace(
        term_repo=term_repo,
        status_service=AttendanceStatusService(InMemoryAttendance(db)),
        aggregation_job=AggregationJob(db),
        range_correction_job=RangeCorrectionJob(db),
        rate_rebuild_job=RateRebuildJob(rate_store),
    )
    app = Flask(__name__)
    register(app, container)
    return app.test_cli_runner()


def test_aggregate_daily_prints_summary(runner, db):
    result = runner.invoke(args=["aggregate-daily", "--date", "2025-03-03"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["report_date"] == "2025-03-03"
    assert payload["stats_inserted"] == 1
    assert payload["records_purged"] == 4
    assert payload["skipped_reason"] is None
    assert len(db.history) == 4


def test_aggregate_daily_outside_term_exits_cleanly(runner, db):
    result = runner.invoke(args=["aggregate-daily", "--date", "2024-12-01"])

    assert result.exit_code == 0
    assert json.loads(result.output)["skipped_reason"]
    assert db.history == {}


def test_rebuild_range_after_aggregation(runner):
    runner.invoke(args=["aggregate-daily", "--date", "2025-03-03"])

    result = runner.invoke(args=["rebuild-range", "--week", "2", "--weekday", "1"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["stats_deleted"] == 1
    assert payload["stats_inserted"] == 1


def test_rebuild_range_rejects_invalid_week(runner):
    result = runner.invoke(args=["rebuild-range", "--week", "0"])

    assert result.exit_code == 1
    assert "teaching week" in result.output


def test_rebuild_rates_prints_summary(runner):
    result = runner.invoke(args=["rebuild-rates"])

    assert result.exit_code == 0, result.output
    payload = json.loads(result.output)
    assert payload["rows_written"] == 3
    assert payload["course_codes"] == ["CS101"]


def test_resolve_status_at_a_given_time(runner):
    result = runner.invoke(args=["resolve-status", "--session", "7", "--student", "s1", "--at", "2025-03-03T10:05"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {
        "can_check_in": True,
        "can_request_leave": False,
        "status": "checkin_urgent",
        "tier": "live",
    }


def test_resolve_status_for_unknown_student(runner):
    result = runner.invoke(args=["resolve-status", "--session", "7", "--student", "nobody"])

    assert result.exit_code == 1
    assert "no attendance record" in result.output


def test_bad_report_date_is_a_usage_error(runner, db):
    result = runner.invoke(args=["aggregate-daily", "--date", "03/03/2025"])

    assert result.exit_code == 1
    assert "YYYY-MM-DD" in result.output
    assert db.commits == 0


def test_set_term_then_aggregate_uses_the_new_calendar(runner, term_repo, db):
    result = runner.invoke(args=["set-term", "--start", "2025-03-03", "--max-weeks", "16"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == {"start_date": "2025-03-03", "max_teaching_weeks": 16}
    assert term_repo.term.max_teaching_weeks == 16

    # 2025-03-03 is now week 1, which has no sessions.
    summary = json.loads(runner.invoke(args=["aggregate-daily", "--date", "2025-03-03"]).output)
    assert summary["teaching_week"] == 1
    assert summary["sessions_aggregated"] == 0
    assert db.history == {}
