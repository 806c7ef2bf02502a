from datetime import date, datetime

import pytest

from src.campus_attendance.campus_attendance.core.enums import (
    AbsenceType,
    FinalStatus,
    LiveStatus,
    PendingStatus,
    ResolvedStatus,
)
from src.campus_attendance.campus_attendance.stats.rollup import absence_type_for, rollup_session
from tests.builders import make_record, make_session

SESSION = make_session(21, start=datetime(2025, 3, 4, 13, 30), minutes=90)
AFTER_CLASS = datetime(2025, 3, 4, 23, 0)


@pytest.mark.parametrize(
    "status, expected",
    [
        (ResolvedStatus.PRESENT, None),
        (ResolvedStatus.PRESENT_IN_MAKEUP_WINDOW, None),
        (ResolvedStatus.TRUANT, AbsenceType.TRUANT),
        (ResolvedStatus.LEAVE, AbsenceType.LEAVE),
        (ResolvedStatus.LEAVE_PENDING, AbsenceType.LEAVE_PENDING),
        (ResolvedStatus.ABSENT, AbsenceType.ABSENT),
        (ResolvedStatus.CHECKIN_PENDING_TEACHER_CONFIRMATION, AbsenceType.ABSENT),
        (ResolvedStatus.CLOSED, AbsenceType.ABSENT),
    ],
)
def test_absence_type_buckets(status, expected):
    assert absence_type_for(status) == expected


def test_rollup_counts_add_up_to_roster_size():
    records = [
        make_record(SESSION, "s5", live_status=LiveStatus.PRESENT),
        make_record(SESSION, "s1", live_status=LiveStatus.ABSENT),
        make_record(SESSION, "s3", live_status=LiveStatus.TRUANT),
        make_record(SESSION, "s2", pending_status=PendingStatus.LEAVE),
        make_record(SESSION, "s4", final_status=FinalStatus.LEAVE_PENDING, live_status=LiveStatus.PRESENT),
        make_record(SESSION, "s6", final_status=FinalStatus.PRESENT),
    ]

    rollup = rollup_session(SESSION, records, None, report_date=date(2025, 3, 4), now=AFTER_CLASS)
    row = rollup.stats_row()

    assert row.total_should_attend == 6
    assert (row.present_count, row.absent_count, row.truant_count, row.leave_count) == (2, 1, 1, 2)
    assert row.present_count + row.absent_count + row.truant_count + row.leave_count == row.total_should_attend
    assert row.key == (date(2025, 3, 4), 21)
    assert (row.teaching_week, row.weekday) == (2, 2)


def test_detail_rows_keep_leave_and_leave_pending_apart():
    records = [
        make_record(SESSION, "s2", pending_status=PendingStatus.LEAVE),
        make_record(SESSION, "s1", pending_status=PendingStatus.LEAVE_PENDING),
        make_record(SESSION, "s3", live_status=LiveStatus.PRESENT),
    ]

    details = rollup_session(SESSION, records, None, report_date=date(2025, 3, 4), now=AFTER_CLASS).detail_rows(42)

    assert [(d.student_id, d.absence_type) for d in details] == [
        ("s1", AbsenceType.LEAVE_PENDING),
        ("s2", AbsenceType.LEAVE),
    ]
    assert all(d.stats_id == 42 and d.session_id == 21 for d in details)


def test_empty_roster_still_produces_a_stats_row():
    row = rollup_session(SESSION, [], None, report_date=date(2025, 3, 4), now=AFTER_CLASS).stats_row()

    assert row.total_should_attend == 0
    assert row.present_count == 0
