from src.campus_attendance.campus_attendance.stats.calculator.standard_calculator import (
    StandardRateCalculator,
    safe_rate,
)
from src.campus_attendance.campus_attendance.stats.model import (
    CourseSessionTotals,
    Enrollment,
    StudentAbsenceCounts,
)


def test_standard_calculator_counts_truancy_as_absence():
    calc = StandardRateCalculator()
    row = calc.rate_row(
        Enrollment("s1", "CS101", "Algorithms"),
        CourseSessionTotals("CS101", total_sessions=16, completed_sessions=8),
        StudentAbsenceCounts("s1", "CS101", absent_count=1, truant_count=1, leave_count=2),
    )

    assert row.absence_rate == 0.25
    assert row.truant_rate == 0.125
    assert row.leave_rate == 0.25
    assert row.total_sessions == 16
    assert row.completed_sessions == 8


def test_rates_are_zero_before_any_session_completes():
    calc = StandardRateCalculator()
    row = calc.rate_row(
        Enrollment("s1", "CS101", "Algorithms"),
        CourseSessionTotals("CS101", total_sessions=16, completed_sessions=0),
        StudentAbsenceCounts("s1", "CS101"),
    )

    assert (row.absence_rate, row.truant_rate, row.leave_rate) == (0.0, 0.0, 0.0)


def test_safe_rate_rounds_to_four_places():
    assert safe_rate(1, 3) == 0.3333
    assert safe_rate(5, 0) == 0.0


def test_build_fills_missing_aggregates_with_zeros():
    calc = StandardRateCalculator()
    enrollments = [
        Enrollment("s2", "MA201", "Calculus"),
        Enrollment("s1", "MA201", "Calculus"),
        Enrollment("s1", "CS101", "Algorithms"),
    ]
    totals = {"CS101": CourseSessionTotals("CS101", 10, 4)}
    counts = {("s1", "CS101"): StudentAbsenceCounts("s1", "CS101", absent_count=2)}

    rows = calc.build(enrollments, totals, counts)

    assert [(r.course_code, r.student_id) for r in rows] == [("CS101", "s1"), ("MA201", "s1"), ("MA201", "s2")]
    assert rows[0].absence_rate == 0.5
    assert rows[1].total_sessions == 0
    assert rows[1].absence_rate == 0.0
