from types import SimpleNamespace

from src.campus_attendance.campus_attendance.attendance.windows import WindowPolicy
from src.campus_attendance.campus_attendance.container import window_policy_from


def test_window_policy_defaults_without_settings():
    assert window_policy_from(None) == WindowPolicy()


def test_window_policy_reads_settings():
    settings = SimpleNamespace(PRE_CHECKIN_MINUTES="15", GRACE_MINUTES=5, DEFAULT_MAKEUP_MINUTES=3)

    policy = window_policy_from(settings)

    assert policy == WindowPolicy(pre_checkin_minutes=15, grace_minutes=5, default_makeup_minutes=3)
