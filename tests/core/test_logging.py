import json
import logging

from src.campus_attendance.campus_attendance.core.logging import (
    PACKAGE_LOGGER,
    JobJsonFormatter,
    build_logging_config,
)


def test_package_logger_is_the_package_root():
    assert PACKAGE_LOGGER.endswith("campus_attendance.campus_attendance")


def test_json_output_switches_the_console_formatter():
    plain = build_logging_config(level="debug")
    structured = build_logging_config(json_output=True)

    assert plain["handlers"]["console"]["formatter"] == "standard"
    assert plain["loggers"][PACKAGE_LOGGER]["level"] == "DEBUG"
    assert structured["handlers"]["console"]["formatter"] == "json"


def test_json_formatter_adds_level_and_logger():
    formatter = JobJsonFormatter("%(message)s")
    record = logging.LogRecord("campus.jobs", logging.INFO, __file__, 1, "rolled up %d sessions", (3,), None)

    payload = json.loads(formatter.format(record))

    assert payload["message"] == "rolled up 3 sessions"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "campus.jobs"
