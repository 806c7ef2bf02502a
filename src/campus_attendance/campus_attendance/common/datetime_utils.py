from __future__ import annotations

from datetime import date, datetime

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"expected a YYYY-MM-DD date, got {value!r}") from exc


def parse_iso_datetime(value: str) -> datetime:
    """Accepts 'YYYY-MM-DD HH:MM[:SS]' as well as the 'T'-separated form."""
    try:
        return datetime.fromisoformat(str(value).strip())
    except ValueError as exc:
        raise ValidationError(f"expected an ISO date-time, got {value!r}") from exc


def now_local() -> datetime:
    # Naive local time: course_sessions stores naive DATETIME values.
    return datetime.now()
