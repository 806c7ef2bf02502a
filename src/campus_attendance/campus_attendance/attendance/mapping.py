"""Row -> domain mapping shared by the MySQL repositories."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional, Type, TypeVar

from ..core.enums import FinalStatus, LiveStatus, PendingStatus
from ..core.exceptions import InvariantViolation
from .model import AttendanceRecord, CourseSession, VerificationWindow

E = TypeVar("E", bound=Enum)


def parse_status(enum_cls: Type[E], value: Any, *, field: str, record_id: Any) -> Optional[E]:
    if value is None or value == "":
        return None
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvariantViolation(f"record {record_id}: {field}={value!r} is not a valid {enum_cls.__name__}") from exc


def record_from_row(r: Dict[str, Any]) -> AttendanceRecord:
    record_id = r["record_id"]
    return AttendanceRecord(
        record_id=str(record_id),
        session_id=int(r["session_id"]),
        student_id=str(r["student_id"]),
        final_status=parse_status(FinalStatus, r.get("final_status"), field="final_status", record_id=record_id),
        pending_status=parse_status(PendingStatus, r.get("pending_status"), field="pending_status", record_id=record_id),
        live_status=parse_status(LiveStatus, r.get("live_status"), field="live_status", record_id=record_id),
        checkin_time=r.get("checkin_time"),
        last_checkin_source=r.get("last_checkin_source"),
        checkin_window_id=r.get("checkin_window_id"),
    )


def session_from_row(r: Dict[str, Any]) -> CourseSession:
    return CourseSession(
        session_id=int(r["session_id"]),
        course_code=r["course_code"],
        course_name=r["course_name"],
        start_time=r["start_time"],
        end_time=r["end_time"],
        teaching_week=int(r["teaching_week"]),
        weekday=int(r["weekday"]),
        requires_checkin=bool(r["requires_checkin"]),
        teacher_names=r.get("teacher_names"),
        room=r.get("room"),
        deleted_at=r.get("deleted_at"),
    )


def window_from_row(r: Dict[str, Any], *, prefix: str = "") -> Optional[VerificationWindow]:
    window_id = r.get(f"{prefix}window_id")
    if window_id is None:
        return None
    duration = r.get(f"{prefix}duration_minutes")
    return VerificationWindow(
        window_id=str(window_id),
        session_id=int(r[f"{prefix}session_id"]),
        round_number=int(r[f"{prefix}round_number"]),
        open_time=r[f"{prefix}open_time"],
        duration_minutes=int(duration) if duration is not None else None,
    )
