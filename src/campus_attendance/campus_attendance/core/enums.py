from __future__ import annotations

from enum import Enum


class StatusTier(str, Enum):
    """Which of the three status fields produced a resolution."""

    FINAL = "final"
    PENDING = "pending"
    LIVE = "live"
    NONE = "none"


class FinalStatus(str, Enum):
    """Values written by administrative override or terminal approval."""

    PRESENT = "present"
    ABSENT = "absent"
    TRUANT = "truant"
    LEAVE = "leave"
    LEAVE_PENDING = "leave_pending"
    PENDING_APPROVAL = "pending_approval"


class PendingStatus(str, Enum):
    """Values written by the leave workflow."""

    LEAVE = "leave"
    LEAVE_PENDING = "leave_pending"
    UNSTARTED = "unstarted"


class LiveStatus(str, Enum):
    """Values written by the real-time check-in pipeline."""

    UNSTARTED = "unstarted"
    PRESENT = "present"
    ABSENT = "absent"
    TRUANT = "truant"
    LEAVE = "leave"
    LEAVE_PENDING = "leave_pending"
    PENDING_APPROVAL = "pending_approval"


class ResolvedStatus(str, Enum):
    """Canonical state handed to the API layer."""

    CHECKIN_NOT_REQUIRED = "checkin_not_required"
    PRESENT = "present"
    PRESENT_IN_MAKEUP_WINDOW = "present_in_makeup_window"
    ABSENT = "absent"
    TRUANT = "truant"
    LEAVE = "leave"
    LEAVE_PENDING = "leave_pending"
    CHECKIN_PENDING_TEACHER_CONFIRMATION = "checkin_pending_teacher_confirmation"
    NOT_YET_OPEN = "not_yet_open"
    CHECKIN_OPEN = "checkin_open"
    CHECKIN_URGENT = "checkin_urgent"
    MAKEUP_IN_PROGRESS = "makeup_in_progress"
    CLOSED = "closed"


class AbsenceType(str, Enum):
    """Absence categories stored on absence detail rows."""

    ABSENT = "absent"
    TRUANT = "truant"
    LEAVE = "leave"
    LEAVE_PENDING = "leave_pending"
