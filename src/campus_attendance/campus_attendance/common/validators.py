from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_teaching_week(value: int) -> int:
    if value is None or int(value) < 1:
        raise ValidationError(f"teaching week must be >= 1, got {value!r}")
    return int(value)


def require_weekday(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if not 1 <= int(value) <= 7:
        raise ValidationError(f"weekday must be between 1 and 7, got {value!r}")
    return int(value)
