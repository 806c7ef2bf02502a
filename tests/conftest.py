from __future__ import annotations

import pytest

from tests.builders import TERM_START, InMemoryDatabase, InMemoryRateStore
from src.campus_attendance.campus_attendance.term.model import TermConfig


@pytest.fixture
def db() -> InMemoryDatabase:
    return InMemoryDatabase()


@pytest.fixture
def rate_store(db: InMemoryDatabase) -> InMemoryRateStore:
    return InMemoryRateStore(db)


@pytest.fixture
def term() -> TermConfig:
    return TermConfig(start_date=TERM_START, max_teaching_weeks=18)
