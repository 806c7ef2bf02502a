from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceStatusService
from .attendance.windows import WindowPolicy
from .core.constants import DEFAULT_MAX_TEACHING_WEEKS
from .database.connection import DBConfig, DatabaseConnection
from .jobs.aggregation import AggregationJob
from .jobs.range_correction import RangeCorrectionJob
from .jobs.rate_rebuild import RateRebuildJob
from .stats.calculator.standard_calculator import StandardRateCalculator
from .stats.mysql_stats_repository import MySQLBatchStore, MySQLRateStore
from .term.mysql_term_repository import MySQLTermConfigRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    attendance_repo: MySQLAttendanceRepository
    term_repo: MySQLTermConfigRepository
    batch_store: MySQLBatchStore
    rate_store: MySQLRateStore

    status_service: AttendanceStatusService
    aggregation_job: AggregationJob
    range_correction_job: RangeCorrectionJob
    rate_rebuild_job: RateRebuildJob


def window_policy_from(settings: Optional[ModuleType]) -> WindowPolicy:
    defaults = WindowPolicy()
    return WindowPolicy(
        pre_checkin_minutes=int(getattr(settings, "PRE_CHECKIN_MINUTES", defaults.pre_checkin_minutes)),
        grace_minutes=int(getattr(settings, "GRACE_MINUTES", defaults.grace_minutes)),
        default_makeup_minutes=int(getattr(settings, "DEFAULT_MAKEUP_MINUTES", defaults.default_makeup_minutes)),
    )


def build_container(*, db_config: dict, settings: Optional[ModuleType] = None) -> Container:
    config = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection.get_instance(config)
    policy = window_policy_from(settings)

    attendance_repo = MySQLAttendanceRepository(conn)
    term_repo = MySQLTermConfigRepository(
        conn,
        default_max_weeks=int(getattr(settings, "DEFAULT_MAX_TEACHING_WEEKS", DEFAULT_MAX_TEACHING_WEEKS)),
    )
    batch_store = MySQLBatchStore(conn)
    rate_store = MySQLRateStore(conn)

    return Container(
        conn=conn,
        attendance_repo=attendance_repo,
        term_repo=term_repo,
        batch_store=batch_store,
        rate_store=rate_store,
        status_service=AttendanceStatusService(attendance_repo, policy=policy),
        aggregation_job=AggregationJob(batch_store, policy=policy),
        range_correction_job=RangeCorrectionJob(batch_store, policy=policy),
        rate_rebuild_job=RateRebuildJob(rate_store, calculator=StandardRateCalculator()),
    )
