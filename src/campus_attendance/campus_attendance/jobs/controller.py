"""Scheduler entry points, exposed as Flask CLI commands.

Example crontab line::

    5 23 * * * flask --app manage aggregate-daily
"""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import date, datetime

import click
from flask import Flask

from ..common.datetime_utils import now_local, parse_iso_date, parse_iso_datetime
from ..core.constants import DEFAULT_MAX_TEACHING_WEEKS
from ..core.exceptions import DomainError
from ..term.model import TermConfig


def _echo_json(payload: dict) -> None:
    click.echo(json.dumps(payload, default=_json_default, ensure_ascii=False, sort_keys=True))


def _json_default(value):
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if hasattr(value, "value"):
        return value.value
    raise TypeError(f"not JSON serializable: {type(value)!r}")


def register(app: Flask, container) -> None:
    @app.cli.command("aggregate-daily")
    @click.option("--date", "report_date", default=None, help="Report date (YYYY-MM-DD), default today.")
    def aggregate_daily(report_date: str | None) -> None:
        """Aggregate, archive and purge the given day's sessions."""

        try:
            day = parse_iso_date(report_date) if report_date else now_local().date()
            term = container.term_repo.get_term_config()
            summary = container.aggregation_job.run_daily_aggregation(day, term)
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_json(asdict(summary))

    @app.cli.command("rebuild-range")
    @click.option("--week", "teaching_week", type=int, required=True, help="Teaching week to rebuild.")
    @click.option("--weekday", type=click.IntRange(1, 7), default=None, help="ISO weekday; all days when omitted.")
    def rebuild_range(teaching_week: int, weekday: int | None) -> None:
        """Recompute stats of an archived slot from history."""

        try:
            summary = container.range_correction_job.rebuild_aggregation_for_range(teaching_week, weekday)
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_json(asdict(summary))

    @app.cli.command("rebuild-rates")
    def rebuild_rates() -> None:
        """Rebuild the student absence rate table from scratch."""

        try:
            summary = container.rate_rebuild_job.rebuild_student_absence_rates()
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_json(asdict(summary))

    @app.cli.command("resolve-status")
    @click.option("--session", "session_id", type=int, required=True)
    @click.option("--student", "student_id", required=True)
    @click.option("--at", "at", default=None, help="Evaluation time (ISO), default now.")
    def resolve_status(session_id: int, student_id: str, at: str | None) -> None:
        """Print the resolved attendance state for one student."""

        try:
            now = parse_iso_datetime(at) if at else None
            state = container.status_service.resolve_for_student(session_id=session_id, student_id=student_id, now=now)
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_json(state.to_dict())

    @app.cli.command("set-term")
    @click.option("--start", "start_date", required=True, help="First day of teaching week 1 (YYYY-MM-DD).")
    @click.option("--max-weeks", type=click.IntRange(min=1), default=DEFAULT_MAX_TEACHING_WEEKS, show_default=True)
    def set_term(start_date: str, max_weeks: int) -> None:
        """Store the term calendar used to map dates to teaching weeks."""

        try:
            term = TermConfig(start_date=parse_iso_date(start_date), max_teaching_weeks=max_weeks)
            container.term_repo.save_term_config(term)
        except DomainError as exc:
            raise click.ClickException(str(exc)) from exc
        _echo_json(asdict(term))
