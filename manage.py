"""Flask CLI entry point.

    flask --app manage aggregate-daily --date 2025-03-03
    flask --app manage rebuild-range --week 3 --weekday 1
    flask --app manage rebuild-rates
"""

from src.campus_attendance.campus_attendance.main import create_app

app = create_app()
