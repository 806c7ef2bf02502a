"""Create the database and apply database/schema.sql.

    python scripts/init_db.py                  # settings from APP_ENV
    python scripts/init_db.py --env testing    # explicit settings module
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
from dotenv import load_dotenv

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import load_settings  # noqa: E402

from src.campus_attendance.campus_attendance.database.bootstrap import apply_schema, list_tables  # noqa: E402
from src.campus_attendance.campus_attendance.database.connection import DBConfig  # noqa: E402


@click.command()
@click.option("--env", "app_env", default=None, help="Overrides APP_ENV (development, testing, production).")
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=REPO_ROOT / "database" / "schema.sql",
    show_default=True,
)
def main(app_env: str | None, schema_path: Path) -> None:
    load_dotenv(REPO_ROOT / ".env", override=False)
    settings = load_settings(app_env)
    db_config = dict(settings.DB_CONFIG)

    executed = apply_schema(db_config, schema_path=schema_path)
    tables = list_tables(db_config)
    click.echo(
        f"OK: {executed} statements from {schema_path.name} -> {DBConfig.from_mapping(db_config).describe()} "
        f"({len(tables)} tables: {', '.join(tables)})"
    )


if __name__ == "__main__":
    main()
