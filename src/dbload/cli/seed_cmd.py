"""Seed CLI command: load a YAML file into the database."""

import logging
from pathlib import Path

import click
from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError

from dbload.config import LOG_LEVELS, SeedConfig
from dbload.seed import SeedError, SeedFileError, SeedRunner, load_seed_file


def _configure_logging(level: str) -> None:
    if level.upper() not in LOG_LEVELS:
        _fail(f"Error: unknown log level {level!r} (expected one of: {', '.join(LOG_LEVELS)})")
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _fail(message: str) -> None:
    click.echo(click.style(message, fg="red"), err=True)
    raise SystemExit(1)


@click.command()
@click.option(
    "--file",
    "seed_file",
    default=None,
    type=click.Path(path_type=Path),
    help="Path to YAML seed file (default: $DBLOAD_FILE or seed.yaml).",
)
@click.option(
    "--database-url",
    default=None,
    help="Database URL (default: $DATABASE_URL).",
)
@click.option(
    "--dry-run",
    is_flag=True,
    default=False,
    help="Print the INSERT statements instead of executing them.",
)
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (default: $DBLOAD_LOG_LEVEL or WARNING).",
)
def run(seed_file: Path | None, database_url: str | None, dry_run: bool, log_level: str | None):
    """Insert the rows of a seed file."""
    config = SeedConfig.from_env()
    if seed_file is not None:
        config.seed_file = seed_file
    if database_url:
        config.database_url = database_url
    if log_level:
        config.log_level = log_level
    _configure_logging(config.log_level)

    if not dry_run and not config.database_url:
        _fail("Error: DATABASE_URL is required (or pass --database-url / --dry-run)")

    try:
        data = load_seed_file(config.seed_file)
        runner = SeedRunner()
        statements = runner.prepare(data)
    except (SeedFileError, SeedError) as e:
        _fail(f"Error: {e}")

    if dry_run:
        for statement in statements:
            click.echo(statement.describe())
        click.echo(f"\n{len(statements)} statement(s) across {len(data)} table(s) (dry run).")
        return

    try:
        engine = create_engine(config.sqlalchemy_url)
    except (SQLAlchemyError, ImportError) as e:
        _fail(f"Error: cannot use database URL: {e}")

    for table, rows in data.items():
        click.echo(f"Seeding table: {table} ({len(rows)} rows)")

    try:
        inserted = runner.execute(engine, statements)
    except SQLAlchemyError as e:
        _fail(f"Error: insert failed, nothing was written: {e}")
    finally:
        engine.dispose()

    click.echo(
        click.style(
            f"Seed data loaded successfully ({inserted} of {len(statements)} rows inserted).",
            fg="green",
        )
    )
