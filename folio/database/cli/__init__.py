#!/usr/bin/env python3
"""
Folio Database Management CLI
-----------------------------

Modular command-line interface for database management.

This module provides the main CLI group and shared context setup
for all database commands.

Command Structure:
    - Setup & Initialization (init, reset)
    - Seeding (seed)
    - Query & Browse (articles, categories)
    - Maintenance (stats, tags)

Usage:
    # Get general help
    folio-db --help

    # Get help for a specific command group
    folio-db articles --help

    # Get help for a specific command
    folio-db articles show --help
"""
import click
from pathlib import Path

from folio.core.cli_utils import setup_logger
from folio.core.paths import DB_PATH, LOG_DIR
from folio.database.manager import FolioDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, log_dir, verbose):
    """Folio Database Management CLI"""
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "database")


def get_db(ctx) -> FolioDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = FolioDB(
            db_path=ctx.obj["db_path"],
            logger=ctx.obj["logger"],
        )
    return ctx.obj["db"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init, reset  # noqa: E402
from .seed import seed  # noqa: E402
from .query import articles, categories  # noqa: E402
from .maintenance import stats, tags  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(reset)
cli.add_command(seed)
cli.add_command(stats)

# Register command groups
cli.add_command(articles)
cli.add_command(categories)
cli.add_command(tags)


if __name__ == "__main__":
    cli(obj={})
