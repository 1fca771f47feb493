"""
Setup & Initialization Commands
--------------------------------

Database schema initialization commands.

Commands:
    - init: Create tables, triggers and the search index
    - reset: Drop everything and recreate (dangerous!)
"""
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database schema (safe to re-run)."""
    try:
        db = get_db(ctx)
        click.echo("🗄️  Initializing database schema...")
        db.initialize_schema()
        click.echo(f"✅ Database initialized at {db.db_path}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")


@click.command()
@click.confirmation_option(prompt="⚠️  This will DELETE all data! Are you sure?")
@click.pass_context
def reset(ctx):
    """Reset database (DANGEROUS - deletes all data!)."""
    try:
        db = get_db(ctx)
        click.echo("🗑️  Resetting database...")
        db.reset()
        click.echo("✅ Database reset complete!")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "reset")
