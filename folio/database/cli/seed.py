"""
Seeding Commands
----------------

Load fixture data from a YAML file.

Commands:
    - seed: Create categories, tags and articles from FILE
"""
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import FolioError
from folio.database.seeder import Seeder
from . import get_db


@click.command()
@click.argument("seed_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
def seed(ctx, seed_file):
    """
    Seed the database from a YAML fixture file.

    The whole file is validated before anything is written.
    """
    try:
        db = get_db(ctx)
        db.initialize_schema()
        click.echo(f"🌱 Seeding from {seed_file}...")
        stats = Seeder(db, ctx.obj["logger"]).seed_file(seed_file)

        click.echo("\n✅ Seed complete:")
        for section, count in stats.to_dict().items():
            click.echo(f"  • {section}: {count} created")

    except FolioError as e:
        handle_cli_error(ctx, e, "seed", {"file": seed_file})
