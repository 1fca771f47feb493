"""
Maintenance & Monitoring Commands
----------------------------------

Statistics and tag-counter maintenance.

Commands:
    - stats: Display database statistics
    - tags cleanup: Delete tags with no articles
    - tags recount: Recompute usage counters from link rows
    - tags popular: Most used tags
"""
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import FolioError
from folio.services.taxonomy import TaxonomyService
from . import get_db


@click.command()
@click.pass_context
def stats(ctx):
    """Display row counts."""
    try:
        counts = get_db(ctx).get_stats()

        click.echo("\n📊 Database Statistics:")
        click.echo(f"  Articles: {counts['articles']}")
        for status in ("draft", "published", "archived"):
            click.echo(f"    {status}: {counts[status]}")
        click.echo(f"  Categories: {counts['categories']}")
        click.echo(f"  Tags: {counts['tags']}")
        click.echo(f"  Category links: {counts['category_links']}")
        click.echo(f"  Tag links: {counts['tag_links']}")

    except FolioError as e:
        handle_cli_error(ctx, e, "stats")


@click.group()
@click.pass_context
def tags(ctx: click.Context) -> None:
    """Tag maintenance."""
    pass


@tags.command("cleanup")
@click.confirmation_option(prompt="This will delete every unused tag. Continue?")
@click.pass_context
def cleanup(ctx):
    """Delete tags with a usage count of zero."""
    try:
        removed = TaxonomyService(get_db(ctx), ctx.obj["logger"]).cleanup_unused_tags()
        if removed:
            click.echo(f"🧹 Removed {removed} unused tags")
        else:
            click.echo("No unused tags found")

    except FolioError as e:
        handle_cli_error(ctx, e, "tags_cleanup")


@tags.command("recount")
@click.pass_context
def recount(ctx):
    """Recompute tag usage counters from the link table."""
    try:
        changed = TaxonomyService(get_db(ctx), ctx.obj["logger"]).recount_usage()
        if changed:
            click.echo(f"🔧 Corrected {changed} tag counters")
        else:
            click.echo("✅ All tag counters are consistent")

    except FolioError as e:
        handle_cli_error(ctx, e, "tags_recount")


@tags.command("popular")
@click.option("--limit", type=click.IntRange(min=1), default=10, show_default=True)
@click.pass_context
def popular(ctx, limit):
    """List the most used tags."""
    try:
        records = TaxonomyService(get_db(ctx), ctx.obj["logger"]).popular_tags(limit)
        if not records:
            click.echo("No tags in use.")
            return

        for record in records:
            click.echo(f"  {record.name}: {record.usage_count}")

    except FolioError as e:
        handle_cli_error(ctx, e, "tags_popular")
