"""
Query & Browse Commands
------------------------

Database browsing and query commands.

Commands:
    - articles show: Display one article
    - articles list: Page through articles
    - categories list: List categories with published counts
"""
import json
import sys
import click

from folio.core.logging_manager import handle_cli_error
from folio.core.exceptions import FolioError
from folio.core.pagination import MAX_LIMIT, SORT_FIELDS, PaginationOptions
from folio.database.models import ArticleStatus
from folio.services.articles import ArticleLifecycle
from folio.services.taxonomy import TaxonomyService
from . import get_db


@click.group()
@click.pass_context
def articles(ctx: click.Context) -> None:
    """Browse articles."""
    pass


@articles.command("show")
@click.argument("article_id", type=int)
@click.option("--json", "as_json", is_flag=True, help="Print the article as JSON")
@click.pass_context
def show(ctx, article_id, as_json):
    """Display a single article with its categories and tags."""
    try:
        db = get_db(ctx)
        record = ArticleLifecycle(db, ctx.obj["logger"]).get_by_id(article_id)
        if record is None:
            click.echo(f"❌ No article with id {article_id}", err=True)
            sys.exit(1)

        if as_json:
            click.echo(json.dumps(record.to_dict(), indent=2))
            return

        taxonomy = TaxonomyService(db, ctx.obj["logger"])
        category_names = [
            c.name for c in taxonomy.list_categories() if c.id in record.category_ids
        ]
        tag_names = [t.name for t in taxonomy.list_tags() if t.id in record.tag_ids]

        click.echo(f"\n📄 [{record.id}] {record.title}")
        click.echo(f"   Status: {record.status} (version {record.version})")
        click.echo(f"   Author: {record.author_id}")
        if record.published_at:
            click.echo(f"   Published: {record.published_at.isoformat()}")
        if category_names:
            click.echo(f"   Categories: {', '.join(category_names)}")
        if tag_names:
            click.echo(f"   Tags: {', '.join(tag_names)}")
        if record.excerpt:
            click.echo(f"\n{record.excerpt}")

    except FolioError as e:
        handle_cli_error(ctx, e, "articles_show", {"article_id": article_id})


@articles.command("list")
@click.option("--status", type=click.Choice(ArticleStatus.choices()), help="Only this status")
@click.option("--author", help="Only this author's articles")
@click.option("--page", type=int, default=1, show_default=True)
@click.option(
    "--limit", type=click.IntRange(1, MAX_LIMIT), default=10, show_default=True
)
@click.option("--sort", "sort_by", type=click.Choice(SORT_FIELDS), help="Sort field")
@click.option("--asc", is_flag=True, help="Ascending order")
@click.pass_context
def list_articles(ctx, status, author, page, limit, sort_by, asc):
    """List articles, newest first."""
    try:
        lifecycle = ArticleLifecycle(get_db(ctx), ctx.obj["logger"])
        options = PaginationOptions(
            page=page, limit=limit, sort_by=sort_by, sort_order="asc" if asc else "desc"
        )
        if author:
            result = lifecycle.get_by_author(author, options)
            if status:
                click.echo("⚠️  --status is ignored with --author", err=True)
        elif status:
            result = lifecycle.get_by_status(status, options)
        else:
            result = lifecycle.get_all(options)

        if not result.data:
            click.echo("No articles found.")
            return

        for record in result.data:
            click.echo(f"[{record.id}] {record.title}  ({record.status}, {record.author_id})")
        click.echo(
            f"\nPage {result.page}/{result.total_pages} ({result.total} articles)"
        )

    except FolioError as e:
        handle_cli_error(ctx, e, "articles_list")


@click.group()
@click.pass_context
def categories(ctx: click.Context) -> None:
    """Browse categories."""
    pass


@categories.command("list")
@click.pass_context
def list_categories(ctx):
    """List categories with their published article counts."""
    try:
        records = TaxonomyService(get_db(ctx), ctx.obj["logger"]).list_categories_with_counts()
        if not records:
            click.echo("No categories.")
            return

        for record in records:
            click.echo(f"[{record.id}] {record.name} ({record.slug}): {record.article_count}")

    except FolioError as e:
        handle_cli_error(ctx, e, "categories_list")
