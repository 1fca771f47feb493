#!/usr/bin/env python3
"""
cli.py
------
Standalone CLI for full-text search, suggestions and related articles.

Commands:
    folio-search query "search text" [options]
    folio-search suggest PARTIAL
    folio-search related ARTICLE_ID
    folio-search reindex

Examples:
    # Simple text search
    folio-search query "python tips"

    # With filters
    folio-search query "release" --tag 3 --from 2024-01-01

    # Drafts too, with an empty query listing everything
    folio-search query "" --status draft --match-all
"""
import json
import click
from pathlib import Path
from typing import Optional, Tuple

from folio.core.paths import DB_PATH, LOG_DIR
from folio.core.cli_utils import setup_logger
from folio.core.exceptions import FolioError
from folio.core.logging_manager import handle_cli_error
from folio.database.manager import FolioDB
from folio.database.models import ArticleStatus
from .query import EmptyQueryPolicy, SearchFilters
from .related import DEFAULT_RELATED_LIMIT, RelatedContentMatcher
from .search_engine import DEFAULT_SEARCH_LIMIT, RelevanceEngine
from .search_index import SUGGESTION_LIMIT, SearchIndexManager


@click.group()
@click.option("--db-path", type=click.Path(), default=str(DB_PATH), help="Path to database file")
@click.option("--log-dir", type=click.Path(), default=str(LOG_DIR), help="Directory for log files")
@click.option("-v", "--verbose", is_flag=True, help="Show detailed errors and tracebacks")
@click.pass_context
def cli(ctx: click.Context, db_path: str, log_dir: str, verbose: bool) -> None:
    """
    Full-text search over published articles.

    Ranks matches with SQLite FTS5 (title weighs more than content, which
    weighs more than the excerpt) and filters by status, author, publish
    date, categories and tags.

    Examples:
        folio-search query "python tips"
        folio-search suggest pyth
        folio-search related 12
    """
    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["verbose"] = verbose
    ctx.obj["logger"] = setup_logger(Path(log_dir), "search")


def get_db(ctx: click.Context) -> FolioDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = FolioDB(ctx.obj["db_path"], logger=ctx.obj["logger"])
    return ctx.obj["db"]


@cli.command("query")
@click.argument("text", nargs=-1)
@click.option(
    "--status",
    type=click.Choice(ArticleStatus.choices()),
    help="Article status (default: published)",
)
@click.option("--author", help="Only articles by this author id")
@click.option("--from", "date_from", help="Published on or after (ISO date)")
@click.option("--to", "date_to", help="Published on or before (ISO date)")
@click.option("--category", "categories", type=int, multiple=True, help="Category id (repeatable)")
@click.option("--tag", "tags", type=int, multiple=True, help="Tag id (repeatable)")
@click.option("--limit", type=int, default=DEFAULT_SEARCH_LIMIT, show_default=True, help="Maximum results")
@click.option("--match-all", is_flag=True, help="An empty query lists every matching article")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def search_query(
    ctx: click.Context,
    text: Tuple[str, ...],
    status: Optional[str],
    author: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
    categories: Tuple[int, ...],
    tags: Tuple[int, ...],
    limit: int,
    match_all: bool,
    as_json: bool,
) -> None:
    """
    Search articles with full-text search and filters.

    Examples:
        folio-search query "alice therapy"
        folio-search query release --category 2 --category 5
        folio-search query "" --match-all --author alice
    """
    try:
        filters = SearchFilters(
            status=status,
            author_id=author,
            date_from=date_from,
            date_to=date_to,
            category_ids=list(categories),
            tag_ids=list(tags),
        )
        policy = EmptyQueryPolicy.MATCH_ALL if match_all else EmptyQueryPolicy.MATCH_NONE
        engine = RelevanceEngine(get_db(ctx), empty_query=policy, logger=ctx.obj["logger"])
        results = engine.search(" ".join(text), filters, limit=limit)

        if as_json:
            click.echo(json.dumps([r.to_dict() for r in results], indent=2))
            return

        if not results:
            click.echo("No results found.")
            return

        click.echo(f"Found {len(results)} results:\n")
        for result in results:
            article = result.article
            published = article.published_at.date().isoformat() if article.published_at else "-"
            click.echo(f"[{article.id}] {article.title}  (score: {result.score:.4f})")
            click.echo(f"    {article.status} | {published} | by {article.author_id}")
            if result.matched_fields:
                click.echo(f"    matched: {', '.join(result.matched_fields)}")

    except FolioError as e:
        handle_cli_error(ctx, e, "search_query", {"query": " ".join(text)})


@cli.command()
@click.argument("partial")
@click.option("--limit", type=int, default=SUGGESTION_LIMIT, show_default=True, help="Maximum suggestions")
@click.pass_context
def suggest(ctx: click.Context, partial: str, limit: int) -> None:
    """Suggest title terms starting with PARTIAL."""
    try:
        engine = RelevanceEngine(get_db(ctx), logger=ctx.obj["logger"])
        for term in engine.suggest(partial, limit=limit):
            click.echo(term)
    except FolioError as e:
        handle_cli_error(ctx, e, "suggest", {"partial": partial})


@cli.command()
@click.argument("article_id", type=int)
@click.option("--limit", type=int, default=DEFAULT_RELATED_LIMIT, show_default=True, help="Maximum results")
@click.pass_context
def related(ctx: click.Context, article_id: int, limit: int) -> None:
    """List published articles sharing categories or tags with ARTICLE_ID."""
    try:
        matcher = RelatedContentMatcher(get_db(ctx), logger=ctx.obj["logger"])
        results = matcher.find_related_scored(article_id, limit=limit)

        if not results:
            click.echo("No related articles.")
            return

        for result in results:
            click.echo(
                f"[{result.article.id}] {result.article.title}  (shared: {result.match_score})"
            )
    except FolioError as e:
        handle_cli_error(ctx, e, "related", {"article_id": article_id})


@cli.command()
@click.pass_context
def reindex(ctx: click.Context) -> None:
    """Rebuild the full-text index from the articles table."""
    try:
        db = get_db(ctx)
        click.echo("🔄 Rebuilding search index...")
        count = SearchIndexManager(db.engine, ctx.obj["logger"]).rebuild_index()
        click.echo(f"✅ Indexed {count} articles")
    except FolioError as e:
        handle_cli_error(ctx, e, "reindex")


if __name__ == "__main__":
    cli(obj={})
