#!/usr/bin/env python3
"""
seeder.py
---------
Load fixture data (categories, tags, articles) from YAML into a FolioDB.

Seed file format:
    categories:
      - name: Technology
        description: Software and hardware
      - Travel                     # plain string: name only
    tags:
      - python
      - name: sql
    articles:
      - title: Getting started
        content: ...
        excerpt: ...               # optional
        author_id: alice
        status: published          # draft (default), published or archived
        categories: [Technology]   # names or slugs
        tags: [python, beginners]  # created when missing

Categories are matched by slug and reused, tags go through
find-or-create, so re-seeding does not duplicate taxonomy. Articles have
no natural key and are always created.

The whole file is checked before the first write: malformed entries,
articles without author, title or content, unknown statuses and
categories that neither the file nor the database defines are rejected
up front. Each row is still committed on its own, so a storage failure
partway through leaves the rows written so far in place.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from folio.core.exceptions import NotFoundError, ValidationError
from folio.core.identity import Identity
from folio.core.logging_manager import FolioLogger, safe_logger
from folio.database.manager import FolioDB
from folio.database.models import ArticleStatus
from folio.services.articles import ArticleLifecycle
from folio.services.taxonomy import TaxonomyService
from folio.utils.slugify import slugify

SEED_SECTIONS = ("categories", "tags", "articles")


@dataclass
class SeedStats:
    """Counts of rows created by one seeding run."""

    categories: int = 0
    tags: int = 0
    articles: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "categories": self.categories,
            "tags": self.tags,
            "articles": self.articles,
        }


def load_seed_file(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Parse a YAML seed file.

    Raises:
        ValidationError: If the file is not valid YAML or not a mapping
            of the known sections
    """
    path = Path(path)
    try:
        data: Any = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in {path.name}: {e}", field="file") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError("Seed file must contain a mapping", field="file")
    unknown = sorted(set(data) - set(SEED_SECTIONS))
    if unknown:
        raise ValidationError(
            f"Unknown seed sections: {', '.join(unknown)}", field="file"
        )
    return data


def _entry_name(entry: Any, section: str) -> Dict[str, Any]:
    """Accept either a bare name or a mapping with a 'name' key."""
    if isinstance(entry, str):
        return {"name": entry}
    if isinstance(entry, dict) and "name" in entry:
        return entry
    raise ValidationError(f"Invalid {section} entry: {entry!r}", field=section)


class Seeder:
    """
    Write seed data through the services, so every invariant holds.

    Attributes:
        db: Target database
        taxonomy: TaxonomyService used for categories and tags
        articles: ArticleLifecycle used for articles
    """

    def __init__(self, db: FolioDB, logger: Optional[FolioLogger] = None) -> None:
        self.db = db
        self.logger = logger if logger is not None else db.logger
        self.taxonomy = TaxonomyService(db, self.logger)
        self.articles = ArticleLifecycle(db, self.logger)
        self._category_ids: Dict[str, int] = {}
        self._tag_ids: Dict[str, int] = {}

    def seed_file(self, path: Union[str, Path]) -> SeedStats:
        """Load and apply a YAML seed file."""
        return self.seed(load_seed_file(path))

    def seed(self, data: Dict[str, Any]) -> SeedStats:
        """
        Apply parsed seed data: categories, then tags, then articles.

        Returns:
            SeedStats with the number of newly created rows
        """
        self.validate(data)
        stats = SeedStats()
        for entry in data.get("categories") or []:
            stats.categories += self._seed_category(_entry_name(entry, "categories"))
        for entry in data.get("tags") or []:
            stats.tags += self._seed_tag(_entry_name(entry, "tags")["name"])
        for entry in data.get("articles") or []:
            self._seed_article(entry, stats)
            stats.articles += 1

        safe_logger(self.logger).log_operation("seed_completed", stats.to_dict())
        return stats

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Check parsed seed data without writing anything.

        Raises:
            ValidationError: On a malformed entry or a missing article field
            NotFoundError: If an article names a category that is neither
                in the file nor in the database
        """
        known = {
            slugify(str(_entry_name(entry, "categories")["name"]))
            for entry in data.get("categories") or []
        }
        for entry in data.get("tags") or []:
            _entry_name(entry, "tags")

        for entry in data.get("articles") or []:
            if not isinstance(entry, dict):
                raise ValidationError(f"Invalid articles entry: {entry!r}", field="articles")
            if not entry.get("author_id", entry.get("author")):
                raise ValidationError("Seed article requires author_id", field="author_id")
            for field in ("title", "content"):
                if not str(entry.get(field) or "").strip():
                    raise ValidationError(f"Seed article requires {field}", field=field)
            status = str(entry.get("status") or "draft").lower()
            if status not in ArticleStatus.choices():
                raise ValidationError(f"Invalid status '{status}'", field="status")
            for name in entry.get("categories") or []:
                slug = slugify(str(name))
                if slug in known:
                    continue
                if self.taxonomy.get_category_by_slug(slug) is None:
                    raise NotFoundError(
                        f"Category '{name}' not found", entity="category", slug=slug
                    )
                known.add(slug)

    # -------------------------------------------------------------------------

    def _seed_category(self, entry: Dict[str, Any]) -> int:
        slug = slugify(str(entry["name"]))
        existing = self.taxonomy.get_category_by_slug(slug)
        if existing is not None:
            self._category_ids[slug] = existing.id
            return 0
        record = self.taxonomy.create_category(entry["name"], entry.get("description"))
        self._category_ids[record.slug] = record.id
        return 1

    def _seed_tag(self, name: Any) -> int:
        slug = slugify(str(name))
        existed = self.taxonomy.get_tag_by_slug(slug) is not None
        record = self.taxonomy.find_or_create_tag(str(name))
        self._tag_ids[record.slug] = record.id
        return 0 if existed else 1

    def _category_id(self, name: Any) -> int:
        slug = slugify(str(name))
        if slug not in self._category_ids:
            record = self.taxonomy.get_category_by_slug(slug)
            if record is None:
                raise NotFoundError(
                    f"Category '{name}' not found", entity="category", slug=slug
                )
            self._category_ids[slug] = record.id
        return self._category_ids[slug]

    def _tag_id(self, name: Any, stats: SeedStats) -> int:
        slug = slugify(str(name))
        if slug not in self._tag_ids:
            stats.tags += self._seed_tag(name)
        return self._tag_ids[slug]

    def _seed_article(self, entry: Dict[str, Any], stats: SeedStats) -> None:
        status = str(entry.get("status") or "draft").lower()
        author = entry.get("author_id", entry.get("author"))
        data = {
            "title": entry.get("title"),
            "content": entry.get("content"),
            "excerpt": entry.get("excerpt"),
            "status": "draft" if status == "archived" else status,
            "category_ids": [self._category_id(c) for c in entry.get("categories") or []],
            "tag_ids": [self._tag_id(t, stats) for t in entry.get("tags") or []],
        }
        record = self.articles.create(data, Identity(user_id=str(author)))
        if status == "archived":
            self.articles.archive(record.id, expected_version=record.version)
