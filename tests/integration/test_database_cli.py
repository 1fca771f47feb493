#!/usr/bin/env python3
"""
Integration tests for the database CLI (folio-db).

Tests init, seeding, statistics, browsing and tag maintenance against a
temporary database.
"""
import json

import pytest
import yaml
from click.testing import CliRunner

from folio.database.cli import cli

SEED_DATA = {
    "categories": [
        {"name": "Technology", "description": "Software and hardware"},
        "Travel",
    ],
    "tags": ["python", {"name": "sql"}, "unused"],
    "articles": [
        {
            "title": "Getting started with Python",
            "content": "Python is a friendly language.",
            "author_id": "alice",
            "status": "published",
            "categories": ["Technology"],
            "tags": ["python", "beginners"],
        },
        {
            "title": "Query tuning",
            "content": "Indexes matter.",
            "author": "bob",
            "status": "published",
            "categories": ["technology"],
            "tags": ["sql"],
        },
        {
            "title": "Lisbon notes",
            "content": "Trams and hills.",
            "author_id": "alice",
            "categories": ["Travel"],
        },
        {
            "title": "Old itinerary",
            "content": "Superseded.",
            "author_id": "alice",
            "status": "archived",
        },
    ],
}


class TestDatabaseCLI:
    """Test database CLI commands with a temporary database."""

    @pytest.fixture
    def runner(self):
        """Create Click test runner."""
        return CliRunner()

    @pytest.fixture
    def test_dirs(self, tmp_path):
        """Create temporary paths for testing."""
        dirs = {
            "db_path": tmp_path / "test.db",
            "log_dir": tmp_path / "logs",
            "seed_file": tmp_path / "seed.yaml",
        }
        dirs["seed_file"].write_text(yaml.safe_dump(SEED_DATA), encoding="utf-8")
        return dirs

    def invoke_cli(self, runner, test_dirs, args, **kwargs):
        """Helper to invoke CLI with test configuration."""
        base_args = [
            "--db-path", str(test_dirs["db_path"]),
            "--log-dir", str(test_dirs["log_dir"]),
        ]
        return runner.invoke(cli, base_args + args, **kwargs)

    @pytest.fixture
    def seeded(self, runner, test_dirs):
        result = self.invoke_cli(runner, test_dirs, ["seed", str(test_dirs["seed_file"])])
        assert result.exit_code == 0, result.output
        return result

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Database Management" in result.output
        assert "seed" in result.output

    def test_init_command(self, runner, test_dirs):
        result = self.invoke_cli(runner, test_dirs, ["init"])
        assert result.exit_code == 0
        assert "Initializing database schema" in result.output
        assert "Database initialized" in result.output
        assert test_dirs["db_path"].exists()

    def test_init_is_idempotent(self, runner, test_dirs):
        self.invoke_cli(runner, test_dirs, ["init"])
        result = self.invoke_cli(runner, test_dirs, ["init"])
        assert result.exit_code == 0

    def test_seed_counts(self, seeded):
        assert "Seed complete" in seeded.output
        assert "categories: 2 created" in seeded.output
        # python, sql, unused, plus beginners created on the fly
        assert "tags: 4 created" in seeded.output
        assert "articles: 4 created" in seeded.output

    def test_reseed_does_not_duplicate_taxonomy(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["seed", str(test_dirs["seed_file"])])
        assert result.exit_code == 0
        assert "categories: 0 created" in result.output
        assert "tags: 0 created" in result.output
        assert "articles: 4 created" in result.output

    def test_seed_unknown_category_fails(self, runner, test_dirs, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text(
            yaml.safe_dump(
                {"articles": [{"title": "T", "content": "C", "author_id": "a", "categories": ["Nope"]}]}
            ),
            encoding="utf-8",
        )
        result = self.invoke_cli(runner, test_dirs, ["seed", str(bad)])
        assert result.exit_code == 1
        assert "not_found" in result.output

    def test_seed_invalid_yaml_fails(self, runner, test_dirs, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("articles: [unclosed", encoding="utf-8")
        result = self.invoke_cli(runner, test_dirs, ["seed", str(bad)])
        assert result.exit_code == 1
        assert "validation" in result.output

    def test_stats(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["stats"])
        assert result.exit_code == 0
        assert "Articles: 4" in result.output
        assert "published: 2" in result.output
        assert "draft: 1" in result.output
        assert "archived: 1" in result.output
        assert "Categories: 2" in result.output
        assert "Tags: 4" in result.output

    def test_articles_list(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "list"])
        assert result.exit_code == 0
        assert "Getting started with Python" in result.output
        assert "Page 1/1 (4 articles)" in result.output

    def test_articles_list_filters(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "list", "--status", "published"])
        assert "(2 articles)" in result.output
        assert "Lisbon notes" not in result.output

        result = self.invoke_cli(runner, test_dirs, ["articles", "list", "--author", "bob"])
        assert "Query tuning" in result.output
        assert "(1 articles)" in result.output

    def test_articles_list_rejects_bad_limit(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "list", "--limit", "500"])
        assert result.exit_code != 0

    def test_articles_show(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "show", "1"])
        assert result.exit_code == 0
        assert "Getting started with Python" in result.output
        assert "Categories: Technology" in result.output
        assert "Tags: beginners, python" in result.output or "Tags: python, beginners" in result.output

    def test_articles_show_json(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "show", "2", "--json"])
        assert result.exit_code == 0
        payload = json.loads(result.output)
        assert payload["title"] == "Query tuning"
        assert payload["author_id"] == "bob"
        assert payload["status"] == "published"

    def test_articles_show_missing(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["articles", "show", "99"])
        assert result.exit_code == 1
        assert "No article with id 99" in result.output

    def test_categories_list(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["categories", "list"])
        assert result.exit_code == 0
        assert "Technology (technology): 2" in result.output
        assert "Travel (travel): 0" in result.output

    def test_tags_popular(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["tags", "popular"])
        assert result.exit_code == 0
        assert "python: 1" in result.output
        assert "unused" not in result.output

    def test_tags_recount_consistent(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["tags", "recount"])
        assert result.exit_code == 0
        assert "All tag counters are consistent" in result.output

    def test_tags_cleanup(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["tags", "cleanup"], input="y\n")
        assert result.exit_code == 0
        assert "Removed 1 unused tags" in result.output

        result = self.invoke_cli(runner, test_dirs, ["tags", "cleanup", "--yes"])
        assert "No unused tags found" in result.output

    def test_tags_cleanup_aborted(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["tags", "cleanup"], input="n\n")
        assert result.exit_code == 1
        stats = self.invoke_cli(runner, test_dirs, ["stats"])
        assert "Tags: 4" in stats.output

    def test_reset(self, runner, test_dirs, seeded):
        result = self.invoke_cli(runner, test_dirs, ["reset", "--yes"])
        assert result.exit_code == 0
        assert "Database reset complete" in result.output

        stats = self.invoke_cli(runner, test_dirs, ["stats"])
        assert "Articles: 0" in stats.output
