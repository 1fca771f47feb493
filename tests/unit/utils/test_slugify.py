"""Tests for slug derivation."""
import pytest

from folio.utils.slugify import slugify


class TestSlugify:

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Web Development", "web-development"),
            ("Machine Learning & AI", "machine-learning-ai"),
            ("  Café  Société ", "cafe-societe"),
            ("C++ / Rust", "c-rust"),
            ("--Already-Slugged--", "already-slugged"),
            ("Python3", "python3"),
        ],
    )
    def test_examples(self, name, expected):
        assert slugify(name) == expected

    @pytest.mark.parametrize("name", ["", "!!!", "日本語"])
    def test_no_ascii_alphanumerics_gives_empty(self, name):
        assert slugify(name) == ""

    def test_max_length_does_not_end_with_hyphen(self):
        assert slugify("abcd efgh", max_length=5) == "abcd"

    def test_is_idempotent(self):
        slug = slugify("Some Category Name")
        assert slugify(slug) == slug
