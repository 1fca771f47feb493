#!/usr/bin/env python3
"""
slugify.py
----------
Slug derivation for category and tag names.

A slug is a deterministic, URL-safe transform of a human-readable name. It
is regenerated whenever the name changes and stored alongside it with a
unique constraint.

Key Features:
    - Accent/diacritic folding to ASCII (Café → cafe)
    - Lowercase transformation
    - Every run of non-alphanumeric characters collapses to one hyphen
    - Leading/trailing hyphens stripped
    - Maximum length enforcement

Usage:
    from folio.utils.slugify import slugify

    slugify("Machine Learning & AI")  # "machine-learning-ai"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import re
import unicodedata

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = 200) -> str:
    """
    Convert a name to its slug.

    Args:
        text: Input text to slugify
        max_length: Maximum slug length (default 200)

    Returns:
        Slug string; empty if the name holds no ASCII-foldable alphanumerics

    Examples:
        >>> slugify("Web Development")
        'web-development'
        >>> slugify("  Café  Société ")
        'cafe-societe'
        >>> slugify("C++ / Rust")
        'c-rust'
        >>> slugify("!!!")
        ''
    """
    if not text:
        return ""

    # Decompose accents, then drop anything outside ASCII
    text = unicodedata.normalize("NFKD", text)
    text = text.encode("ascii", "ignore").decode("ascii")

    text = _NON_ALNUM.sub("-", text.lower()).strip("-")

    if len(text) > max_length:
        text = text[:max_length].rstrip("-")

    return text
