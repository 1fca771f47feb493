#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the Folio project.

Every path the package writes to is defined here as a Path object, relative
to the project root, and can be redirected with an environment variable:

    FOLIO_DATA_DIR  -> DATA_DIR (default: ROOT/data)
    FOLIO_DB_PATH   -> DB_PATH  (default: DATA_DIR/folio.db)
    FOLIO_LOG_DIR   -> LOG_DIR  (default: ROOT/logs)

The project structure:
    ROOT/
    ├── folio/         # Package code
    ├── data/          # SQLite database
    └── logs/          # Application logs

CLI commands accept ``--db-path`` / ``--log-dir`` options that take
precedence over both.
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
from pathlib import Path
from typing import Optional


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/folio/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root
    """
    # paths.py -> core/ -> folio/ -> ROOT/
    return Path(__file__).resolve().parent.parent.parent


def _env_path(name: str, default: Path) -> Path:
    """Return the path in environment variable ``name``, or ``default``."""
    value: Optional[str] = os.environ.get(name)
    if value and value.strip():
        return Path(value.strip()).expanduser()
    return default


# ----- Project directory -----
ROOT: Path = _get_project_root()
DATA_DIR: Path = _env_path("FOLIO_DATA_DIR", ROOT / "data")

# --- Database ---
DB_PATH: Path = _env_path("FOLIO_DB_PATH", DATA_DIR / "folio.db")

# ---- Logs ----
LOG_DIR: Path = _env_path("FOLIO_LOG_DIR", ROOT / "logs")
