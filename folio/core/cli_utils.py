#!/usr/bin/env python3
"""
cli_utils.py
-------------------
Shared CLI utilities for Folio commands.

Functions:
    setup_logger: Initialize FolioLogger for CLI operations

Usage:
    from folio.core.cli_utils import setup_logger

    logger = setup_logger(log_dir, "search")
"""
from pathlib import Path

from folio.core.logging_manager import FolioLogger


def setup_logger(log_dir: Path, component_name: str) -> FolioLogger:
    """
    Setup logging for CLI operations.

    Creates the operations log directory if it doesn't exist and initializes
    a FolioLogger instance for the specified component.

    Args:
        log_dir: Base log directory (typically from paths.LOG_DIR)
        component_name: Component identifier for logging (e.g. 'database', 'search')

    Returns:
        Configured FolioLogger instance

    Examples:
        >>> from folio.core.paths import LOG_DIR
        >>> logger = setup_logger(LOG_DIR, "search")
        >>> logger.log_info("Rebuilding index...")
    """
    operations_log_dir = Path(log_dir) / "operations"
    operations_log_dir.mkdir(parents=True, exist_ok=True)
    return FolioLogger(operations_log_dir, component_name=component_name)
