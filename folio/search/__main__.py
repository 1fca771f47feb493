#!/usr/bin/env python3
"""
Main entry point for the search CLI when run as a module.

Usage:
    python -m folio.search.cli [options] [command]
"""
from .cli import cli

if __name__ == "__main__":
    cli(obj={})
