"""Command-line interface for sketchify.

This module provides the CLI using Typer with rich output for
user-friendly feedback.

Key features:
- Path data from arguments or from a JSON/text file
- Per-path region summary table
- JSON output for downstream sketch generation
- Verbose/quiet output modes
"""

from sketchify.cli.app import app, cli, main

__all__ = ["app", "cli", "main"]
