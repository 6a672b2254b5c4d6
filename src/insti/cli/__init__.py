"""Command-line interface for insti."""

from insti.cli.runner import CLIRunner

__all__ = ["CLIRunner"]
