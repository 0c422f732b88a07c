"""CLI package for philorag.

This package provides the command-line interface using Typer.
The CLI is a thin wrapper around the commands layer.
"""

from philorag.cli.app import app, console

__all__ = ["app", "console"]
