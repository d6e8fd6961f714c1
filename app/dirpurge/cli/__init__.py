"""CLI package for dirpurge.

This package contains the Typer application, prompts and display helpers.
"""

from dirpurge.cli.main import app

__all__ = ["app"]
