"""CLI package for wpfleet.

This package contains the Typer application and all subcommands.
"""

from wpfleet.cli.main import app

__all__ = ["app"]
