"""CLI commands for wpfleet.

This package contains all subcommand implementations.
"""

from wpfleet.cli.commands import config, discover, run, sites

__all__ = ["config", "discover", "run", "sites"]
