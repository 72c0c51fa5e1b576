"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum

import typer

from wpfleet.core.config import FleetConfig
from wpfleet.core.guard import ExecutionGuard, PsCensus

# Exit code for runs stopped by SIGINT/SIGTERM
EXIT_INTERRUPTED = 130


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def get_config(ctx: typer.Context) -> FleetConfig:
    """Return the configuration loaded by the main callback.

    Falls back to defaults when a command is invoked without the main
    callback having populated the context.
    """
    obj = ctx.obj if isinstance(ctx.obj, dict) else {}
    config = obj.get("config")
    return config if isinstance(config, FleetConfig) else FleetConfig()


def build_guard(config: FleetConfig) -> ExecutionGuard:
    """Create the single-instance guard for commands that write shared state."""
    return ExecutionGuard(
        config.effective_lock_path,
        census=PsCensus(),
        grace_seconds=config.grace_seconds,
    )
