"""Utility modules for wpfleet.

This module exports commonly used utility functions.
"""

from wpfleet.utils.formatting import (
    console,
    create_sites_table,
    err_console,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from wpfleet.utils.shell import CommandResult, command_exists, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "create_sites_table",
    "err_console",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
