"""Utility modules for dirpurge.

This module exports commonly used utility functions.
"""

from dirpurge.utils.formatting import (
    console,
    err_console,
    format_mb,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from dirpurge.utils.shell import CommandResult, command_exists, first_available, run_command

__all__ = [
    "CommandResult",
    "command_exists",
    "console",
    "err_console",
    "first_available",
    "format_mb",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
    "run_command",
]
