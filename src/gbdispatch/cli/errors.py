"""
Unified CLI Error Handling
==========================

Provides consistent error messages and exit codes for the gbdgen tool.

A broken instruction table and an opcode the generator cannot dispatch
are both user-facing failures (exit code 1), but they are reported
differently: table errors point at the table file, generation errors
carry the opcode context and hint of the failing operand.

Copyright (c) 2025-2026 Hugo José Pinto & Contributors
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from gbdispatch.errors import DispatchError, GenerationError, TableError


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    GENERATION_ERROR = 1  # Table or dispatch generation error
    INVALID_ARGS = 2      # Invalid arguments or missing files
    INTERNAL_ERROR = 3    # Unexpected internal error


def format_dispatch_error(error: DispatchError) -> str:
    """
    Format a table or generation error for the terminal.

    Args:
        error: The error raised while loading or generating

    Returns:
        The message, prefixed by the kind of failure
    """
    if isinstance(error, TableError):
        return (
            f"Table error: {error}\n"
            f"  (fix the instruction table or pass another one with -t/--table)"
        )
    if isinstance(error, GenerationError):
        return f"Generation error: {error}"
    return f"Error: {error}"


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Unified exception handler for CLI commands.

    Formats the error message appropriately, optionally prints traceback
    in verbose mode, and exits with the correct exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, DispatchError):
        click.echo(format_dispatch_error(error), err=True)
        sys.exit(ExitCode.GENERATION_ERROR)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        # Unexpected internal error
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
