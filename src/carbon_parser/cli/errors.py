"""
CLI Error Handling
==================

Maps exceptions raised while running a command to a message on stderr
and a consistent exit code.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from carbon_parser.errors import CarbonError


class ExitCode(IntEnum):
    """Exit codes for the carbon-parser tool."""
    SUCCESS = 0
    SYNTAX_ERROR = 1     # Input did not parse
    INVALID_ARGS = 2     # Invalid arguments or unreadable files
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report error and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print full traceback for internal errors

    Raises:
        SystemExit: Always exits with an appropriate exit code
    """
    if isinstance(error, CarbonError):
        # Syntax errors carry their own "file:line:col: error:" prefix
        click.echo(str(error), err=True)
        sys.exit(ExitCode.SYNTAX_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: file is not valid UTF-8: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, OSError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)
