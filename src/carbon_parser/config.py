"""
Carbon Parser Configuration
===========================

Parser options come from:
- Default values (defined here)
- Keyword arguments from the caller
- Environment variables, via ParserOptions.from_env()

Environment Variables
---------------------
CARBON_PARSER_MAX_DEPTH: Maximum expression nesting depth (integer)
CARBON_PARSER_FILENAME: Filename reported in error messages
"""

from dataclasses import dataclass
import logging
import os

logger = logging.getLogger(__name__)


# Nested expressions recurse through the grammar a handful of frames per
# level, so this stays well inside Python's default recursion limit.
DEFAULT_MAX_DEPTH = 64


@dataclass
class ParserOptions:
    """
    Options for a single parse call.

    Attributes:
        filename: Name used in error locations (default: "<input>")
        max_depth: Maximum nesting of expressions inside parentheses or
            call arguments before NestingDepthError is raised. Zero or a
            negative value disables the check.
    """
    filename: str = "<input>"
    max_depth: int = DEFAULT_MAX_DEPTH

    @classmethod
    def from_env(cls) -> "ParserOptions":
        """
        Create ParserOptions from environment variables.

        Invalid values are ignored and the default kept.

        Returns:
            ParserOptions with values from environment variables
        """
        options = cls()

        if depth := os.environ.get("CARBON_PARSER_MAX_DEPTH"):
            try:
                options.max_depth = int(depth)
            except ValueError:
                logger.warning(f"Ignoring invalid CARBON_PARSER_MAX_DEPTH={depth!r}")

        if filename := os.environ.get("CARBON_PARSER_FILENAME"):
            options.filename = filename

        return options
