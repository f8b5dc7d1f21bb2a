"""
Carbon Parser Command-Line Interface
====================================

This package provides the `carbon-parser` command:

- **parse**: Parse a source file and optionally print its parse tree
- **tokens**: Print the lossless token stream of a source file
- **authors**: Show author and version information

The tool is a Click-based group with per-command help and a single
exception-to-exit-code mapping in cli.errors.
"""

__all__ = ["main"]
