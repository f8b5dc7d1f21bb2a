"""
carbon-parser - Carbon Parser Command-Line Interface
====================================================

This module implements the command-line interface for the Carbon parser.

Commands
--------
- **parse**: Parse a source file, report success or the syntax error
- **tokens**: Print the token stream of a source file
- **authors**: Show author and version information

Usage Examples
--------------
Check that a file parses:
    $ carbon-parser parse hello.carbon

Show the parse tree:
    $ carbon-parser parse hello.carbon --verbose

Parse a file holding a single expression:
    $ carbon-parser parse --rule expression expr.txt

Trace the parser:
    $ carbon-parser parse --debug hello.carbon
"""

import logging
from pathlib import Path
from typing import Optional

import click

from carbon_parser import __author__, __version__
from carbon_parser.config import ParserOptions
from carbon_parser.errors import CarbonError
from carbon_parser.lexer import TokenKind, tokenize
from carbon_parser.parser import CarbonParser
from carbon_parser.rules import ENTRY_RULES
from carbon_parser.tree import TreePrinter
from carbon_parser.cli.errors import handle_cli_exception


TRIVIA_KINDS = (TokenKind.WHITESPACE, TokenKind.COMMENT)


def read_source(path: Path) -> str:
    """Read a UTF-8 source file; errors propagate to the caller."""
    return path.read_text(encoding="utf-8")


def setup_logging(debug: bool) -> None:
    """Send parser debug logging to stderr when requested."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s: %(name)s: %(message)s",
        )


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="carbon-parser")
def main() -> None:
    """
    A parser for the Carbon language.

    \b
    Commands:
      parse    Parse a source file
      tokens   Print the token stream of a source file
      authors  Show author information

    \b
    Examples:
      carbon-parser parse hello.carbon
      carbon-parser parse -v hello.carbon
      carbon-parser tokens hello.carbon
    """
    pass


# =============================================================================
# Parse Command
# =============================================================================

@main.command("parse")
@click.argument(
    "file",
    type=click.Path(path_type=Path),
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Print the parse tree",
)
@click.option(
    "-r", "--rule",
    type=click.Choice(list(ENTRY_RULES)),
    default="program",
    show_default=True,
    help="Entry rule to parse the file as",
)
@click.option(
    "--max-depth",
    type=int,
    default=None,
    help="Maximum expression nesting depth (default: 64, or CARBON_PARSER_MAX_DEPTH)",
)
@click.option(
    "--debug",
    is_flag=True,
    help="Log parser activity to stderr",
)
def cmd_parse(
    file: Path,
    verbose: bool,
    rule: str,
    max_depth: Optional[int],
    debug: bool,
) -> None:
    """
    Parse a Carbon source file.

    FILE is read as UTF-8 and must match the chosen entry rule in full.
    On a syntax error the located message is printed to stderr and the
    exit status is 1; an unreadable file gives exit status 2.

    \b
    Example:
      carbon-parser parse -v examples/fib.carbon
    """
    setup_logging(debug)

    try:
        content = read_source(file)
    except (OSError, UnicodeDecodeError) as e:
        handle_cli_exception(e, verbose=debug)

    click.echo(f"Parsing file: {file}")
    click.echo(f"Size: {len(content.encode('utf-8'))} bytes")
    click.echo()

    options = ParserOptions.from_env()
    options.filename = str(file)
    if max_depth is not None:
        options.max_depth = max_depth

    try:
        tree = CarbonParser(options).parse(rule, content)
    except CarbonError as e:
        click.echo("Parse error:")
        handle_cli_exception(e, verbose=debug)

    click.echo("Parsing successful!")

    if verbose:
        click.echo()
        click.echo("Parse tree:")
        click.echo("=" * 60)
        output = TreePrinter().print(tree)
        if output:
            click.echo(output)


# =============================================================================
# Tokens Command
# =============================================================================

@main.command("tokens")
@click.argument(
    "file",
    type=click.Path(path_type=Path),
)
@click.option(
    "--trivia/--no-trivia",
    default=False,
    show_default=True,
    help="Include whitespace and comment tokens",
)
def cmd_tokens(file: Path, trivia: bool) -> None:
    """
    Print the token stream of a Carbon source file.

    One token per line: its span, kind and text. Unrecognized input is
    shown as ERROR tokens rather than stopping the listing.

    \b
    Output format:
          0..3     KEYWORD         'var'
          4..5     IDENTIFIER      'x'
    """
    try:
        content = read_source(file)
    except (OSError, UnicodeDecodeError) as e:
        handle_cli_exception(e)

    for token in tokenize(content):
        if not trivia and token.kind in TRIVIA_KINDS:
            continue
        span = f"{token.start}..{token.end}"
        click.echo(f"{span:>12}  {token.kind.name:<15} {token.text!r}")


# =============================================================================
# Authors Command
# =============================================================================

@main.command("authors")
def cmd_authors() -> None:
    """Show author and version information."""
    click.echo(f"Carbon Parser v{__version__}")
    click.echo(f"Author: {__author__}")
    click.echo()
    click.echo("Parser for Google's Carbon programming language")
    click.echo("Built with Python and Click")


if __name__ == "__main__":
    main()
