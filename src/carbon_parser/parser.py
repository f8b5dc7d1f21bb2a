"""
Carbon Parser Main Module
=========================

This module provides the public parsing interface. It ties the grammar
engine, options and error reporting together:

    Source → GrammarParser(rule) → ParseTree | CarbonSyntaxError

Usage
-----
Command line:
    $ carbon-parser parse examples/fib.carbon --verbose

Programmatic:
    >>> from carbon_parser import parse_program
    >>> tree = parse_program('fn main() { return 0; }')
    >>> tree.root.rule
    <Rule.FUNCTION_DECL: 2>

Entry Rules
-----------
Any of the five entry rules can be parsed directly, by Rule or by name:

    program        zero or more function/variable declarations
    function_decl  one `fn` declaration
    var_decl       one `var` declaration, terminated by ';'
    expression     one expression
    type_name      a primitive or custom type name

The whole input must match the rule; only whitespace and comments may
follow it.

Error Handling
--------------
A failed parse raises exactly one CarbonSyntaxError (or a subclass) at the
furthest position any alternative reached. No partial tree is returned.
"""

import logging
from pathlib import Path
from typing import Optional, Union

from carbon_parser.config import ParserOptions
from carbon_parser.errors import CarbonSyntaxError
from carbon_parser.grammar import GrammarParser
from carbon_parser.rules import Rule, resolve_entry_rule
from carbon_parser.tree import ParseTree

logger = logging.getLogger(__name__)


class CarbonParser:
    """
    Carbon parser holding a fixed set of options.

    Useful when many inputs are parsed with the same filename or depth
    limit. Each call builds a fresh GrammarParser, so one instance can be
    shared freely.

    Example:
        parser = CarbonParser(ParserOptions(max_depth=128))
        tree = parser.parse_file("fib.carbon")
        print(len(tree))

    Attributes:
        options: Parser configuration options
    """

    def __init__(self, options: Optional[ParserOptions] = None):
        """
        Initialize the parser.

        Args:
            options: Parser configuration (read from the environment if None)
        """
        self.options = options or ParserOptions.from_env()

    def parse(self, rule: Union[Rule, str], text: str) -> ParseTree:
        """
        Parse text as the given entry rule.

        Args:
            rule: An entry Rule or its name ("program", "var_decl", ...)
            text: Source text

        Returns:
            ParseTree whose roots cover the matched input

        Raises:
            CarbonSyntaxError: If text does not match the rule
            ValueError: If rule is not an entry rule
        """
        entry = resolve_entry_rule(rule)
        logger.debug(f"Parsing {len(text)} characters as {entry.description}")

        try:
            tree = GrammarParser(text, self.options).parse(entry)
        except CarbonSyntaxError as e:
            logger.debug(f"Parse failed at {e.location}: {e.message}")
            raise

        node_count = sum(1 for _ in tree.walk())
        logger.debug(f"Parsed {len(tree)} root(s), {node_count} nodes")
        return tree

    def parse_source(self, text: str) -> ParseTree:
        """Parse text as a whole program."""
        return self.parse(Rule.PROGRAM, text)

    def parse_file(self, filepath: Union[str, Path], rule: Union[Rule, str] = Rule.PROGRAM) -> ParseTree:
        """
        Parse a source file.

        The file's path is used as the filename in error messages unless
        the options name one explicitly.

        Args:
            filepath: Path to the Carbon source file
            rule: Entry rule to parse the file as (default: program)

        Returns:
            ParseTree for the file contents

        Raises:
            CarbonSyntaxError: If the file does not parse
            FileNotFoundError: If the file does not exist
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")

        options = self.options
        if options.filename == ParserOptions().filename:
            options = ParserOptions(filename=str(path), max_depth=options.max_depth)

        return CarbonParser(options).parse(rule, source)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    rule: Union[Rule, str],
    text: str,
    options: Optional[ParserOptions] = None,
) -> ParseTree:
    """
    Parse text as one of the five entry rules.

    This is the primary high-level interface; the parse_* functions below
    are thin wrappers around it.

    Args:
        rule: An entry Rule or its name
        text: Source text
        options: Parser options (read from the environment if None)

    Returns:
        ParseTree for the input

    Raises:
        CarbonSyntaxError: If text does not match the rule
        ValueError: If rule is not an entry rule

    Example:
        >>> tree = parse("expression", "1 + 2 * 3")
        >>> [leaf.text for leaf in tree.leaves()]
        ['1', '+', '2', '*', '3']
    """
    return CarbonParser(options).parse(rule, text)


def parse_program(text: str, options: Optional[ParserOptions] = None) -> ParseTree:
    """Parse a whole program. An empty input yields a tree with no roots."""
    return parse(Rule.PROGRAM, text, options)


# Name kept for callers of the command-line tool's library form
parse_carbon = parse_program


def parse_function_decl(text: str, options: Optional[ParserOptions] = None) -> ParseTree:
    """Parse a single function declaration."""
    return parse(Rule.FUNCTION_DECL, text, options)


def parse_var_decl(text: str, options: Optional[ParserOptions] = None) -> ParseTree:
    """Parse a single variable declaration, including its ';'."""
    return parse(Rule.VAR_DECL, text, options)


def parse_expression(text: str, options: Optional[ParserOptions] = None) -> ParseTree:
    return parse(Rule.EXPRESSION, text, options)


def parse_type_name(text: str, options: Optional[ParserOptions] = None) -> ParseTree:
    return parse(Rule.TYPE_NAME, text, options)
