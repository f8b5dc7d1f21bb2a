"""
Carbon Parser - PEG Parser for a Subset of the Carbon Language
==============================================================

This package parses a small Carbon-like language: function declarations
with typed parameters and optional return types, variable declarations
with optional initializers, return and expression statements, and
expressions over seven precedence levels with function calls and
literals.

The result is a concrete parse tree of rule-labelled spans over the
original text; no semantic analysis is performed.

Main Components
---------------
- **parser**: Entry points (parse, parse_program, ...) and CarbonParser
- **grammar**: Ordered-choice grammar engine with furthest-failure errors
- **lexer**: Token recognizers and a lossless tokenize() for highlighters
- **precedence**: Folding of flat operator sequences into nested trees
- **tree**: ParseNode, ParseTree and TreePrinter
- **errors**: CarbonError hierarchy with located, hinted messages

Quick Start
-----------
Parse a program:
    >>> from carbon_parser import parse_program
    >>> tree = parse_program('fn add(a: i32, b: i32) -> i32 { return a + b; }')
    >>> [node.rule.name for node in tree]
    ['FUNCTION_DECL']

Parse a fragment:
    >>> from carbon_parser import parse
    >>> parse("type_name", "String").root.text
    'String'

Or use the command-line tool:
    $ carbon-parser parse hello.carbon --verbose

Version History
---------------
0.1.0 - Initial release with parser, tokenizer and CLI
"""

__version__ = "0.1.0"
__author__ = "Daniil Cherniavskyi & Contributors"

# =============================================================================
# Public API Exports
# =============================================================================

from carbon_parser.config import ParserOptions
from carbon_parser.errors import (
    CarbonError,
    CarbonSyntaxError,
    RuleMismatchError,
    NestingDepthError,
    SourceLocation,
)
from carbon_parser.lexer import Token, TokenKind, tokenize
from carbon_parser.parser import (
    CarbonParser,
    parse,
    parse_program,
    parse_carbon,
    parse_function_decl,
    parse_var_decl,
    parse_expression,
    parse_type_name,
)
from carbon_parser.rules import Rule
from carbon_parser.tree import ParseNode, ParseTree, TreePrinter

__all__ = [
    # Version info
    "__version__",
    "__author__",
    # Parsing
    "CarbonParser",
    "ParserOptions",
    "parse",
    "parse_program",
    "parse_carbon",
    "parse_function_decl",
    "parse_var_decl",
    "parse_expression",
    "parse_type_name",
    # Trees
    "Rule",
    "ParseNode",
    "ParseTree",
    "TreePrinter",
    # Tokens
    "Token",
    "TokenKind",
    "tokenize",
    # Errors
    "CarbonError",
    "CarbonSyntaxError",
    "RuleMismatchError",
    "NestingDepthError",
    "SourceLocation",
]
