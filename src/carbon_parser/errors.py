"""
Carbon Parser Error Hierarchy
=============================

This module defines the exception hierarchy for the Carbon parser.
All exceptions inherit from CarbonError, allowing callers to catch all
parser-related errors with a single except clause if desired.

Exception Hierarchy
-------------------
CarbonError (base)
└── CarbonSyntaxError - input does not match the requested grammar rule
    ├── RuleMismatchError - the rule could not even start on this input
    └── NestingDepthError - expression nesting exceeded the configured limit

Error Message Format
--------------------
All syntax errors carry the furthest position any alternative reached,
the set of tokens expected there, and the text actually found:

    main.carbon:1:16: error: expected binary operator or ';', found end of input
        var x: i32 = 42
                       ^
    hint: declarations and statements must end with ';'
"""

from dataclasses import dataclass
from typing import Optional, Sequence


# =============================================================================
# Base Exception Class
# =============================================================================

class CarbonError(Exception):
    """
    Base exception for all Carbon parser errors.

    Callers that only care whether parsing worked can catch this:

        try:
            tree = parse_program(source)
        except CarbonError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    A position in source text, resolved to human coordinates.

    Attributes:
        filename: Name of the source file (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number in characters (1-indexed)
        offset: Character offset into the source string (0-indexed)
        byte_offset: Offset of the same position in the UTF-8 encoding
    """
    filename: str
    line: int
    column: int
    offset: int = 0
    byte_offset: int = 0

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"

    @classmethod
    def from_offset(
        cls,
        source: str,
        offset: int,
        filename: str = "<input>",
    ) -> "SourceLocation":
        """
        Resolve a character offset into line and column numbers.

        Args:
            source: The full source text the offset points into
            offset: Character offset (clamped to the source length)
            filename: Name reported in messages

        Returns:
            SourceLocation for the offset
        """
        offset = max(0, min(offset, len(source)))
        line = source.count("\n", 0, offset) + 1
        line_start = source.rfind("\n", 0, offset) + 1
        return cls(
            filename=filename,
            line=line,
            column=offset - line_start + 1,
            offset=offset,
            byte_offset=len(source[:offset].encode("utf-8")),
        )


def source_line_at(source: str, offset: int) -> str:
    """Return the full line of source text containing offset."""
    offset = max(0, min(offset, len(source)))
    line_start = source.rfind("\n", 0, offset) + 1
    line_end = source.find("\n", offset)
    if line_end == -1:
        line_end = len(source)
    return source[line_start:line_end].rstrip("\r")


# =============================================================================
# Syntax Errors
# =============================================================================

class CarbonSyntaxError(CarbonError):
    """
    The input does not match the requested grammar rule.

    Raised once per failed parse call, at the rightmost position any
    attempted alternative reached. No partial tree accompanies it.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        expected: Descriptions of what could have appeared there, in the
            order the grammar tried them
        found: The text found at the location, or "end of input"
        rule: Name of the entry rule that was being parsed
        hint: A suggestion for fixing the error (optional)
        source_line: The source line containing the location (optional)
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        expected: Sequence[str] = (),
        found: Optional[str] = None,
        rule: Optional[str] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.expected = tuple(expected)
        self.found = found
        self.rule = rule
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    @property
    def line(self) -> int:
        """1-based line number of the error, or 0 if unknown."""
        return self.location.line if self.location else 0

    @property
    def column(self) -> int:
        """1-based column number of the error, or 0 if unknown."""
        return self.location.column if self.location else 0

    @property
    def offset(self) -> int:
        """Character offset of the error, or 0 if unknown."""
        return self.location.offset if self.location else 0

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

        Example output:
            fib.carbon:3:9: error: expected identifier, found '123abc'
                var 123abc: i32 = 0;
                    ^
            hint: identifiers cannot start with a digit
        """
        parts = []

        # Location prefix
        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer, tabs expanded
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line.expandtabs()}")
            if self.location.column > 0:
                prefix = self.source_line[:self.location.column - 1].expandtabs()
                padding = " " * (4 + len(prefix))
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


class RuleMismatchError(CarbonSyntaxError):
    """
    The entry rule could not start on this input.

    Raised when the parse fails at the very first significant token,
    e.g. calling the variable-declaration entry point on a function
    declaration. The hint names an entry rule that does accept the
    input, when there is one.
    """
    pass


class NestingDepthError(CarbonSyntaxError):
    """
    Expression nesting exceeded ParserOptions.max_depth.

    Deeply nested parentheses or call arguments would otherwise exhaust
    the interpreter stack; this error is raised at the opening token of
    the first expression past the limit.
    """

    def __init__(
        self,
        max_depth: int,
        location: Optional[SourceLocation] = None,
        rule: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.max_depth = max_depth
        super().__init__(
            f"expression nesting exceeds maximum depth of {max_depth}",
            location=location,
            rule=rule,
            hint="raise max_depth (or CARBON_PARSER_MAX_DEPTH) to accept deeper nesting",
            source_line=source_line,
        )


# =============================================================================
# Message Helpers
# =============================================================================

def describe_expected(expected: Sequence[str]) -> str:
    """
    Join expected-token descriptions into prose.

    >>> describe_expected(["';'", "operator"])
    "';' or operator"
    """
    items = list(expected)
    if not items:
        return "nothing"
    if len(items) == 1:
        return items[0]
    return ", ".join(items[:-1]) + f" or {items[-1]}"


def with_article(noun: str) -> str:
    """Prefix noun with 'a' or 'an'."""
    article = "an" if noun[:1].lower() in "aeiou" and noun else "a"
    return f"{article} {noun}"
