"""
Carbon Lexical Layer
====================

This module recognizes the atomic tokens of the Carbon subset and decides
what is skipped between them. The grammar engine is scannerless: instead
of producing a token list up front, it asks the Scanner "does an X start
at offset N?" and gets back the end offset or None.

Token Categories
----------------
- Identifiers: [A-Za-z_][A-Za-z0-9_]*, never a reserved word
- Reserved words: fn, var, return, true, false
- Primitive types: i32, i64, f32, f64, bool, String
- Integers: 42
- Floats: 3.14 (digits on both sides of the dot, no exponent)
- Booleans: true, false
- Strings: "double quoted", a backslash escapes the next character
- Punctuation: ( ) { } : ; , -> =
- Operators: || && == != < > <= >= + - * / % !

Trivia
------
Whitespace (space, tab, CR, LF), `// line comments` and
`/* block comments */` are skipped between any two tokens. An unterminated
block comment is not trivia; parsing fails at its opening slash.

Example Usage
-------------
>>> from carbon_parser.lexer import tokenize
>>> for token in tokenize("var x: i32;"):
...     print(token)
Token(KEYWORD, 'var', 0..3)
Token(WHITESPACE, ' ', 3..4)
Token(IDENTIFIER, 'x', 4..5)
Token(PUNCTUATION, ':', 5..6)
Token(WHITESPACE, ' ', 6..7)
Token(PRIMITIVE_TYPE, 'i32', 7..10)
Token(PUNCTUATION, ';', 10..11)
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Iterator, Optional
import string


# =============================================================================
# Vocabulary
# =============================================================================

# Words that can never be identifiers
RESERVED_WORDS = frozenset({"fn", "var", "return", "true", "false"})

# Built-in type spellings, tried before the identifier alternative
PRIMITIVE_TYPES = ("i32", "i64", "f32", "f64", "bool", "String")

BOOLEAN_LITERALS = ("true", "false")

PUNCTUATION = ("->", "(", ")", "{", "}", ":", ";", ",", "=")

# Binary and unary operators, longest spellings first
OPERATORS = ("||", "&&", "==", "!=", "<=", ">=", "<", ">", "+", "-", "*", "/", "%", "!")


# =============================================================================
# Scanner
# =============================================================================

class Scanner:
    """
    Recognizes tokens at arbitrary offsets in one source string.

    Every match method takes a start offset and returns the offset just
    past the match, or None when nothing matches there. The scanner holds
    no cursor of its own, so the grammar can backtrack freely.

    Attributes:
        source: The text being scanned
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    DIGITS = string.digits

    WHITESPACE = " \t\r\n"

    def __init__(self, source: str):
        self.source = source
        self.length = len(source)

    # =========================================================================
    # Character Access
    # =========================================================================

    def at_end(self, pos: int) -> bool:
        """Check if pos is at or past the end of source."""
        return pos >= self.length

    def peek(self, pos: int) -> str:
        """Return the character at pos, or '' past the end."""
        if pos >= self.length:
            return ""
        return self.source[pos]

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def skip_trivia(self, pos: int) -> int:
        """Return the offset of the first non-whitespace, non-comment character."""
        while pos < self.length:
            char = self.source[pos]

            if char in self.WHITESPACE:
                pos += 1
                continue

            end = self.match_comment(pos)
            if end is None:
                break
            pos = end

        return pos

    def match_comment(self, pos: int) -> Optional[int]:
        """Match a // or /* */ comment starting at pos."""
        if self.source.startswith("//", pos):
            end = self.source.find("\n", pos + 2)
            return self.length if end == -1 else end

        if self.source.startswith("/*", pos):
            end = self.source.find("*/", pos + 2)
            if end == -1:
                return None
            return end + 2

        return None

    def is_unterminated_comment(self, pos: int) -> bool:
        """Return True if an unclosed /* comment starts at pos."""
        return self.source.startswith("/*", pos) and self.match_comment(pos) is None

    # =========================================================================
    # Words
    # =========================================================================

    def match_word(self, pos: int) -> Optional[int]:
        """Match [A-Za-z_][A-Za-z0-9_]* regardless of reserved words."""
        if self.peek(pos) == "" or self.peek(pos) not in self.IDENT_START:
            return None
        end = pos + 1
        while end < self.length and self.source[end] in self.IDENT_CHARS:
            end += 1
        return end

    def match_identifier(self, pos: int) -> Optional[int]:
        """Match an identifier; reserved words do not count."""
        end = self.match_word(pos)
        if end is None or self.source[pos:end] in RESERVED_WORDS:
            return None
        return end

    def match_keyword(self, pos: int, word: str) -> Optional[int]:
        """Match word as a whole word (not as the prefix of an identifier)."""
        if not self.source.startswith(word, pos):
            return None
        end = pos + len(word)
        if end < self.length and self.source[end] in self.IDENT_CHARS:
            return None
        return end

    def match_primitive_type(self, pos: int) -> Optional[int]:
        """Match one of the built-in type names."""
        for name in PRIMITIVE_TYPES:
            end = self.match_keyword(pos, name)
            if end is not None:
                return end
        return None

    # =========================================================================
    # Literals
    # =========================================================================

    def match_digits(self, pos: int) -> Optional[int]:
        """Match one or more decimal digits."""
        end = pos
        while end < self.length and self.source[end] in self.DIGITS:
            end += 1
        return end if end > pos else None

    def match_integer(self, pos: int) -> Optional[int]:
        """Match an integer literal."""
        return self.match_digits(pos)

    def match_float(self, pos: int) -> Optional[int]:
        """Match digits '.' digits."""
        end = self.match_digits(pos)
        if end is None or self.peek(end) != ".":
            return None
        return self.match_digits(end + 1)

    def match_boolean(self, pos: int) -> Optional[int]:
        """Match true or false."""
        for word in BOOLEAN_LITERALS:
            end = self.match_keyword(pos, word)
            if end is not None:
                return end
        return None

    def match_string(self, pos: int) -> Optional[int]:
        """
        Match a double-quoted string literal.

        A backslash escapes whatever character follows it, so \\" does not
        close the string. Returns None if the closing quote is missing.
        """
        if self.peek(pos) != '"':
            return None

        end = pos + 1
        while end < self.length:
            char = self.source[end]
            if char == "\\":
                end += 2
                continue
            if char == '"':
                return end + 1
            end += 1

        return None

    # =========================================================================
    # Punctuation and Operators
    # =========================================================================

    def match_text(self, pos: int, text: str) -> Optional[int]:
        """Match an exact piece of punctuation."""
        if self.source.startswith(text, pos):
            return pos + len(text)
        return None

    def match_operator(self, pos: int, candidates: Iterable[str]) -> Optional[tuple[str, int]]:
        """
        Match the longest operator at pos.

        Longest-match matters for pairs like '<' and '<=': the one-character
        form only wins when the two-character form is absent.

        Args:
            pos: Offset to match at
            candidates: Operator spellings acceptable in this context

        Returns:
            (operator, end) for the longest candidate present, or None
        """
        longest = None
        for op in OPERATORS:
            if self.source.startswith(op, pos):
                longest = op
                break

        if longest is None or longest not in candidates:
            return None
        return longest, pos + len(longest)


# =============================================================================
# Token Stream
# =============================================================================

class TokenKind(Enum):
    """Classification of a token in the lossless token stream."""

    WHITESPACE = auto()
    COMMENT = auto()
    KEYWORD = auto()
    BOOLEAN = auto()
    PRIMITIVE_TYPE = auto()
    IDENTIFIER = auto()
    FLOAT = auto()
    INTEGER = auto()
    STRING = auto()
    PUNCTUATION = auto()
    OPERATOR = auto()
    ERROR = auto()          # unrecognized or unterminated input


@dataclass(frozen=True)
class Token:
    """
    One token of the lossless token stream.

    Attributes:
        kind: The TokenKind classification
        start: Offset of the first character
        end: Offset one past the last character
        source: The full source text
    """
    kind: TokenKind
    start: int
    end: int
    source: str = field(default="", repr=False, compare=False)

    def __repr__(self) -> str:
        """Format token for debugging output."""
        return f"Token({self.kind.name}, {self.text!r}, {self.start}..{self.end})"

    @property
    def text(self) -> str:
        return self.source[self.start:self.end]


def tokenize(source: str) -> Iterator[Token]:
    """
    Split source into tokens without dropping anything.

    Whitespace and comments are tokens too, so joining every token's text
    reproduces the input exactly. Unrecognized characters, unterminated
    strings and unterminated comments become ERROR tokens rather than
    exceptions, which suits highlighters working on unfinished code.

    Args:
        source: The text to tokenize

    Yields:
        Token objects covering the whole input in order
    """
    scanner = Scanner(source)
    pos = 0

    while not scanner.at_end(pos):
        kind, end = _scan_token(scanner, pos)
        yield Token(kind, pos, end, source)
        pos = end


def token_at(source: str, pos: int) -> Optional[Token]:
    """Return the token starting at pos, or None at end of input."""
    scanner = Scanner(source)
    if scanner.at_end(pos):
        return None
    kind, end = _scan_token(scanner, pos)
    return Token(kind, pos, end, source)


def _scan_token(scanner: Scanner, pos: int) -> tuple[TokenKind, int]:
    """Classify the token starting at pos and return (kind, end)."""
    source = scanner.source
    char = source[pos]

    if char in Scanner.WHITESPACE:
        end = pos
        while end < scanner.length and source[end] in Scanner.WHITESPACE:
            end += 1
        return TokenKind.WHITESPACE, end

    if source.startswith("//", pos) or source.startswith("/*", pos):
        end = scanner.match_comment(pos)
        if end is None:
            return TokenKind.ERROR, scanner.length
        return TokenKind.COMMENT, end

    if char in Scanner.IDENT_START:
        end = scanner.match_word(pos)
        word = source[pos:end]
        if word in BOOLEAN_LITERALS:
            return TokenKind.BOOLEAN, end
        if word in RESERVED_WORDS:
            return TokenKind.KEYWORD, end
        if word in PRIMITIVE_TYPES:
            return TokenKind.PRIMITIVE_TYPE, end
        return TokenKind.IDENTIFIER, end

    if char in Scanner.DIGITS:
        end = scanner.match_float(pos)
        if end is not None:
            return TokenKind.FLOAT, end
        return TokenKind.INTEGER, scanner.match_integer(pos)

    if char == '"':
        end = scanner.match_string(pos)
        if end is None:
            line_end = source.find("\n", pos)
            return TokenKind.ERROR, scanner.length if line_end == -1 else line_end
        return TokenKind.STRING, end

    # '->' before the '-' operator
    if source.startswith("->", pos):
        return TokenKind.PUNCTUATION, pos + 2

    matched = scanner.match_operator(pos, OPERATORS)
    if matched is not None:
        return TokenKind.OPERATOR, matched[1]

    for text in PUNCTUATION:
        end = scanner.match_text(pos, text)
        if end is not None:
            return TokenKind.PUNCTUATION, end

    return TokenKind.ERROR, pos + 1
