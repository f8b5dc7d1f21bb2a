"""
Carbon PEG Grammar Engine
=========================

This module implements the grammar as a set of ordered-choice parsing
rules over the raw source text. Each rule is a method that takes a start
offset and returns `(node, end)` on success or None on failure; the caller
then tries its next alternative from the same offset (backtracking).

Grammar (PEG)
-------------
program        ::= (function_decl | var_decl)* EOI
function_decl  ::= 'fn' identifier '(' param_list? ')' ('->' type_name)? block
param_list     ::= param (',' param)*
param          ::= identifier ':' type_name
block          ::= '{' statement* '}'
statement      ::= var_decl | return_stmt | expr_stmt
var_decl       ::= 'var' identifier ':' type_name ('=' expression)? ';'
return_stmt    ::= 'return' expression? ';'
expr_stmt      ::= expression ';'
type_name      ::= 'i32' | 'i64' | 'f32' | 'f64' | 'bool' | 'String' | identifier
expression     ::= unary (binary_op unary)*          (folded by precedence.resolve)
unary          ::= ('-' | '!')? primary
primary        ::= literal | function_call | identifier | '(' expression ')'
function_call  ::= identifier '(' arg_list? ')'
arg_list       ::= expression (',' expression)*
literal        ::= float | integer | boolean | string

Furthest-Failure Tracking
-------------------------
Every terminal that fails to match records (offset, description). A
failure further right than any seen so far replaces the expected set; one
at the same offset adds to it. Backtracking discards the failed branch but
never this record, so the final error points at the rightmost place any
alternative reached, listing everything that would have been accepted.

Example Usage
-------------
>>> from carbon_parser.grammar import GrammarParser
>>> from carbon_parser.rules import Rule
>>> tree = GrammarParser("var x: i32 = 1;").parse(Rule.VAR_DECL)
>>> tree.root.rule
<Rule.VAR_DECL: 3>
"""

from typing import Callable, Optional

from carbon_parser.config import ParserOptions
from carbon_parser.errors import (
    CarbonSyntaxError,
    NestingDepthError,
    RuleMismatchError,
    SourceLocation,
    describe_expected,
    source_line_at,
    with_article,
)
from carbon_parser.lexer import Scanner, token_at
from carbon_parser.precedence import BINARY_OPERATORS, UNARY_OPERATORS, resolve
from carbon_parser.rules import ENTRY_RULES, Rule, entry_name
from carbon_parser.tree import ParseNode, ParseTree


# A successful match: the node built and the offset just past it
Match = Optional[tuple[ParseNode, int]]

# Order in which other entry rules are tried when suggesting a fix for a
# rule mismatch; most specific first
SUGGESTION_ORDER = (
    Rule.FUNCTION_DECL,
    Rule.VAR_DECL,
    Rule.EXPRESSION,
    Rule.TYPE_NAME,
    Rule.PROGRAM,
)


class GrammarParser:
    """
    Ordered-choice parser for the Carbon subset.

    One instance parses one source string once; all state (furthest
    failure, nesting depth) lives on the instance, so separate instances
    never interact.

    Attributes:
        source: The text being parsed
        options: ParserOptions in effect for this parse
    """

    def __init__(
        self,
        source: str,
        options: Optional[ParserOptions] = None,
        suggest: bool = True,
    ):
        """
        Initialize the parser.

        Args:
            source: The text to parse
            options: Parser options (defaults if None)
            suggest: Whether rule-mismatch errors should probe the other
                entry rules to build a hint
        """
        self.source = source
        self.options = options or ParserOptions()
        self.scanner = Scanner(source)
        self._suggest = suggest

        # Furthest failure: offset and the descriptions expected there
        self._furthest = -1
        self._expected: dict[str, None] = {}

        # Current expression nesting depth
        self._depth = 0

    # =========================================================================
    # Entry Point
    # =========================================================================

    def parse(self, rule: Rule) -> ParseTree:
        """
        Match rule against the whole source.

        Args:
            rule: One of the five entry rules

        Returns:
            ParseTree for the input

        Raises:
            CarbonSyntaxError: If the rule does not match the entire input
            ValueError: If rule is not an entry rule
        """
        if rule not in ENTRY_RULES.values():
            raise ValueError(f"{rule.name} is not an entry rule")

        if rule is Rule.PROGRAM:
            roots, end = self._parse_program(0)
        else:
            parsers: dict[Rule, Callable[[int], Match]] = {
                Rule.FUNCTION_DECL: self._parse_function_decl,
                Rule.VAR_DECL: self._parse_var_decl,
                Rule.EXPRESSION: self._parse_expression,
                Rule.TYPE_NAME: self._parse_type_name,
            }
            result = parsers[rule](0)
            if result is None:
                raise self._syntax_error(rule)
            node, end = result
            roots = [node]

        end = self._skip(end)
        if end < len(self.source):
            self._fail(end, "end of input")
            raise self._syntax_error(rule)

        return ParseTree(rule=rule, roots=tuple(roots), source=self.source)

    # =========================================================================
    # Matching Primitives
    # =========================================================================

    def _skip(self, pos: int) -> int:
        """Skip whitespace and comments."""
        return self.scanner.skip_trivia(pos)

    def _fail(self, pos: int, expected: str) -> None:
        """Record that expected could not be matched at pos."""
        if pos > self._furthest:
            self._furthest = pos
            self._expected = {expected: None}
        elif pos == self._furthest:
            self._expected.setdefault(expected)

    def _expect_text(self, pos: int, text: str) -> Optional[int]:
        """Match punctuation after trivia; return its end offset."""
        start = self._skip(pos)
        end = self.scanner.match_text(start, text)
        if end is None:
            self._fail(start, f"'{text}'")
        return end

    def _expect_keyword(self, pos: int, word: str) -> Optional[int]:
        """Match a keyword as a whole word after trivia."""
        start = self._skip(pos)
        end = self.scanner.match_keyword(start, word)
        if end is None:
            self._fail(start, f"'{word}'")
        return end

    def _leaf(self, rule: Rule, start: int, end: int) -> ParseNode:
        return ParseNode(rule, start, end, (), self.source)

    def _node(self, rule: Rule, start: int, end: int, children: list[ParseNode]) -> ParseNode:
        return ParseNode(rule, start, end, tuple(children), self.source)

    def _labelled(self, label: str, pos: int, parser: Callable[[int], Match]) -> Match:
        """
        Run parser, reporting a failure at its own start as just label.

        Without this an operand that fails immediately would list every
        literal kind, '(' and both unary operators; with it the message
        reads "expected expression". Failures deeper inside are kept.
        """
        start = self._skip(pos)
        saved_furthest = self._furthest
        saved_expected = dict(self._expected)

        result = parser(start)

        if result is None and self._furthest == start:
            if saved_furthest == start:
                self._expected = saved_expected
                self._expected.setdefault(label)
            else:
                self._expected = {label: None}

        return result

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_program(self, pos: int) -> tuple[list[ParseNode], int]:
        """Parse (function_decl | var_decl)*; always succeeds."""
        declarations = []
        end = pos

        while True:
            result = self._parse_function_decl(end) or self._parse_var_decl(end)
            if result is None:
                break
            node, end = result
            declarations.append(node)

        return declarations, end

    def _parse_function_decl(self, pos: int) -> Match:
        """Parse 'fn' identifier '(' param_list? ')' ('->' type_name)? block."""
        start = self._skip(pos)
        end = self._expect_keyword(start, "fn")
        if end is None:
            return None

        name = self._parse_identifier(end)
        if name is None:
            return None
        children = [name[0]]

        end = self._expect_text(name[1], "(")
        if end is None:
            return None

        params = self._parse_param_list(end)
        if params is not None:
            children.append(params[0])
            end = params[1]

        end = self._expect_text(end, ")")
        if end is None:
            return None

        # Optional return type
        arrow = self._expect_text(end, "->")
        if arrow is not None:
            return_type = self._parse_type_name(arrow)
            if return_type is not None:
                children.append(return_type[0])
                end = return_type[1]

        body = self._parse_block(end)
        if body is None:
            return None
        children.append(body[0])

        return self._node(Rule.FUNCTION_DECL, start, body[1], children), body[1]

    def _parse_param_list(self, pos: int) -> Match:
        """Parse param (',' param)*."""
        first = self._parse_param(pos)
        if first is None:
            return None

        params = [first[0]]
        end = first[1]
        while True:
            comma = self._expect_text(end, ",")
            if comma is None:
                break
            param = self._parse_param(comma)
            if param is None:
                break
            params.append(param[0])
            end = param[1]

        return self._node(Rule.PARAM_LIST, params[0].start, end, params), end

    def _parse_param(self, pos: int) -> Match:
        """Parse identifier ':' type_name."""
        name = self._parse_identifier(pos)
        if name is None:
            return None

        colon = self._expect_text(name[1], ":")
        if colon is None:
            return None

        param_type = self._parse_type_name(colon)
        if param_type is None:
            return None

        start = name[0].start
        end = param_type[1]
        return self._node(Rule.PARAM, start, end, [name[0], param_type[0]]), end

    def _parse_var_decl(self, pos: int) -> Match:
        """Parse 'var' identifier ':' type_name ('=' expression)? ';'."""
        start = self._skip(pos)
        end = self._expect_keyword(start, "var")
        if end is None:
            return None

        name = self._parse_identifier(end)
        if name is None:
            return None

        colon = self._expect_text(name[1], ":")
        if colon is None:
            return None

        var_type = self._parse_type_name(colon)
        if var_type is None:
            return None
        children = [name[0], var_type[0]]
        end = var_type[1]

        # Optional initializer; the group fails as a whole
        assign = self._expect_text(end, "=")
        if assign is not None:
            initializer = self._parse_expression(assign)
            if initializer is not None:
                children.append(initializer[0])
                end = initializer[1]

        end = self._expect_text(end, ";")
        if end is None:
            return None

        return self._node(Rule.VAR_DECL, start, end, children), end

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_block(self, pos: int) -> Match:
        """Parse '{' statement* '}'."""
        start = self._skip(pos)
        end = self._expect_text(start, "{")
        if end is None:
            return None

        statements = []
        while True:
            statement = self._parse_statement(end)
            if statement is None:
                break
            statements.append(statement[0])
            end = statement[1]

        end = self._expect_text(end, "}")
        if end is None:
            return None

        return self._node(Rule.BLOCK, start, end, statements), end

    def _parse_statement(self, pos: int) -> Match:
        """Parse var_decl | return_stmt | expr_stmt."""
        return (
            self._parse_var_decl(pos)
            or self._parse_return_stmt(pos)
            or self._parse_expr_stmt(pos)
        )

    def _parse_return_stmt(self, pos: int) -> Match:
        """Parse 'return' expression? ';'."""
        start = self._skip(pos)
        end = self._expect_keyword(start, "return")
        if end is None:
            return None

        children = []
        value = self._parse_expression(end)
        if value is not None:
            children.append(value[0])
            end = value[1]

        end = self._expect_text(end, ";")
        if end is None:
            return None

        return self._node(Rule.RETURN_STMT, start, end, children), end

    def _parse_expr_stmt(self, pos: int) -> Match:
        """Parse expression ';'."""
        expression = self._parse_expression(pos)
        if expression is None:
            return None

        end = self._expect_text(expression[1], ";")
        if end is None:
            return None

        start = expression[0].start
        return self._node(Rule.EXPR_STMT, start, end, [expression[0]]), end

    # =========================================================================
    # Types
    # =========================================================================

    def _parse_type_name(self, pos: int) -> Match:
        """Parse a primitive type or a custom (identifier) type."""
        return self._labelled("type name", pos, self._parse_type_name_inner)

    def _parse_type_name_inner(self, start: int) -> Match:
        end = self.scanner.match_primitive_type(start)
        if end is not None:
            leaf = self._leaf(Rule.PRIMITIVE_TYPE, start, end)
        else:
            self._fail(start, Rule.PRIMITIVE_TYPE.description)
            name = self._parse_identifier(start)
            if name is None:
                return None
            leaf, end = name

        return self._node(Rule.TYPE_NAME, start, end, [leaf]), end

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self, pos: int) -> Match:
        """
        Parse a full expression and wrap it in an EXPRESSION node.

        Operands and binary operators are collected flat, then folded by
        precedence.resolve() into the nested tree.
        """
        try:
            self._enter(pos)
            first = self._parse_operand(pos)
            if first is None:
                return None

            operands = [first[0]]
            operators = []
            end = first[1]

            while True:
                op_start = self._skip(end)
                matched = self.scanner.match_operator(op_start, BINARY_OPERATORS)
                if matched is None:
                    self._fail(op_start, "binary operator")
                    break
                op_end = matched[1]

                right = self._parse_operand(op_end)
                if right is None:
                    break

                operators.append(self._leaf(Rule.OPERATOR, op_start, op_end))
                operands.append(right[0])
                end = right[1]

            tree = resolve(operands, operators)
            return self._node(Rule.EXPRESSION, tree.start, tree.end, [tree]), end
        finally:
            self._depth -= 1

    def _enter(self, pos: int) -> None:
        """
        Increase the nesting depth.

        Raises:
            NestingDepthError: If the depth passes options.max_depth
        """
        self._depth += 1
        limit = self.options.max_depth
        if limit > 0 and self._depth > limit:
            start = self._skip(pos)
            raise NestingDepthError(
                limit,
                location=self._location(start),
                source_line=source_line_at(self.source, start),
            )

    def _parse_operand(self, pos: int) -> Match:
        """Parse one operand of a binary expression."""
        return self._labelled("expression", pos, self._parse_unary)

    def _parse_unary(self, start: int) -> Match:
        """Parse ('-' | '!')? primary."""
        matched = self.scanner.match_operator(start, UNARY_OPERATORS)
        if matched is None:
            self._fail(start, "unary operator")
            return self._parse_primary(start)

        op_end = matched[1]
        operand = self._labelled("expression", op_end, self._parse_primary)
        if operand is None:
            return None

        operator = self._leaf(Rule.OPERATOR, start, op_end)
        end = operand[1]
        return self._node(Rule.UNARY, start, end, [operator, operand[0]]), end

    def _parse_primary(self, pos: int) -> Match:
        """Parse literal | function_call | identifier | '(' expression ')'."""
        start = self._skip(pos)
        return (
            self._parse_literal(start)
            or self._parse_function_call(start)
            or self._parse_identifier(start)
            or self._parse_parenthesized(start)
        )

    def _parse_literal(self, start: int) -> Match:
        """Parse float | integer | boolean | string."""
        literal_kinds = (
            (Rule.FLOAT, self.scanner.match_float),
            (Rule.INTEGER, self.scanner.match_integer),
            (Rule.BOOLEAN, self.scanner.match_boolean),
            (Rule.STRING, self.scanner.match_string),
        )

        for rule, matcher in literal_kinds:
            end = matcher(start)
            if end is not None:
                return self._leaf(rule, start, end), end
            self._fail(start, rule.description)

        return None

    def _parse_function_call(self, start: int) -> Match:
        """Parse identifier '(' arg_list? ')'."""
        name = self._parse_identifier(start)
        if name is None:
            return None
        children = [name[0]]

        end = self._expect_text(name[1], "(")
        if end is None:
            return None

        arguments = self._parse_arg_list(end)
        if arguments is not None:
            children.append(arguments[0])
            end = arguments[1]

        end = self._expect_text(end, ")")
        if end is None:
            return None

        return self._node(Rule.FUNCTION_CALL, start, end, children), end

    def _parse_arg_list(self, pos: int) -> Match:
        """Parse expression (',' expression)*."""
        first = self._parse_expression(pos)
        if first is None:
            return None

        arguments = [first[0]]
        end = first[1]
        while True:
            comma = self._expect_text(end, ",")
            if comma is None:
                break
            argument = self._parse_expression(comma)
            if argument is None:
                break
            arguments.append(argument[0])
            end = argument[1]

        return self._node(Rule.ARG_LIST, arguments[0].start, end, arguments), end

    def _parse_parenthesized(self, start: int) -> Match:
        """
        Parse '(' expression ')'.

        The resulting EXPRESSION node spans the parentheses; its child is
        the inner expression tree.
        """
        end = self._expect_text(start, "(")
        if end is None:
            return None

        inner = self._parse_expression(end)
        if inner is None:
            return None

        end = self._expect_text(inner[1], ")")
        if end is None:
            return None

        return self._node(Rule.EXPRESSION, start, end, list(inner[0].children)), end

    def _parse_identifier(self, pos: int) -> Match:
        """Parse an identifier that is not a reserved word."""
        start = self._skip(pos)
        end = self.scanner.match_identifier(start)
        if end is None:
            self._fail(start, Rule.IDENTIFIER.description)
            return None
        return self._leaf(Rule.IDENTIFIER, start, end), end

    # =========================================================================
    # Error Reporting
    # =========================================================================

    def _location(self, pos: int) -> SourceLocation:
        return SourceLocation.from_offset(self.source, pos, self.options.filename)

    def _syntax_error(self, rule: Rule) -> CarbonSyntaxError:
        """Build the error for the furthest failure recorded so far."""
        pos = max(self._furthest, 0)
        expected = tuple(self._expected)
        found = self._found_at(pos)
        found_text = "end of input" if found is None else f"'{found}'"

        first_token = self._skip(0)
        if pos == first_token and first_token < len(self.source):
            return RuleMismatchError(
                f"input is not {with_article(rule.description)}: expected "
                f"{describe_expected(expected)}, found {found_text}",
                location=self._location(pos),
                expected=expected,
                found=found,
                rule=entry_name(rule),
                hint=self._mismatch_hint(rule) or self._hint_at(pos, expected),
                source_line=source_line_at(self.source, pos),
            )

        return CarbonSyntaxError(
            f"expected {describe_expected(expected)}, found {found_text}",
            location=self._location(pos),
            expected=expected,
            found=found,
            rule=entry_name(rule),
            hint=self._hint_at(pos, expected),
            source_line=source_line_at(self.source, pos),
        )

    def _found_at(self, pos: int) -> Optional[str]:
        """Return a short excerpt of the token at pos, or None at end."""
        token = token_at(self.source, pos)
        if token is None:
            return None
        text = token.text.split("\n", 1)[0]
        if len(text) > 20:
            text = text[:17] + "..."
        return text

    def _hint_at(self, pos: int, expected: tuple[str, ...]) -> Optional[str]:
        """Suggest a fix for the common failure shapes."""
        if self.scanner.is_unterminated_comment(pos):
            return "unterminated block comment; add a closing */"

        if self.scanner.peek(pos) == '"' and self.scanner.match_string(pos) is None:
            return "unterminated string literal; add a closing '\"'"

        if Rule.IDENTIFIER.description in expected:
            char = self.scanner.peek(pos)
            if char and char in Scanner.DIGITS:
                return "identifiers cannot start with a digit"
            word_end = self.scanner.match_word(pos)
            if word_end is not None and self.scanner.match_identifier(pos) is None:
                word = self.source[pos:word_end]
                return f"'{word}' is a reserved word and cannot be used as an identifier"

        if "';'" in expected and pos >= len(self.source):
            return "declarations and statements must end with ';'"

        return None

    def _mismatch_hint(self, rule: Rule) -> Optional[str]:
        """Name another entry rule that accepts the whole input, if any."""
        if not self._suggest:
            return None

        for candidate in SUGGESTION_ORDER:
            if candidate is rule:
                continue
            probe = GrammarParser(self.source, self.options, suggest=False)
            try:
                probe.parse(candidate)
            except CarbonSyntaxError:
                continue
            return (
                f"input looks like {with_article(candidate.description)}; "
                f"parse it with the '{entry_name(candidate)}' rule"
            )

        return None
