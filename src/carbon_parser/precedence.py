"""
Binary Operator Precedence
==========================

The grammar reads an expression as a flat alternation of operands and
binary operators, `operand (op operand)*`. This module folds that flat
sequence into a nested tree according to a fixed precedence table.

Precedence (highest to lowest)
------------------------------
1. unary           - !          (handled by the grammar, never in the table)
2. multiplicative  * / %
3. additive        + -
4. comparison      < > <= >=
5. equality        == !=
6. logical and     &&
7. logical or      ||

All binary operators are left-associative: `a - b - c` is `(a - b) - c`.

The result is the same tree a layered grammar (one rule per precedence
level, each descending into the next-tighter level) would build: a level
only produces a node when one of its operators is present, and that node's
children are [left, operator, right].
"""

from typing import Sequence

from carbon_parser.rules import Rule
from carbon_parser.tree import ParseNode


# =============================================================================
# Precedence Table
# =============================================================================

# (level rule, binding power, operators), loosest first
PRECEDENCE_LEVELS: tuple[tuple[Rule, int, tuple[str, ...]], ...] = (
    (Rule.LOGICAL_OR, 1, ("||",)),
    (Rule.LOGICAL_AND, 2, ("&&",)),
    (Rule.EQUALITY, 3, ("==", "!=")),
    (Rule.COMPARISON, 4, ("<", ">", "<=", ">=")),
    (Rule.ADDITIVE, 5, ("+", "-")),
    (Rule.MULTIPLICATIVE, 6, ("*", "/", "%")),
)

# Map each binary operator to (level rule, binding power)
BINARY_OPERATORS: dict[str, tuple[Rule, int]] = {
    op: (rule, power)
    for rule, power, ops in PRECEDENCE_LEVELS
    for op in ops
}

UNARY_OPERATORS = ("-", "!")


def binding_power(operator: str) -> int:
    """Return the binding power of a binary operator (higher binds tighter)."""
    return BINARY_OPERATORS[operator][1]


def level_rule(operator: str) -> Rule:
    """Return the Rule labelling nodes built from this operator."""
    return BINARY_OPERATORS[operator][0]


# =============================================================================
# Resolver
# =============================================================================

def resolve(
    operands: Sequence[ParseNode],
    operators: Sequence[ParseNode],
) -> ParseNode:
    """
    Fold a flat operand/operator sequence into a nested expression tree.

    Uses an operator stack: before an operator is pushed, every stacked
    operator that binds at least as tightly is reduced first, which gives
    left associativity within a level and tighter levels nesting deeper.

    Args:
        operands: n operand nodes in source order
        operators: n - 1 OPERATOR leaf nodes, operators[i] sitting between
            operands[i] and operands[i + 1]

    Returns:
        The root of the nested expression

    Raises:
        ValueError: If the counts do not line up
    """
    if len(operands) != len(operators) + 1:
        raise ValueError(
            f"{len(operands)} operands cannot be joined by {len(operators)} operators"
        )

    output: list[ParseNode] = [operands[0]]
    pending: list[ParseNode] = []

    for op_node, operand in zip(operators, operands[1:]):
        power = binding_power(op_node.text)
        while pending and binding_power(pending[-1].text) >= power:
            _reduce(output, pending)
        pending.append(op_node)
        output.append(operand)

    while pending:
        _reduce(output, pending)

    return output[0]


def _reduce(output: list[ParseNode], pending: list[ParseNode]) -> None:
    """Combine the top two operands with the top operator."""
    op_node = pending.pop()
    right = output.pop()
    left = output.pop()
    output.append(ParseNode(
        rule=level_rule(op_node.text),
        start=left.start,
        end=right.end,
        children=(left, op_node, right),
        source=left.source,
    ))
