"""
Grammar Rule Identifiers
========================

Every node in a parse tree is labelled with one member of the Rule
enumeration. The set is closed: the grammar never invents labels at
runtime.

Rule Groups
-----------
- Entry rules: PROGRAM, FUNCTION_DECL, VAR_DECL, EXPRESSION, TYPE_NAME
  (the five rules callers may parse directly)
- Structure: PARAM_LIST, PARAM, BLOCK, RETURN_STMT, EXPR_STMT,
  FUNCTION_CALL, ARG_LIST
- Expression levels: LOGICAL_OR .. MULTIPLICATIVE, UNARY
- Leaves: IDENTIFIER, PRIMITIVE_TYPE, INTEGER, FLOAT, BOOLEAN, STRING,
  OPERATOR
"""

from enum import Enum, auto
from typing import Union


class Rule(Enum):
    """Grammar rule tags used to label parse nodes."""

    # === Entry Rules ===
    PROGRAM = auto()
    FUNCTION_DECL = auto()
    VAR_DECL = auto()
    EXPRESSION = auto()
    TYPE_NAME = auto()

    # === Structure ===
    PARAM_LIST = auto()
    PARAM = auto()
    BLOCK = auto()
    RETURN_STMT = auto()
    EXPR_STMT = auto()
    FUNCTION_CALL = auto()
    ARG_LIST = auto()

    # === Expression Levels (lowest to highest precedence) ===
    LOGICAL_OR = auto()
    LOGICAL_AND = auto()
    EQUALITY = auto()
    COMPARISON = auto()
    ADDITIVE = auto()
    MULTIPLICATIVE = auto()
    UNARY = auto()

    # === Leaves ===
    IDENTIFIER = auto()
    PRIMITIVE_TYPE = auto()
    INTEGER = auto()
    FLOAT = auto()
    BOOLEAN = auto()
    STRING = auto()
    OPERATOR = auto()

    @property
    def description(self) -> str:
        """Human-readable name used in diagnostics."""
        return RULE_DESCRIPTIONS[self]

    @property
    def is_leaf(self) -> bool:
        """Return True if nodes with this rule never have children."""
        return self in LEAF_RULES


RULE_DESCRIPTIONS: dict[Rule, str] = {
    Rule.PROGRAM: "program",
    Rule.FUNCTION_DECL: "function declaration",
    Rule.VAR_DECL: "variable declaration",
    Rule.EXPRESSION: "expression",
    Rule.TYPE_NAME: "type name",
    Rule.PARAM_LIST: "parameter list",
    Rule.PARAM: "parameter",
    Rule.BLOCK: "block",
    Rule.RETURN_STMT: "return statement",
    Rule.EXPR_STMT: "expression statement",
    Rule.FUNCTION_CALL: "function call",
    Rule.ARG_LIST: "argument list",
    Rule.LOGICAL_OR: "logical or",
    Rule.LOGICAL_AND: "logical and",
    Rule.EQUALITY: "equality",
    Rule.COMPARISON: "comparison",
    Rule.ADDITIVE: "additive expression",
    Rule.MULTIPLICATIVE: "multiplicative expression",
    Rule.UNARY: "unary expression",
    Rule.IDENTIFIER: "identifier",
    Rule.PRIMITIVE_TYPE: "primitive type",
    Rule.INTEGER: "integer",
    Rule.FLOAT: "float",
    Rule.BOOLEAN: "boolean",
    Rule.STRING: "string",
    Rule.OPERATOR: "operator",
}

LEAF_RULES = frozenset({
    Rule.IDENTIFIER,
    Rule.PRIMITIVE_TYPE,
    Rule.INTEGER,
    Rule.FLOAT,
    Rule.BOOLEAN,
    Rule.STRING,
    Rule.OPERATOR,
})

# Rules callers may hand to parse(), keyed by their public names
ENTRY_RULES: dict[str, Rule] = {
    "program": Rule.PROGRAM,
    "function_decl": Rule.FUNCTION_DECL,
    "var_decl": Rule.VAR_DECL,
    "expression": Rule.EXPRESSION,
    "type_name": Rule.TYPE_NAME,
}


def entry_name(rule: Rule) -> str:
    """Return the public entry-point name for an entry rule."""
    for name, candidate in ENTRY_RULES.items():
        if candidate is rule:
            return name
    raise ValueError(f"{rule.name} is not an entry rule")


def resolve_entry_rule(rule: Union[Rule, str]) -> Rule:
    """
    Map a Rule or its public name to an entry Rule.

    Raises:
        ValueError: If the rule is not one of the five entry rules
    """
    if isinstance(rule, Rule):
        if rule in ENTRY_RULES.values():
            return rule
        raise ValueError(f"{rule.name} is not an entry rule")

    key = rule.strip().lower()
    if key in ENTRY_RULES:
        return ENTRY_RULES[key]

    valid = ", ".join(ENTRY_RULES)
    raise ValueError(f"unknown rule '{rule}' (expected one of: {valid})")
