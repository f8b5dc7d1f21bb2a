"""
Tests for Parse Trees
=====================

These tests verify the structural guarantees of parse trees (span
containment, sibling order, text preservation) and the node, tree and
printer conveniences built on them.
"""

import pytest

from carbon_parser import (
    ParseNode,
    ParseTree,
    Rule,
    TokenKind,
    TreePrinter,
    parse_expression,
    parse_function_decl,
    parse_program,
    parse_var_decl,
    tokenize,
)


SAMPLE = """
// Globals
var counter: i32 = 0;
var name: String = "carbon";

fn add(a: i32, b: i32) -> i32 {
    return a + b * 2;
}

fn main() -> i32 {
    var ok: bool = !(counter >= 10) && add(1, 2) != 3;
    /* call for effect */
    add(counter, -1);
    return 0;
}
"""


# =============================================================================
# Structural Invariants
# =============================================================================

class TestInvariants:
    """Properties every successful parse must satisfy."""

    @pytest.fixture
    def tree(self) -> ParseTree:
        return parse_program(SAMPLE)

    def test_child_spans_inside_parent(self, tree):
        for node in tree.walk():
            for child in node.children:
                assert node.start <= child.start <= child.end <= node.end

    def test_siblings_ordered_and_disjoint(self, tree):
        for node in tree.walk():
            for left, right in zip(node.children, node.children[1:]):
                assert left.end <= right.start

    def test_roots_ordered(self, tree):
        for left, right in zip(tree.roots, tree.roots[1:]):
            assert left.end <= right.start

    def test_text_is_source_slice(self, tree):
        for node in tree.walk():
            assert node.text == SAMPLE[node.start:node.end]
            assert node.source is SAMPLE

    def test_leaves_match_tokens(self, tree):
        """Leaf nodes are a subsequence of the significant tokens."""
        token_texts = [
            t.text for t in tokenize(SAMPLE)
            if t.kind not in (TokenKind.WHITESPACE, TokenKind.COMMENT)
        ]
        remaining = iter(token_texts)
        for leaf in tree.leaves():
            if leaf.rule.is_leaf:
                assert leaf.text in remaining

    def test_leaves_are_leaf_rules(self, tree):
        for node in tree.walk():
            if node.rule.is_leaf:
                assert node.children == ()

    def test_comment_transparency(self):
        """Comments and extra whitespace do not change the tree shape."""
        plain = parse_var_decl("var x: i32 = 1 + 2 * f(y);")
        commented = parse_var_decl(
            "var /* name */ x: i32 =\n  1 // one\n  + 2 * f( /* arg */ y);"
        )
        assert [n.rule for n in plain.walk()] == [n.rule for n in commented.walk()]
        assert [n.text for n in plain.leaves()] == [n.text for n in commented.leaves()]

    def test_function_decl_comment_transparency(self):
        """Comments inside a function change only spans, never structure."""
        def outline(tree):
            return [
                (n.rule, len(n.children), n.text if n.rule.is_leaf else None)
                for n in tree.walk()
            ]

        plain = parse_function_decl("fn add(a: i32, b: i32) -> i32 { return a + b * 2; }")
        commented = parse_function_decl(
            "fn /* name */ add(\n"
            "    a: i32, // first\n"
            "    b /* second */ : i32\n"
            ") -> i32 {\n"
            "    // body\n"
            "    return a +\n"
            "        b * /* doubled */ 2;\n"
            "}"
        )
        assert outline(plain) == outline(commented)
        assert plain.root.children[0].rule == Rule.IDENTIFIER
        assert plain.root != commented.root


# =============================================================================
# ParseNode
# =============================================================================

class TestParseNode:
    """Tests for ParseNode conveniences."""

    def test_span(self):
        node = parse_expression("  42").root.children[0]
        assert node.span == (2, 4)

    def test_repr(self):
        node = parse_expression("42").root.children[0]
        assert repr(node) == "Node(INTEGER, 0..2, '42')"

    def test_repr_truncates_text(self):
        node = parse_expression("a_long_name + another_long_name").root
        assert repr(node).endswith("'a_long_name + another...')")

    def test_values(self):
        assert parse_expression("7").root.children[0].value == 7
        assert parse_expression("2.5").root.children[0].value == 2.5
        assert parse_expression("false").root.children[0].value is False
        assert parse_expression('"hi"').root.children[0].value == "hi"
        assert parse_expression("x").root.children[0].value == "x"

    def test_interior_value_is_none(self):
        assert parse_expression("1 + 2").root.value is None

    def test_child(self):
        node = parse_var_decl("var x: i32;").root
        assert node.child(Rule.IDENTIFIER).text == "x"
        assert node.child(Rule.EXPRESSION) is None

    def test_walk_is_preorder(self):
        node = parse_expression("1 + 2").root
        assert [n.rule for n in node.walk()] == [
            Rule.EXPRESSION,
            Rule.ADDITIVE,
            Rule.INTEGER,
            Rule.OPERATOR,
            Rule.INTEGER,
        ]

    def test_equality_ignores_source(self):
        a = ParseNode(Rule.INTEGER, 0, 1, (), "1")
        b = ParseNode(Rule.INTEGER, 0, 1, (), "2")
        assert a == b

    def test_equality_compares_subtrees(self):
        assert parse_expression("1 + 2").root == parse_expression("3 - 4").root
        assert parse_expression("1 + 2").root != parse_expression("1 * 2").root
        assert parse_expression("1 + 2").root != parse_expression("1 + 22").root

    def test_long_chain_equality_and_hash(self):
        """Left-nested chains are thousands of levels deep."""
        chain = " + ".join(["1"] * 2000)
        first = parse_expression(chain).root
        second = parse_expression(chain).root
        assert first == second
        assert hash(first) == hash(second)
        assert first != parse_expression(chain + " + 1").root

    def test_nodes_are_immutable(self):
        node = parse_expression("1").root
        with pytest.raises(AttributeError):
            node.start = 5


# =============================================================================
# ParseTree
# =============================================================================

class TestParseTree:
    """Tests for ParseTree conveniences."""

    def test_sequence_protocol(self):
        tree = parse_program(SAMPLE)
        assert len(tree) == 4
        assert tree[0].rule == Rule.VAR_DECL
        assert [n.rule for n in tree] == [
            Rule.VAR_DECL, Rule.VAR_DECL, Rule.FUNCTION_DECL, Rule.FUNCTION_DECL,
        ]

    def test_root_of_fragment(self):
        assert parse_expression("x").root.rule == Rule.EXPRESSION

    def test_root_requires_single_root(self):
        with pytest.raises(ValueError, match="4 roots"):
            parse_program(SAMPLE).root

    def test_root_of_empty_program(self):
        with pytest.raises(ValueError):
            parse_program("").root

    def test_find_all(self):
        tree = parse_program(SAMPLE)
        calls = tree.find_all(Rule.FUNCTION_CALL)
        assert [c.children[0].text for c in calls] == ["add", "add"]
        assert len(tree.find_all(Rule.RETURN_STMT)) == 2

    def test_leaves(self):
        tree = parse_expression("f(a, 1)")
        assert [leaf.text for leaf in tree.leaves()] == ["f", "a", "1"]


# =============================================================================
# TreePrinter
# =============================================================================

class TestTreePrinter:
    """Tests for the indented tree dump."""

    def test_expression(self):
        output = TreePrinter().print(parse_expression("1 + 2"))
        assert output == (
            "expression: 1 + 2\n"
            "  additive: 1 + 2\n"
            "    integer: 1\n"
            "    operator: +\n"
            "    integer: 2"
        )

    def test_multiline_text_collapsed(self):
        output = TreePrinter().print(parse_program("fn f() {\n  return;\n}"))
        assert output.split("\n")[0] == "function_decl: fn f() { return; }"

    def test_long_text_trimmed(self):
        output = TreePrinter(max_text=10).print(parse_expression("alpha + beta + gamma"))
        assert output.split("\n")[0] == "expression: alpha +..."

    def test_single_node(self):
        node = parse_var_decl("var x: i32;").root.children[0]
        assert TreePrinter().print(node) == "identifier: x"

    def test_empty_program(self):
        assert TreePrinter().print(parse_program("")) == ""

    def test_long_chain(self):
        """2000 operands fold into 1999 nested additive nodes."""
        chain = " + ".join(["1"] * 2000)
        lines = TreePrinter().print(parse_expression(chain)).split("\n")
        assert len(lines) == 5999
        assert lines[1].startswith("  additive: 1 + 1")
        assert lines[-1] == "    integer: 1"
        assert lines[-2] == "    operator: +"

    def test_printer_is_reusable(self):
        printer = TreePrinter()
        first = printer.print(parse_expression("1 + 2"))
        assert printer.print(parse_expression("1 + 2")) == first
        assert printer.indent_level == 0
