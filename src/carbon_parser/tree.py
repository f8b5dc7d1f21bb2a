"""
Carbon Parse Tree
=================

This module defines the parse tree produced by the grammar engine.

Nodes never copy source text: each ParseNode holds the rule that matched,
the [start, end) character offsets of the match, its children, and a
reference to the one shared source string. Slicing happens only when a
caller asks for `node.text`.

Tree Invariants
---------------
- A child's span lies inside its parent's span
- Sibling spans never overlap and appear in source order
- Keywords and punctuation are not nodes; identifiers, literals, type
  names and operators are leaves

Example
-------
>>> from carbon_parser import parse_expression, TreePrinter
>>> tree = parse_expression("1 + 2")
>>> print(TreePrinter().print(tree))
expression: 1 + 2
  additive: 1 + 2
    integer: 1
    operator: +
    integer: 2
"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Union

from carbon_parser.rules import Rule


# =============================================================================
# Parse Node
# =============================================================================

@dataclass(frozen=True, eq=False)
class ParseNode:
    """
    A labelled span of the source text.

    Attributes:
        rule: The grammar rule that matched
        start: Offset of the first character of the match
        end: Offset one past the last character of the match
        children: Child nodes in source order
        source: The full source text the offsets refer to
    """
    rule: Rule
    start: int
    end: int
    children: tuple["ParseNode", ...] = ()
    source: str = field(default="", repr=False, compare=False)

    def __repr__(self) -> str:
        """Compact form for debugging: Node(RULE, start..end, 'text')."""
        text = self.text
        if len(text) > 24:
            text = text[:21] + "..."
        return f"Node({self.rule.name}, {self.start}..{self.end}, {text!r})"

    def __eq__(self, other: object) -> bool:
        """
        Compare two subtrees node by node.

        Nodes are equal when every corresponding pair has the same rule,
        the same span and the same number of children. The source text is
        not compared. Walks an explicit stack, since left-nested operator
        chains nest thousands of levels deep.
        """
        if not isinstance(other, ParseNode):
            return NotImplemented

        pending = [(self, other)]
        while pending:
            left, right = pending.pop()
            if (left.rule, left.start, left.end, len(left.children)) != (
                right.rule, right.start, right.end, len(right.children)
            ):
                return False
            pending.extend(zip(left.children, right.children))

        return True

    def __hash__(self) -> int:
        return hash((self.rule, self.start, self.end, len(self.children)))

    @property
    def span(self) -> tuple[int, int]:
        """The (start, end) offsets of this node."""
        return (self.start, self.end)

    @property
    def text(self) -> str:
        """The source text this node covers."""
        return self.source[self.start:self.end]

    @property
    def value(self) -> Union[int, float, bool, str, None]:
        """
        The literal value of a leaf node.

        Integers and floats are converted, booleans become True/False and
        strings yield their contents between the quotes exactly as written.
        Identifiers, type names and operators return their text. Interior
        nodes return None.
        """
        if self.rule is Rule.INTEGER:
            return int(self.text)
        if self.rule is Rule.FLOAT:
            return float(self.text)
        if self.rule is Rule.BOOLEAN:
            return self.text == "true"
        if self.rule is Rule.STRING:
            return self.text[1:-1]
        if self.rule.is_leaf:
            return self.text
        return None

    def child(self, rule: Rule) -> Optional["ParseNode"]:
        """Return the first direct child with the given rule, if any."""
        for node in self.children:
            if node.rule is rule:
                return node
        return None

    def walk(self) -> Iterator["ParseNode"]:
        """Yield this node and all descendants in pre-order."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find_all(self, rule: Rule) -> list["ParseNode"]:
        """Return every node in this subtree with the given rule."""
        return [node for node in self.walk() if node.rule is rule]

    def leaves(self) -> list["ParseNode"]:
        """Return the childless nodes of this subtree in source order."""
        return [node for node in self.walk() if not node.children]


# =============================================================================
# Parse Tree
# =============================================================================

@dataclass(frozen=True)
class ParseTree:
    """
    The result of a successful parse.

    For the program rule, `roots` are the top-level declarations in source
    order (empty for an empty program). For every other entry rule it holds
    the single matched node.

    Attributes:
        rule: The entry rule that was parsed
        roots: Root-level nodes in source order
        source: The parsed text
    """
    rule: Rule
    roots: tuple[ParseNode, ...]
    source: str = field(repr=False)

    def __iter__(self) -> Iterator[ParseNode]:
        return iter(self.roots)

    def __len__(self) -> int:
        return len(self.roots)

    def __getitem__(self, index: int) -> ParseNode:
        return self.roots[index]

    @property
    def root(self) -> ParseNode:
        """
        The single root node of a fragment parse.

        Raises:
            ValueError: If the tree does not have exactly one root
        """
        if len(self.roots) != 1:
            raise ValueError(f"tree has {len(self.roots)} roots, not 1")
        return self.roots[0]

    def walk(self) -> Iterator[ParseNode]:
        """Yield every node of every root in pre-order."""
        for root in self.roots:
            yield from root.walk()

    def find_all(self, rule: Rule) -> list[ParseNode]:
        """Return every node in the tree with the given rule."""
        return [node for node in self.walk() if node.rule is rule]

    def leaves(self) -> list[ParseNode]:
        """Return all leaf nodes in source order."""
        return [node for node in self.walk() if not node.children]


# =============================================================================
# Tree Printer
# =============================================================================

class TreePrinter:
    """
    Pretty printer for parse tree debugging.

    Produces one line per node, `rule: text`, indented two spaces per
    level. Node text is collapsed onto one line.

    Usage:
        printer = TreePrinter()
        output = printer.print(tree)
        print(output)
    """

    def __init__(self, max_text: int = 60):
        self.max_text = max_text
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, tree: Union[ParseTree, ParseNode]) -> str:
        """Print the tree (or a single subtree) and return it as a string."""
        self.output = []
        self.indent_level = 0
        roots = tree.roots if isinstance(tree, ParseTree) else (tree,)
        for root in roots:
            self._visit(root)
        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _visit(self, root: ParseNode) -> None:
        """Emit root and its subtree depth first, using an explicit stack."""
        stack = [(root, 0)]
        while stack:
            node, depth = stack.pop()
            self.indent_level = depth
            self._emit(f"{node.rule.name.lower()}: {self._summary(node)}")
            stack.extend((child, depth + 1) for child in reversed(node.children))
        self.indent_level = 0

    def _summary(self, node: ParseNode) -> str:
        """Node text collapsed onto one line and trimmed to max_text."""
        text = " ".join(node.text.split())
        if self.max_text and len(text) > self.max_text:
            text = text[:self.max_text - 3] + "..."
        return text
