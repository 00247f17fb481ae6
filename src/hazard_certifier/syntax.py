"""Rust syntax trees and the traversal primitives used by both analysis passes.

Parsing is delegated to ``tree-sitter`` with the ``tree-sitter-rust``
grammar. On top of the raw tree this module offers the five queries the
extractors need:

- ``first_child`` -- first direct child matching a predicate.
- ``first_occurrence`` -- first pre-order descendant (the node included).
- ``all_occurrences`` -- every pre-order descendant (the node included).
- ``has_ancestor`` -- whether any strict ancestor matches.
- ``SourceTree.text`` -- the raw text of a node's span.

tree-sitter never fails on malformed input; it produces ``ERROR`` nodes
instead, so a broken file simply yields fewer matches.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

import tree_sitter_rust
from tree_sitter import Language, Node, Parser, Tree

RUST_LANGUAGE = Language(tree_sitter_rust.language())

# Node kinds of the tree-sitter-rust grammar used by the extractors.
ENUM_ITEM = "enum_item"
TYPE_IDENTIFIER = "type_identifier"
IDENTIFIER = "identifier"
FUNCTION_ITEM = "function_item"
PARAMETERS = "parameters"
PARAMETER = "parameter"
CONST_ITEM = "const_item"
CALL_EXPRESSION = "call_expression"

NodePredicate = Callable[[Node], bool]


def parse_rust(source: bytes) -> Tree:
    """Parse Rust source bytes into a tree-sitter tree."""
    parser = Parser(RUST_LANGUAGE)
    return parser.parse(source)


@dataclass
class SourceTree:
    """A parsed Rust source file.

    Attributes:
        source: The raw source bytes the tree was built from.
        tree: The tree-sitter tree. Built from ``source`` when omitted.
    """

    source: bytes
    tree: Tree = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.tree is None:
            self.tree = parse_rust(self.source)

    @classmethod
    def from_text(cls, text: str) -> SourceTree:
        return cls(text.encode("utf-8"))

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        """Return the source text spanned by ``node``."""
        return self.source[node.start_byte:node.end_byte].decode(
            "utf-8", errors="replace"
        )

    def is_kind_with_child_text(
        self, node: Node, kind: str, child_kind: str, child_text: str
    ) -> bool:
        """True if ``node`` is a ``kind`` whose ``child_kind`` child reads ``child_text``.

        Used to match declarations by name, e.g. the ``enum_item`` whose
        ``type_identifier`` is ``Actions``.
        """
        if node.type != kind:
            return False
        child = first_child(
            node,
            lambda c: c.type == child_kind and self.text(c) == child_text,
        )
        return child is not None


def first_child(node: Node, predicate: NodePredicate) -> Node | None:
    """Return the first direct child of ``node`` satisfying ``predicate``."""
    for child in node.children:
        if predicate(child):
            return child
    return None


def _preorder(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def first_occurrence(node: Node, predicate: NodePredicate) -> Node | None:
    """Return the first node in pre-order (``node`` included) satisfying ``predicate``."""
    for candidate in _preorder(node):
        if predicate(candidate):
            return candidate
    return None


def all_occurrences(node: Node, predicate: NodePredicate) -> list[Node]:
    """Return every node in pre-order (``node`` included) satisfying ``predicate``."""
    return [candidate for candidate in _preorder(node) if predicate(candidate)]


def has_ancestor(node: Node, predicate: NodePredicate) -> bool:
    """Return True if any strict ancestor of ``node`` satisfies ``predicate``."""
    parent = node.parent
    while parent is not None:
        if predicate(parent):
            return True
        parent = parent.parent
    return False


def is_kind(kind: str) -> NodePredicate:
    """Build a predicate matching nodes of the given kind."""
    return lambda node: node.type == kind
