"""Tests for the tree-sitter traversal primitives."""

from __future__ import annotations

from hazard_certifier.syntax import (
    CALL_EXPRESSION,
    CONST_ITEM,
    ENUM_ITEM,
    FUNCTION_ITEM,
    IDENTIFIER,
    TYPE_IDENTIFIER,
    SourceTree,
    all_occurrences,
    first_child,
    first_occurrence,
    has_ancestor,
    is_kind,
)

SOURCE = """\
const FIRST: u8 = 1;

enum Actions {
    Open,
    Close,
}

mod inner {
    enum Actions {
        Hidden,
    }
    fn new() {}
}

fn new(a: u8, b: u8) {
    run(build(a), b);
}
"""


def _tree() -> SourceTree:
    return SourceTree.from_text(SOURCE)


class TestFirstChild:
    def test_finds_top_level_only(self) -> None:
        tree = _tree()
        node = first_child(tree.root, is_kind(ENUM_ITEM))
        assert node is not None
        assert "Open" in tree.text(node)
        assert "Hidden" not in tree.text(node)

    def test_none_when_absent(self) -> None:
        tree = _tree()
        assert first_child(tree.root, is_kind("struct_item")) is None


class TestOccurrences:
    def test_first_occurrence_is_preorder(self) -> None:
        tree = _tree()
        node = first_occurrence(
            tree.root,
            lambda n: tree.is_kind_with_child_text(n, FUNCTION_ITEM, IDENTIFIER, "new"),
        )
        assert node is not None
        assert tree.text(node) == "fn new() {}"

    def test_first_occurrence_includes_node_itself(self) -> None:
        tree = _tree()
        assert first_occurrence(tree.root, lambda n: True) == tree.root

    def test_all_occurrences_unbounded_depth(self) -> None:
        tree = _tree()
        enums = all_occurrences(tree.root, is_kind(ENUM_ITEM))
        assert len(enums) == 2

    def test_all_occurrences_in_order(self) -> None:
        tree = _tree()
        actions = first_child(
            tree.root,
            lambda n: tree.is_kind_with_child_text(n, ENUM_ITEM, TYPE_IDENTIFIER, "Actions"),
        )
        assert actions is not None
        names = [tree.text(n) for n in all_occurrences(actions, is_kind(IDENTIFIER))]
        assert names == ["Open", "Close"]

    def test_const_items(self) -> None:
        tree = _tree()
        consts = all_occurrences(tree.root, is_kind(CONST_ITEM))
        assert [tree.text(c) for c in consts] == ["const FIRST: u8 = 1;"]


class TestHasAncestor:
    def test_outermost_call_has_no_call_ancestor(self) -> None:
        tree = _tree()
        calls = all_occurrences(tree.root, is_kind(CALL_EXPRESSION))
        outermost = [c for c in calls if not has_ancestor(c, is_kind(CALL_EXPRESSION))]
        assert [tree.text(c) for c in outermost] == ["run(build(a), b)"]

    def test_root_has_no_ancestor(self) -> None:
        tree = _tree()
        assert has_ancestor(tree.root, lambda n: True) is False


class TestSourceTree:
    def test_text_of_root_is_source(self) -> None:
        tree = _tree()
        assert tree.text(tree.root).startswith("const FIRST")

    def test_non_ascii_text(self) -> None:
        tree = SourceTree.from_text('const NAME: &str = "lumière";\n')
        const = first_occurrence(tree.root, is_kind(CONST_ITEM))
        assert const is not None
        assert tree.text(const) == 'const NAME: &str = "lumière";'

    def test_malformed_source_still_parses(self) -> None:
        tree = SourceTree.from_text("fn broken( {")
        assert tree.root is not None
