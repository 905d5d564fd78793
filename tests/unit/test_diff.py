"""Unit tests for mailblocks.differ.diff: TreeDiff and every change type."""
from __future__ import annotations

import pytest

from mailblocks.differ.diff import (
    ChangeKind,
    ContentChanged,
    NodeAdded,
    NodeMoved,
    NodeRemoved,
    PropertiesChanged,
    TreeDiff,
    TypeChanged,
    diff,
)
from mailblocks.nodes.nodes import DocumentNode
from mailblocks.tree import delete_by_id, insert_child, move_among_siblings, update_by_id

COL_B = "root.children[0].children[0].children[1]"


def _root(*children: DocumentNode) -> DocumentNode:
    return DocumentNode("root", "Root", children=children)


def _col(node_id: str, *children: DocumentNode) -> DocumentNode:
    return DocumentNode(node_id, "Column", children=children)


class TestChangeKind:
    def test_all_kinds(self) -> None:
        assert {k.name for k in ChangeKind} == {
            "NODE_ADDED", "NODE_REMOVED", "CONTENT_CHANGED",
            "PROPERTIES_CHANGED", "TYPE_CHANGED", "NODE_MOVED",
        }

    def test_each_change_carries_its_kind(self) -> None:
        assert NodeAdded().kind is ChangeKind.NODE_ADDED
        assert NodeRemoved().kind is ChangeKind.NODE_REMOVED
        assert ContentChanged().kind is ChangeKind.CONTENT_CHANGED
        assert PropertiesChanged().kind is ChangeKind.PROPERTIES_CHANGED
        assert TypeChanged().kind is ChangeKind.TYPE_CHANGED
        assert NodeMoved().kind is ChangeKind.NODE_MOVED


class TestChangeStrings:
    def test_added(self) -> None:
        change = NodeAdded(node_id="x", component_type="Text", path="root.children[0]")
        assert str(change) == "[+] Text 'x' added at root.children[0]"

    def test_removed(self) -> None:
        change = NodeRemoved(node_id="x", component_type="Text", path="root.children[0]")
        assert str(change) == "[-] Text 'x' removed from root.children[0]"

    def test_content(self) -> None:
        assert str(ContentChanged(node_id="x", old_content="a", new_content="b")) == "[~] 'x' content: 'a' → 'b'"

    def test_properties(self) -> None:
        change = PropertiesChanged(node_id="x", changed=("href", "style.color"))
        assert str(change) == "[~] 'x' properties: href, style.color"

    def test_type(self) -> None:
        assert str(TypeChanged(node_id="x", old_type="Text", new_type="Heading")) == "[~] 'x' type: Text → Heading"

    def test_moved(self) -> None:
        change = NodeMoved(node_id="x", old_path="root.children[0]", new_path="root.children[1]")
        assert str(change) == "[>] 'x' moved: root.children[0] → root.children[1]"


class TestTreeDiff:
    def test_identical_trees(self, sample_tree: DocumentNode) -> None:
        assert diff(sample_tree, sample_tree) == []

    def test_equal_copies(self, sample_tree: DocumentNode) -> None:
        copy = update_by_id(sample_tree, "body", {"content": "Welcome aboard"})
        assert diff(sample_tree, copy) == []

    def test_content_change(self, sample_tree: DocumentNode) -> None:
        changed = update_by_id(sample_tree, "body", {"content": "Changed"})
        assert diff(sample_tree, changed) == [
            ContentChanged(node_id="body", old_content="Welcome aboard", new_content="Changed")
        ]

    def test_removal(self, sample_tree: DocumentNode) -> None:
        assert diff(sample_tree, delete_by_id(sample_tree, "cta")) == [
            NodeRemoved(node_id="cta", component_type="Button", path=COL_B + ".children[1]")
        ]

    def test_subtree_removal_reports_every_node(self, sample_tree: DocumentNode) -> None:
        changes = diff(sample_tree, delete_by_id(sample_tree, "col-b"))
        assert [c.node_id for c in changes] == ["col-b", "body", "cta"]
        assert all(isinstance(c, NodeRemoved) for c in changes)

    def test_addition(self, sample_tree: DocumentNode) -> None:
        new = insert_child(sample_tree, "col-b", DocumentNode("rule", "Divider"))
        assert diff(sample_tree, new) == [
            NodeAdded(node_id="rule", component_type="Divider", path=COL_B + ".children[2]")
        ]

    def test_insert_at_front_shifts_siblings(self, sample_tree: DocumentNode) -> None:
        new = insert_child(sample_tree, "col-b", DocumentNode("rule", "Divider"), index=0)
        changes = diff(sample_tree, new)
        assert changes[0] == NodeAdded(node_id="rule", component_type="Divider", path=COL_B + ".children[0]")
        assert [type(c) for c in changes[1:]] == [NodeMoved, NodeMoved]

    def test_sibling_swap(self, sample_tree: DocumentNode) -> None:
        new = move_among_siblings(sample_tree, "body", "down")
        assert diff(sample_tree, new) == [
            NodeMoved(node_id="cta", old_path=COL_B + ".children[1]", new_path=COL_B + ".children[0]"),
            NodeMoved(node_id="body", old_path=COL_B + ".children[0]", new_path=COL_B + ".children[1]"),
        ]

    def test_move_to_other_parent(self) -> None:
        title = DocumentNode("title", "Heading", content="Hi")
        old = _root(_col("a", title), _col("b"))
        new = _root(_col("a"), _col("b", title))
        assert diff(old, new) == [
            NodeMoved(node_id="title", old_path="root.children[0].children[0]",
                      new_path="root.children[1].children[0]"),
        ]

    def test_reordered_shared_nodes_reported(self) -> None:
        first = DocumentNode("first", "Text", content="1")
        second = DocumentNode("second", "Text", content="2")
        old = _root(first, second)
        new = _root(second, first)
        assert diff(old, new) == [
            NodeMoved(node_id="second", old_path="root.children[1]", new_path="root.children[0]"),
            NodeMoved(node_id="first", old_path="root.children[0]", new_path="root.children[1]"),
        ]

    def test_moved_and_edited(self) -> None:
        old = _root(_col("a", DocumentNode("t", "Text", content="x")), _col("b"))
        new = _root(_col("a"), _col("b", DocumentNode("t", "Text", content="y")))
        kinds = [c.kind for c in diff(old, new)]
        assert kinds == [ChangeKind.NODE_MOVED, ChangeKind.CONTENT_CHANGED]

    def test_type_change(self) -> None:
        old = _root(DocumentNode("t", "Text", content="x"))
        new = _root(DocumentNode("t", "Heading", content="x"))
        assert diff(old, new) == [TypeChanged(node_id="t", old_type="Text", new_type="Heading")]

    def test_properties_change(self, sample_tree: DocumentNode) -> None:
        new = update_by_id(sample_tree, "cta", {"properties": {"href": "https://y.test", "target": "_blank"}})
        assert diff(sample_tree, new) == [PropertiesChanged(node_id="cta", changed=("href", "target"))]

    def test_style_keys_reported_individually(self) -> None:
        old = _root(DocumentNode("t", "Text", {"style": {"color": "#000000", "margin": "0"}}))
        new = _root(DocumentNode("t", "Text", {"style": {"color": "#111111", "padding": "4px"}}))
        (change,) = diff(old, new)
        assert isinstance(change, PropertiesChanged)
        assert change.changed == ("style.color", "style.margin", "style.padding")

    def test_removed_property(self) -> None:
        old = _root(DocumentNode("l", "Link", {"href": "https://x.test", "title": "x"}))
        new = _root(DocumentNode("l", "Link", {"href": "https://x.test"}))
        assert diff(old, new) == [PropertiesChanged(node_id="l", changed=("title",))]

    def test_removals_come_first(self, sample_tree: DocumentNode) -> None:
        new = insert_child(delete_by_id(sample_tree, "title"), "col-a", DocumentNode("intro", "Text", content="x"))
        changes = diff(sample_tree, new)
        assert [type(c) for c in changes] == [NodeRemoved, NodeAdded]

    def test_diff_is_directional(self, sample_tree: DocumentNode) -> None:
        smaller = delete_by_id(sample_tree, "cta")
        assert isinstance(diff(sample_tree, smaller)[0], NodeRemoved)
        assert isinstance(diff(smaller, sample_tree)[0], NodeAdded)

    @pytest.mark.parametrize("engine", [TreeDiff(), None])
    def test_function_matches_class(self, sample_tree: DocumentNode, engine: TreeDiff | None) -> None:
        new = update_by_id(sample_tree, "title", {"content": "Hey"})
        expected = TreeDiff().diff(sample_tree, new)
        actual = engine.diff(sample_tree, new) if engine else diff(sample_tree, new)
        assert actual == expected
