"""Unit tests for mailblocks.nodes: the node model and NodeSerializer."""
from __future__ import annotations

import dataclasses
import json

import pytest

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import (
    CONTAINER_TYPES,
    LEAF_TYPES,
    ComponentType,
    DocumentNode,
    is_container_type,
    is_known_type,
)
from mailblocks.nodes.serializer import NodeSerializer


# ---------------------------------------------------------------------------
# ComponentType / DocumentNode
# ---------------------------------------------------------------------------


class TestComponentType:
    def test_containers_are_the_layout_types(self) -> None:
        assert CONTAINER_TYPES == {"Root", "Section", "Row", "Column"}

    def test_leaf_and_container_sets_partition_the_enum(self) -> None:
        assert CONTAINER_TYPES | LEAF_TYPES == {t.value for t in ComponentType}
        assert not CONTAINER_TYPES & LEAF_TYPES

    def test_str_is_value(self) -> None:
        assert str(ComponentType.CODE_BLOCK) == "CodeBlock"

    def test_is_container_type_accepts_enum(self) -> None:
        assert is_container_type(ComponentType.ROW)
        assert not is_container_type("Text")

    def test_is_known_type(self) -> None:
        assert is_known_type("Preview")
        assert not is_known_type("Carousel")


class TestDocumentNode:
    def test_enum_type_normalized_to_string(self) -> None:
        node = DocumentNode("a", ComponentType.TEXT, content="hi")
        assert node.component_type == "Text"
        assert node == DocumentNode("a", "Text", content="hi")

    def test_children_list_converted_to_tuple(self) -> None:
        child = DocumentNode("c", "Text")
        node = DocumentNode("p", "Section", children=[child])  # type: ignore[arg-type]
        assert node.children == (child,)

    def test_is_frozen(self) -> None:
        node = DocumentNode("a", "Text")
        with pytest.raises(dataclasses.FrozenInstanceError):
            node.content = "x"  # type: ignore[misc]

    def test_is_container(self) -> None:
        assert DocumentNode("s", "Section").is_container
        assert not DocumentNode("t", "Text").is_container

    def test_style_defaults_to_empty(self) -> None:
        assert DocumentNode("t", "Text").style == {}

    def test_style_ignores_non_mapping(self) -> None:
        assert DocumentNode("t", "Text", {"style": "color:red"}).style == {}

    def test_child_list_of_leaf_is_empty(self) -> None:
        assert DocumentNode("t", "Text").child_list() == ()

    def test_hashable_despite_properties(self) -> None:
        node = DocumentNode("t", "Text", {"style": {"color": "#000000"}})
        assert hash(node) == hash(DocumentNode("t", "Text", {"other": 1}))


# ---------------------------------------------------------------------------
# NodeSerializer
# ---------------------------------------------------------------------------


class TestNodeSerializer:
    def test_to_dict_uses_camel_case_keys(self, sample_tree: DocumentNode) -> None:
        data = NodeSerializer().to_dict(sample_tree)
        assert data["id"] == "root"
        assert data["componentType"] == "Root"
        assert data["children"][0]["componentType"] == "Section"

    def test_leaf_without_content_omits_key(self) -> None:
        data = NodeSerializer().to_dict(DocumentNode("d", "Divider"))
        assert "content" not in data
        assert "children" not in data

    def test_to_dict_copies_properties(self) -> None:
        node = DocumentNode("t", "Text", {"style": {"color": "#000000"}})
        data = NodeSerializer().to_dict(node)
        data["properties"]["style"]["color"] = "#ffffff"
        assert node.properties["style"]["color"] == "#000000"

    def test_json_round_trip(self, sample_tree: DocumentNode) -> None:
        serializer = NodeSerializer()
        assert serializer.from_json(serializer.to_json(sample_tree)) == sample_tree

    def test_yaml_round_trip(self, sample_tree: DocumentNode) -> None:
        serializer = NodeSerializer()
        assert serializer.from_yaml(serializer.to_yaml(sample_tree)) == sample_tree

    def test_json_is_valid_json(self, sample_tree: DocumentNode) -> None:
        assert json.loads(NodeSerializer().to_json(sample_tree))["id"] == "root"

    def test_inline_markup_dropped_by_default(self) -> None:
        node = DocumentNode("t", "Text", content="<b>x</b>", inline_markup=True)
        data = NodeSerializer().to_dict(node)
        assert data["inlineMarkup"] is True
        assert NodeSerializer().from_dict(data).inline_markup is False

    def test_inline_markup_kept_when_allowed(self) -> None:
        node = DocumentNode("t", "Text", content="<b>x</b>", inline_markup=True)
        serializer = NodeSerializer(allow_inline_markup=True)
        assert serializer.from_dict(serializer.to_dict(node)).inline_markup is True

    def test_missing_component_type_raises_with_path(self) -> None:
        data = {"id": "root", "componentType": "Root", "children": [{"id": "x"}]}
        with pytest.raises(StructuralError) as exc_info:
            NodeSerializer().from_dict(data)
        assert exc_info.value.path == "root.children[0]"
        assert "componentType" in exc_info.value.message

    def test_non_mapping_node_raises(self) -> None:
        with pytest.raises(StructuralError):
            NodeSerializer().from_dict(["not", "a", "node"])  # type: ignore[arg-type]
