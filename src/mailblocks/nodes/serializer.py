"""Serialization of document trees to and from JSON and YAML.

The serialized form is a plain dict/list structure with camelCase keys
(``id``, ``componentType``, ``properties``, ``content``, ``children``,
``inlineMarkup``) that maps naturally to both formats and to the shape
editors exchange over the wire.

Usage
-----
::

    from mailblocks.nodes.serializer import NodeSerializer

    serializer = NodeSerializer()
    text = serializer.to_json(tree)
    tree2 = serializer.from_json(text)
    assert tree == tree2
"""
from __future__ import annotations

import copy
import json
from typing import Any

import yaml

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import DocumentNode


class NodeSerializer:
    """Converts between ``DocumentNode`` trees and plain Python dicts.

    Parameters
    ----------
    allow_inline_markup:
        When ``False`` (the default) the ``inlineMarkup`` flag is dropped on
        deserialization so that documents from untrusted sources are always
        rendered escaped.
    """

    def __init__(self, allow_inline_markup: bool = False) -> None:
        self._allow_inline_markup = allow_inline_markup

    # ------------------------------------------------------------------
    # Serialization (tree → dict)
    # ------------------------------------------------------------------

    def to_dict(self, node: DocumentNode) -> dict[str, Any]:
        """Serialize ``node`` and its subtree to a JSON-compatible dict."""
        data: dict[str, Any] = {
            "id": node.id,
            "componentType": node.component_type,
            "properties": copy.deepcopy(node.properties),
        }
        if node.content is not None:
            data["content"] = node.content
        if node.children is not None:
            data["children"] = [self.to_dict(child) for child in node.children]
        if node.inline_markup:
            data["inlineMarkup"] = True
        return data

    # ------------------------------------------------------------------
    # Deserialization (dict → tree)
    # ------------------------------------------------------------------

    def from_dict(self, data: dict[str, Any], path: str = "root") -> DocumentNode:
        """Deserialize a tree from a dict produced by ``to_dict``.

        Raises
        ------
        StructuralError
            If a node is not a mapping or lacks ``id`` / ``componentType``.
        """
        if not isinstance(data, dict):
            raise StructuralError("Expected a node mapping", path=path)
        try:
            node_id = str(data["id"])
            component_type = str(data["componentType"])
        except KeyError as exc:
            raise StructuralError(f"Node is missing required key {exc.args[0]!r}", path=path) from exc

        raw_children = data.get("children")
        children: tuple[DocumentNode, ...] | None = None
        if raw_children is not None:
            children = tuple(
                self.from_dict(child, f"{path}.children[{i}]")
                for i, child in enumerate(raw_children)
            )
        content = data.get("content")
        return DocumentNode(
            id=node_id,
            component_type=component_type,
            properties=dict(data.get("properties") or {}),
            content=None if content is None else str(content),
            children=children,
            inline_markup=bool(data.get("inlineMarkup")) and self._allow_inline_markup,
        )

    # ------------------------------------------------------------------
    # JSON helpers
    # ------------------------------------------------------------------

    def to_json(self, node: DocumentNode, indent: int = 2) -> str:
        """Serialize a tree to a JSON string."""
        return json.dumps(self.to_dict(node), indent=indent, ensure_ascii=False)

    def from_json(self, text: str) -> DocumentNode:
        """Deserialize a tree from a JSON string."""
        data: dict[str, Any] = json.loads(text)
        return self.from_dict(data)

    # ------------------------------------------------------------------
    # YAML helpers
    # ------------------------------------------------------------------

    def to_yaml(self, node: DocumentNode) -> str:
        """Serialize a tree to a YAML string."""
        return yaml.dump(
            self.to_dict(node), default_flow_style=False, allow_unicode=True, sort_keys=False
        )

    def from_yaml(self, text: str) -> DocumentNode:
        """Deserialize a tree from a YAML string."""
        data: dict[str, Any] = yaml.safe_load(text)
        return self.from_dict(data)
