"""Structural diff between two document trees.

``TreeDiff`` matches nodes by id and reports what changed from the old
tree to the new one: nodes added or removed, content, property or type
changes, and nodes that moved to a different parent or position.

Usage
-----
::

    from mailblocks.differ import diff

    for change in diff(old_tree, new_tree):
        print(change)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Union

from mailblocks.nodes.nodes import DocumentNode
from mailblocks.tree.paths import walk


class ChangeKind(Enum):
    """Enumeration of all change kinds in a tree diff."""

    NODE_ADDED = auto()
    NODE_REMOVED = auto()
    CONTENT_CHANGED = auto()
    PROPERTIES_CHANGED = auto()
    TYPE_CHANGED = auto()
    NODE_MOVED = auto()


# ---------------------------------------------------------------------------
# Change dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NodeAdded:
    """A node present only in the new tree."""

    kind: ChangeKind = ChangeKind.NODE_ADDED
    node_id: str = ""
    component_type: str = ""
    path: str = ""

    def __str__(self) -> str:
        return f"[+] {self.component_type} '{self.node_id}' added at {self.path}"


@dataclass(frozen=True)
class NodeRemoved:
    """A node present only in the old tree."""

    kind: ChangeKind = ChangeKind.NODE_REMOVED
    node_id: str = ""
    component_type: str = ""
    path: str = ""

    def __str__(self) -> str:
        return f"[-] {self.component_type} '{self.node_id}' removed from {self.path}"


@dataclass(frozen=True)
class ContentChanged:
    """A node's content changed."""

    kind: ChangeKind = ChangeKind.CONTENT_CHANGED
    node_id: str = ""
    old_content: str | None = None
    new_content: str | None = None

    def __str__(self) -> str:
        return f"[~] '{self.node_id}' content: {self.old_content!r} → {self.new_content!r}"


@dataclass(frozen=True)
class PropertiesChanged:
    """Top-level property or style keys of a node changed.

    ``changed`` lists every key whose value differs, was added, or was
    removed; style keys are reported as ``style.<key>``.
    """

    kind: ChangeKind = ChangeKind.PROPERTIES_CHANGED
    node_id: str = ""
    changed: tuple[str, ...] = ()

    def __str__(self) -> str:
        return f"[~] '{self.node_id}' properties: {', '.join(self.changed)}"


@dataclass(frozen=True)
class TypeChanged:
    """A node kept its id but changed component type."""

    kind: ChangeKind = ChangeKind.TYPE_CHANGED
    node_id: str = ""
    old_type: str = ""
    new_type: str = ""

    def __str__(self) -> str:
        return f"[~] '{self.node_id}' type: {self.old_type} → {self.new_type}"


@dataclass(frozen=True)
class NodeMoved:
    """A node changed parent or position among its siblings."""

    kind: ChangeKind = ChangeKind.NODE_MOVED
    node_id: str = ""
    old_path: str = ""
    new_path: str = ""

    def __str__(self) -> str:
        return f"[>] '{self.node_id}' moved: {self.old_path} → {self.new_path}"


TreeChange = Union[NodeAdded, NodeRemoved, ContentChanged, PropertiesChanged, TypeChanged, NodeMoved]


@dataclass(frozen=True)
class _Entry:
    node: DocumentNode
    path: str
    parent_id: str | None
    index: int


def _index(tree: DocumentNode) -> dict[str, _Entry]:
    entries: dict[str, _Entry] = {}
    parents: dict[str, tuple[str | None, int]] = {tree.id: (None, 0)}
    for path, node in walk(tree):
        for i, child in enumerate(node.child_list()):
            parents.setdefault(child.id, (node.id, i))
        if node.id not in entries:
            parent_id, index = parents.get(node.id, (None, 0))
            entries[node.id] = _Entry(node, path, parent_id, index)
    return entries


def _changed_keys(old: dict[str, Any], new: dict[str, Any]) -> tuple[str, ...]:
    keys: list[str] = []
    for key in list(old) + [k for k in new if k not in old]:
        if key == "style" and isinstance(old.get(key), dict) and isinstance(new.get(key), dict):
            keys.extend(f"style.{k}" for k in _changed_keys(old[key], new[key]))
        elif old.get(key, _MISSING) != new.get(key, _MISSING):
            keys.append(key)
    return tuple(keys)


_MISSING = object()


class TreeDiff:
    """Computes structural changes between two document trees.

    Nodes are matched by id.  Changes come out in document order: removals
    in old-tree order first, then additions, moves and modifications in
    new-tree order.
    """

    def diff(self, old: DocumentNode, new: DocumentNode) -> list[TreeChange]:
        """Return the changes that turn ``old`` into ``new``."""
        before = _index(old)
        after = _index(new)
        changes: list[TreeChange] = []

        for node_id, entry in before.items():
            if node_id not in after:
                changes.append(NodeRemoved(
                    node_id=node_id, component_type=entry.node.component_type, path=entry.path
                ))

        for node_id, entry in after.items():
            previous = before.get(node_id)
            node = entry.node
            if previous is None:
                changes.append(NodeAdded(node_id=node_id, component_type=node.component_type, path=entry.path))
                continue
            if (previous.parent_id, previous.index) != (entry.parent_id, entry.index):
                changes.append(NodeMoved(node_id=node_id, old_path=previous.path, new_path=entry.path))
            if previous.node is node:
                continue
            if previous.node.component_type != node.component_type:
                changes.append(TypeChanged(
                    node_id=node_id,
                    old_type=previous.node.component_type,
                    new_type=node.component_type,
                ))
            if previous.node.content != node.content:
                changes.append(ContentChanged(
                    node_id=node_id, old_content=previous.node.content, new_content=node.content
                ))
            keys = _changed_keys(previous.node.properties, node.properties)
            if keys:
                changes.append(PropertiesChanged(node_id=node_id, changed=keys))
        return changes


def diff(old: DocumentNode, new: DocumentNode) -> list[TreeChange]:
    """Convenience function: compute the diff between ``old`` and ``new``."""
    return TreeDiff().diff(old, new)
