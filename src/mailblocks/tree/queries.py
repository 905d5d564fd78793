"""Read-only queries over document trees.

Every function takes the tree's root node first and never modifies it.
Lookups by id return ``None`` (or an empty result, ``-1`` for indices)
when the id is not present.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from mailblocks.nodes.nodes import DocumentNode
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry
from mailblocks.tree.paths import ROOT_PATH, format_path, parse_path, walk, walk_indices


@dataclass(frozen=True)
class SelectableElement:
    """An editable node as offered to an editor for selection.

    Parameters
    ----------
    id:
        The node id.
    path:
        Path of the node from the root.
    component_type:
        The node's component type.
    properties:
        The node's properties (shared with the node, do not mutate).
    content:
        The node's inline content, if any.
    parent_path:
        Path of the parent, ``None`` for the root.
    """

    id: str
    path: str
    component_type: str
    properties: dict[str, Any] = field(hash=False)
    content: str | None = None
    parent_path: str | None = None


@dataclass(frozen=True)
class TreeStats:
    """Summary statistics for a tree."""

    total_components: int
    max_depth: int
    component_types: dict[str, int] = field(hash=False)
    editable_components: int


def iter_nodes(tree: DocumentNode) -> Iterator[DocumentNode]:
    """Yield every node of ``tree`` in depth-first pre-order."""
    for _, node in walk(tree):
        yield node


def locate(tree: DocumentNode, node_id: str) -> tuple[int, ...] | None:
    """Return the child indices leading to ``node_id``, or ``None``."""
    for indices, node in walk_indices(tree):
        if node.id == node_id:
            return indices
    return None


def node_at(tree: DocumentNode, indices: tuple[int, ...]) -> DocumentNode | None:
    """Return the node at ``indices``, or ``None`` if out of range."""
    node = tree
    for i in indices:
        children = node.child_list()
        if i >= len(children):
            return None
        node = children[i]
    return node


def find_by_id(tree: DocumentNode, node_id: str) -> DocumentNode | None:
    """Return the node with ``node_id``, or ``None``."""
    for node in iter_nodes(tree):
        if node.id == node_id:
            return node
    return None


def find_by_path(tree: DocumentNode, path: str) -> DocumentNode | None:
    """Return the node at ``path``, or ``None`` if the path runs off the tree.

    Raises
    ------
    ValueError
        If ``path`` is malformed.
    """
    return node_at(tree, parse_path(path))


def get_path(tree: DocumentNode, node_id: str) -> str | None:
    """Return the path of ``node_id``, or ``None``."""
    indices = locate(tree, node_id)
    return None if indices is None else format_path(indices)


def get_parent(tree: DocumentNode, node_id: str) -> DocumentNode | None:
    """Return the parent of ``node_id``; ``None`` for the root or unknown ids."""
    indices = locate(tree, node_id)
    if not indices:
        return None
    return node_at(tree, indices[:-1])


def get_parent_path(path: str) -> str | None:
    """Return the path of the parent of ``path``; ``None`` for the root."""
    indices = parse_path(path)
    if not indices:
        return None
    return format_path(indices[:-1])


def get_siblings(tree: DocumentNode, node_id: str) -> tuple[DocumentNode, ...]:
    """Return the other children of ``node_id``'s parent, in order."""
    parent = get_parent(tree, node_id)
    if parent is None:
        return ()
    return tuple(c for c in parent.child_list() if c.id != node_id)


def get_index(tree: DocumentNode, node_id: str) -> int:
    """Return the position of ``node_id`` among its siblings, or ``-1``."""
    indices = locate(tree, node_id)
    if not indices:
        return -1
    return indices[-1]


def get_depth(tree: DocumentNode, node_id: str) -> int:
    """Return the depth of ``node_id`` (root is 0), or ``-1``."""
    indices = locate(tree, node_id)
    return -1 if indices is None else len(indices)


def get_breadcrumbs(tree: DocumentNode, node_id: str) -> list[str]:
    """Return the component types from the root down to ``node_id``.

    Returns an empty list if the id is not in the tree.
    """
    indices = locate(tree, node_id)
    if indices is None:
        return []
    crumbs = [tree.component_type]
    node = tree
    for i in indices:
        node = node.child_list()[i]
        crumbs.append(node.component_type)
    return crumbs


def count_nodes(tree: DocumentNode) -> int:
    """Return the number of nodes in ``tree``, including the root."""
    return sum(1 for _ in iter_nodes(tree))


def get_tree_stats(
    tree: DocumentNode, registry: ComponentRegistry = DEFAULT_REGISTRY
) -> TreeStats:
    """Return node counts, type histogram and maximum depth of ``tree``."""
    types: Counter[str] = Counter()
    max_depth = 0
    editable = 0
    for indices, node in walk_indices(tree):
        types[node.component_type] += 1
        max_depth = max(max_depth, len(indices))
        if registry.is_editable(node.component_type):
            editable += 1
    return TreeStats(
        total_components=sum(types.values()),
        max_depth=max_depth,
        component_types=dict(types),
        editable_components=editable,
    )


def flatten_editable(
    tree: DocumentNode, registry: ComponentRegistry = DEFAULT_REGISTRY
) -> list[SelectableElement]:
    """Return every editable node of ``tree`` in document order."""
    elements: list[SelectableElement] = []
    for path, node in walk(tree):
        if not registry.is_editable(node.component_type):
            continue
        elements.append(SelectableElement(
            id=node.id,
            path=path,
            component_type=node.component_type,
            properties=node.properties,
            content=node.content,
            parent_path=None if path == ROOT_PATH else get_parent_path(path),
        ))
    return elements


def can_insert(
    tree: DocumentNode,
    parent_id: str,
    component_type: str,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> bool:
    """Return True if a ``component_type`` node may be inserted under ``parent_id``."""
    parent = find_by_id(tree, parent_id)
    if parent is None or not registry.is_container(parent.component_type):
        return False
    return str(component_type) in registry and str(component_type) != "Root"
