"""Non-destructive tree mutations.

Every mutator returns a new tree.  Only the nodes on the path from the
root to the changed node are rebuilt; every other subtree of the result
is the very same object as in the input.  When the target id is not
present, the input tree itself is returned unchanged.

Mutators never leave a tree half-applied: all checks run before the new
tree is assembled, and a failed check raises ``StructuralError``.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Any

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry
from mailblocks.tree.paths import ROOT_PATH, format_path, parse_path
from mailblocks.tree.queries import iter_nodes, locate, node_at

#: Keys accepted by ``update_by_id`` / ``update_by_path``.
UPDATABLE_KEYS: frozenset[str] = frozenset({"properties", "content", "children"})

_DIRECTIONS = ("up", "down")


def _rebuild(
    node: DocumentNode,
    indices: tuple[int, ...],
    fn: Callable[[DocumentNode], DocumentNode],
) -> DocumentNode:
    if not indices:
        return fn(node)
    children = list(node.child_list())
    head, rest = indices[0], indices[1:]
    children[head] = _rebuild(children[head], rest, fn)
    return dataclasses.replace(node, children=tuple(children))


def _with_children(node: DocumentNode, children: list[DocumentNode]) -> DocumentNode:
    return dataclasses.replace(node, children=tuple(children))


def _collect_ids(node: DocumentNode) -> list[str]:
    return [n.id for n in iter_nodes(node)]


def _check_new_ids(
    tree: DocumentNode,
    incoming: list[DocumentNode],
    path: str,
    replaced: DocumentNode | None = None,
) -> None:
    existing = set(_collect_ids(tree))
    if replaced is not None:
        for child in replaced.child_list():
            existing.difference_update(_collect_ids(child))
    seen: set[str] = set()
    for subtree in incoming:
        for node_id in _collect_ids(subtree):
            if node_id in existing or node_id in seen:
                raise StructuralError(f"Node id {node_id!r} already exists in the tree", path=path)
            seen.add(node_id)


def _check_subtree(node: DocumentNode, path: str, registry: ComponentRegistry) -> None:
    # Deferred: mailblocks.validator imports mailblocks.tree.
    from mailblocks.validator.validator import ensure_valid

    if node.component_type == ComponentType.ROOT.value:
        raise StructuralError("Root nodes cannot be inserted into a tree", path=path)
    try:
        ensure_valid(node, registry)
    except StructuralError as exc:
        raise StructuralError(exc.message, path=path + exc.path[len(ROOT_PATH):]) from exc


def _apply_patch(
    tree: DocumentNode,
    indices: tuple[int, ...],
    patch: Mapping[str, Any],
    registry: ComponentRegistry,
) -> DocumentNode:
    unknown = set(patch) - UPDATABLE_KEYS
    if unknown:
        raise ValueError(
            f"Cannot update {', '.join(sorted(unknown))}; "
            f"allowed keys are {', '.join(sorted(UPDATABLE_KEYS))}"
        )
    target = node_at(tree, indices)
    if target is None:
        return tree
    path = format_path(indices)

    changes: dict[str, Any] = {}
    if "properties" in patch:
        changes["properties"] = dict(patch["properties"] or {})
    if "content" in patch:
        content = patch["content"]
        changes["content"] = None if content is None else str(content)
        changes["inline_markup"] = False
    if "children" in patch:
        children = patch["children"]
        if children is not None:
            children = tuple(children)
            if children and not registry.is_container(target.component_type):
                raise StructuralError(
                    f"{target.component_type} node {target.id!r} cannot hold children",
                    path=path,
                )
            for i, child in enumerate(children):
                _check_subtree(child, f"{path}.children[{i}]", registry)
            _check_new_ids(tree, list(children), path, replaced=target)
        changes["children"] = children

    return _rebuild(tree, indices, lambda node: dataclasses.replace(node, **changes))


def update_by_id(
    tree: DocumentNode,
    node_id: str,
    patch: Mapping[str, Any],
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> DocumentNode:
    """Return a tree where ``node_id`` has ``patch`` applied.

    Parameters
    ----------
    tree:
        The root of the tree.
    node_id:
        Id of the node to update.
    patch:
        Mapping with any of ``properties``, ``content`` and ``children``.
        Each present key replaces the node's value.  Setting ``content``
        clears the node's raw-markup flag.

    Raises
    ------
    ValueError
        If ``patch`` contains other keys.
    StructuralError
        If children are given to a leaf, if a new child subtree breaks a
        structural rule, or if their ids collide with the tree.
    """
    indices = locate(tree, node_id)
    if indices is None:
        unknown = set(patch) - UPDATABLE_KEYS
        if unknown:
            raise ValueError(f"Cannot update {', '.join(sorted(unknown))}")
        return tree
    return _apply_patch(tree, indices, patch, registry)


def update_by_path(
    tree: DocumentNode,
    path: str,
    patch: Mapping[str, Any],
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> DocumentNode:
    """Like ``update_by_id``, addressing the node by path."""
    return _apply_patch(tree, parse_path(path), patch, registry)


def delete_by_id(tree: DocumentNode, node_id: str) -> DocumentNode:
    """Return a tree without ``node_id`` and its subtree.

    Deleting the root, or an id that is not present, returns ``tree``.
    """
    indices = locate(tree, node_id)
    if not indices:
        return tree
    index = indices[-1]

    def drop(parent: DocumentNode) -> DocumentNode:
        children = list(parent.child_list())
        del children[index]
        return _with_children(parent, children)

    return _rebuild(tree, indices[:-1], drop)


def move_among_siblings(tree: DocumentNode, node_id: str, direction: str) -> DocumentNode:
    """Swap ``node_id`` with its previous (``"up"``) or next (``"down"``) sibling.

    Moving past either end of the sibling list returns ``tree`` unchanged.

    Raises
    ------
    ValueError
        If ``direction`` is neither ``"up"`` nor ``"down"``.
    """
    if direction not in _DIRECTIONS:
        raise ValueError(f"direction must be 'up' or 'down', got {direction!r}")
    indices = locate(tree, node_id)
    if not indices:
        return tree
    parent = node_at(tree, indices[:-1])
    assert parent is not None
    index = indices[-1]
    new_index = index - 1 if direction == "up" else index + 1
    if new_index < 0 or new_index >= len(parent.child_list()):
        return tree

    def swap(node: DocumentNode) -> DocumentNode:
        children = list(node.child_list())
        children[index], children[new_index] = children[new_index], children[index]
        return _with_children(node, children)

    return _rebuild(tree, indices[:-1], swap)


def _fresh_copy(node: DocumentNode, used: set[str]) -> DocumentNode:
    candidate = f"{node.id}-copy"
    n = 2
    while candidate in used:
        candidate = f"{node.id}-copy-{n}"
        n += 1
    used.add(candidate)
    children = None
    if node.children is not None:
        children = tuple(_fresh_copy(child, used) for child in node.children)
    return dataclasses.replace(node, id=candidate, children=children)


def duplicate(tree: DocumentNode, node_id: str) -> DocumentNode:
    """Insert a copy of ``node_id`` right after it, with fresh ids throughout.

    Copies are named ``<id>-copy``, then ``<id>-copy-2`` and so on until the
    id is unused.  Duplicating the root, or an unknown id, returns ``tree``.
    """
    indices = locate(tree, node_id)
    if not indices:
        return tree
    original = node_at(tree, indices)
    assert original is not None
    copy = _fresh_copy(original, set(_collect_ids(tree)))
    index = indices[-1]

    def insert_after(parent: DocumentNode) -> DocumentNode:
        children = list(parent.child_list())
        children.insert(index + 1, copy)
        return _with_children(parent, children)

    return _rebuild(tree, indices[:-1], insert_after)


def insert_child(
    tree: DocumentNode,
    parent_id: str,
    node: DocumentNode,
    index: int | None = None,
    registry: ComponentRegistry = DEFAULT_REGISTRY,
) -> DocumentNode:
    """Insert ``node`` as a child of ``parent_id``.

    Parameters
    ----------
    index:
        Position among the parent's children; ``None`` appends.  Values are
        clamped to the valid range.

    Raises
    ------
    StructuralError
        If the parent is missing or not a container, if ``node`` is a Root,
        if ``node``'s subtree breaks a structural rule, or if any id in it
        already exists in ``tree``.
    """
    indices = locate(tree, parent_id)
    if indices is None:
        raise StructuralError(f"Parent {parent_id!r} not found", path=parent_id)
    parent = node_at(tree, indices)
    assert parent is not None
    path = format_path(indices)
    if not registry.is_container(parent.component_type):
        raise StructuralError(
            f"{parent.component_type} node {parent.id!r} cannot hold children", path=path
        )
    children = list(parent.child_list())
    position = len(children) if index is None else max(0, min(index, len(children)))
    _check_subtree(node, f"{path}.children[{position}]", registry)
    _check_new_ids(tree, [node], path)

    children.insert(position, node)
    new_parent = _with_children(parent, children)
    return _rebuild(tree, indices, lambda _: new_parent)
