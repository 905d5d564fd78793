"""Tree manipulation API.

Queries and non-destructive mutators over ``DocumentNode`` trees, as used
by interactive editors.
"""
from __future__ import annotations

from mailblocks.tree.mutations import (
    UPDATABLE_KEYS,
    delete_by_id,
    duplicate,
    insert_child,
    move_among_siblings,
    update_by_id,
    update_by_path,
)
from mailblocks.tree.paths import ROOT_PATH, format_path, parse_path, walk
from mailblocks.tree.queries import (
    SelectableElement,
    TreeStats,
    can_insert,
    count_nodes,
    find_by_id,
    find_by_path,
    flatten_editable,
    get_breadcrumbs,
    get_depth,
    get_index,
    get_parent,
    get_parent_path,
    get_path,
    get_siblings,
    get_tree_stats,
    iter_nodes,
)

__all__ = [
    "ROOT_PATH",
    "SelectableElement",
    "TreeStats",
    "UPDATABLE_KEYS",
    "can_insert",
    "count_nodes",
    "delete_by_id",
    "duplicate",
    "find_by_id",
    "find_by_path",
    "flatten_editable",
    "format_path",
    "get_breadcrumbs",
    "get_depth",
    "get_index",
    "get_parent",
    "get_parent_path",
    "get_path",
    "get_siblings",
    "get_tree_stats",
    "insert_child",
    "iter_nodes",
    "move_among_siblings",
    "parse_path",
    "update_by_id",
    "update_by_path",
    "walk",
]
