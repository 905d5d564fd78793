"""Tree diff module.

Exports the ``TreeDiff`` class and the ``diff`` convenience function,
plus all ``TreeChange`` union member types.
"""
from __future__ import annotations

from mailblocks.differ.diff import (
    ChangeKind,
    ContentChanged,
    NodeAdded,
    NodeMoved,
    NodeRemoved,
    PropertiesChanged,
    TreeChange,
    TreeDiff,
    TypeChanged,
    diff,
)

__all__ = [
    "ChangeKind",
    "ContentChanged",
    "NodeAdded",
    "NodeMoved",
    "NodeRemoved",
    "PropertiesChanged",
    "TreeChange",
    "TreeDiff",
    "TypeChanged",
    "diff",
]
