"""Node path helpers.

Paths address a node by its position from the root, in the form
``root.children[0].children[2]``.  The bare string ``root`` addresses the
tree's root node.
"""
from __future__ import annotations

import re
from collections.abc import Iterator

from mailblocks.nodes.nodes import DocumentNode

ROOT_PATH = "root"

_SEGMENT = re.compile(r"\.children\[(\d+)\]")
_PATH = re.compile(r"^root(?:\.children\[\d+\])*$")


def format_path(indices: tuple[int, ...] | list[int]) -> str:
    """Return the path string for a sequence of child indices."""
    return ROOT_PATH + "".join(f".children[{i}]" for i in indices)


def parse_path(path: str) -> tuple[int, ...]:
    """Return the child indices encoded in ``path``.

    Raises
    ------
    ValueError
        If ``path`` is not of the form ``root.children[i]...``.
    """
    if not _PATH.match(path):
        raise ValueError(f"Invalid node path {path!r}; expected 'root.children[i]...'")
    return tuple(int(m) for m in _SEGMENT.findall(path))


def walk(node: DocumentNode, path: str = ROOT_PATH) -> Iterator[tuple[str, DocumentNode]]:
    """Yield ``(path, node)`` pairs in depth-first pre-order."""
    yield path, node
    for i, child in enumerate(node.child_list()):
        yield from walk(child, f"{path}.children[{i}]")


def walk_indices(
    node: DocumentNode, indices: tuple[int, ...] = ()
) -> Iterator[tuple[tuple[int, ...], DocumentNode]]:
    """Yield ``(indices, node)`` pairs in depth-first pre-order."""
    yield indices, node
    for i, child in enumerate(node.child_list()):
        yield from walk_indices(child, indices + (i,))
