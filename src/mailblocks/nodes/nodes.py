"""Document node model for mailblocks.

Every tree produced by the block compiler, the markup parser, or the tree
manipulation API is built from ``DocumentNode`` instances.  Nodes are
frozen dataclasses; trees are treated as immutable values and every
mutation returns a new tree that shares untouched subtrees with the input.

Component types split into *containers* (``Root``, ``Section``, ``Row``,
``Column``), which may hold children, and *leaves*, which carry ``content``
only.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ComponentType(str, Enum):
    """Fixed enumeration of component types a tree may contain."""

    ROOT = "Root"
    SECTION = "Section"
    ROW = "Row"
    COLUMN = "Column"
    TEXT = "Text"
    HEADING = "Heading"
    BUTTON = "Button"
    LINK = "Link"
    IMAGE = "Image"
    DIVIDER = "Divider"
    CODE_BLOCK = "CodeBlock"
    MARKDOWN = "Markdown"
    PREVIEW = "Preview"

    def __str__(self) -> str:
        return self.value


CONTAINER_TYPES: frozenset[str] = frozenset(
    {
        ComponentType.ROOT.value,
        ComponentType.SECTION.value,
        ComponentType.ROW.value,
        ComponentType.COLUMN.value,
    }
)

LEAF_TYPES: frozenset[str] = frozenset(
    t.value for t in ComponentType if t.value not in CONTAINER_TYPES
)


@dataclass(frozen=True)
class DocumentNode:
    """A single node of a document tree.

    Parameters
    ----------
    id:
        Identifier unique within the tree.
    component_type:
        One of the ``ComponentType`` values.  Enum members are normalized
        to their string value so that trees compare equal regardless of
        how they were built.
    properties:
        String-keyed attribute map.  A nested ``style`` map holds
        presentation properties in camelCase.
    content:
        Inline text for leaf nodes.
    children:
        Ordered child nodes, only meaningful for container types.
    inline_markup:
        When ``True`` the renderer emits ``content`` without escaping.
        Only the block compiler's formatting step sets this flag.
    """

    id: str
    component_type: str
    properties: dict[str, Any] = field(default_factory=dict, hash=False)
    content: str | None = None
    children: tuple[DocumentNode, ...] | None = None
    inline_markup: bool = False

    def __post_init__(self) -> None:
        if isinstance(self.component_type, ComponentType):
            object.__setattr__(self, "component_type", self.component_type.value)
        if self.children is not None and not isinstance(self.children, tuple):
            object.__setattr__(self, "children", tuple(self.children))

    @property
    def is_container(self) -> bool:
        """Return True if this node's type may hold children."""
        return self.component_type in CONTAINER_TYPES

    @property
    def style(self) -> dict[str, Any]:
        """Return the node's style map (empty if absent)."""
        style = self.properties.get("style")
        return style if isinstance(style, dict) else {}

    def child_list(self) -> tuple[DocumentNode, ...]:
        """Return the children, or an empty tuple for childless nodes."""
        return self.children or ()


def is_container_type(component_type: str) -> bool:
    """Return True if ``component_type`` may hold children."""
    return str(component_type) in CONTAINER_TYPES


def is_known_type(component_type: str) -> bool:
    """Return True if ``component_type`` is part of the fixed enumeration."""
    return str(component_type) in CONTAINER_TYPES or str(component_type) in LEAF_TYPES
