"""Document node model and serialization."""
from __future__ import annotations

from mailblocks.nodes.nodes import (
    CONTAINER_TYPES,
    LEAF_TYPES,
    ComponentType,
    DocumentNode,
    is_container_type,
    is_known_type,
)
from mailblocks.nodes.serializer import NodeSerializer

__all__ = [
    "CONTAINER_TYPES",
    "LEAF_TYPES",
    "ComponentType",
    "DocumentNode",
    "NodeSerializer",
    "is_container_type",
    "is_known_type",
]
