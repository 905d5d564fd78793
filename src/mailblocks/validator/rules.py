"""Structural validation rules for document trees.

Each rule is a callable that accepts a tree and the component registry and
returns a list of ``Diagnostic`` objects.  Rules are composed into the
``TreeValidator`` which runs them all and aggregates results.

Rule codes use the ``MB`` prefix followed by a three-digit number:

    MB001  Unknown component type
    MB002  Children under a leaf component
    MB003  Duplicate node id
    MB004  Missing node id
    MB005  Root nested below the top of the tree
    MB006  Image without a source
    MB007  Link or button without a target
"""
from __future__ import annotations

from typing import Callable

from mailblocks.nodes.nodes import ComponentType, DocumentNode
from mailblocks.registry.components import ComponentRegistry
from mailblocks.tree.paths import walk
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity

Rule = Callable[[DocumentNode, ComponentRegistry], list[Diagnostic]]


def _make(
    code: str,
    severity: DiagnosticSeverity,
    message: str,
    path: str,
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        code=code,
        message=message,
        path=path,
        suggestion=suggestion,
        rule=rule,
    )


# ---------------------------------------------------------------------------
# MB001: unknown component type
# ---------------------------------------------------------------------------

def rule_unknown_type(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB001: Every node's component type must be registered."""
    return [
        _make(
            "MB001",
            DiagnosticSeverity.ERROR,
            f"Unknown component type {node.component_type!r} on node {node.id!r}",
            path,
            suggestion=f"Use one of: {', '.join(registry)}",
            rule="unknown_type",
        )
        for path, node in walk(tree)
        if node.component_type not in registry
    ]


# ---------------------------------------------------------------------------
# MB002: children under a leaf
# ---------------------------------------------------------------------------

def rule_leaf_children(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB002: Only container types may hold children."""
    diagnostics: list[Diagnostic] = []
    for path, node in walk(tree):
        if node.children and node.component_type in registry and not registry.is_container(
            node.component_type
        ):
            diagnostics.append(_make(
                "MB002",
                DiagnosticSeverity.ERROR,
                f"{node.component_type} node {node.id!r} cannot hold children",
                path,
                suggestion="Move the children into a Section, Row or Column",
                rule="leaf_children",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# MB003: duplicate ids
# ---------------------------------------------------------------------------

def rule_duplicate_ids(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB003: Node ids must be unique across the whole tree."""
    diagnostics: list[Diagnostic] = []
    seen: dict[str, str] = {}
    for path, node in walk(tree):
        if not node.id:
            continue
        if node.id in seen:
            diagnostics.append(_make(
                "MB003",
                DiagnosticSeverity.ERROR,
                f"Duplicate node id {node.id!r}; first used at {seen[node.id]}",
                path,
                suggestion=f"Rename one of the {node.id!r} nodes",
                rule="duplicate_ids",
            ))
        else:
            seen[node.id] = path
    return diagnostics


# ---------------------------------------------------------------------------
# MB004: missing ids
# ---------------------------------------------------------------------------

def rule_missing_ids(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB004: Every node needs a non-empty id."""
    return [
        _make(
            "MB004",
            DiagnosticSeverity.ERROR,
            f"{node.component_type} node has an empty id",
            path,
            rule="missing_ids",
        )
        for path, node in walk(tree)
        if not node.id
    ]


# ---------------------------------------------------------------------------
# MB005: nested Root
# ---------------------------------------------------------------------------

def rule_nested_root(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB005: ``Root`` may only appear at the top of a tree."""
    return [
        _make(
            "MB005",
            DiagnosticSeverity.ERROR,
            f"Root node {node.id!r} is nested inside the tree",
            path,
            suggestion="Use a Section for nested containers",
            rule="nested_root",
        )
        for path, node in walk(tree)
        if path != "root" and node.component_type == ComponentType.ROOT.value
    ]


# ---------------------------------------------------------------------------
# MB006: image without src
# ---------------------------------------------------------------------------

def rule_image_source(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB006: Images should carry a ``src`` property."""
    return [
        _make(
            "MB006",
            DiagnosticSeverity.WARNING,
            f"Image {node.id!r} has no src",
            path,
            suggestion="Resolve the image or use a placeholder URL",
            rule="image_source",
        )
        for path, node in walk(tree)
        if node.component_type == ComponentType.IMAGE.value and not node.properties.get("src")
    ]


# ---------------------------------------------------------------------------
# MB007: link without href
# ---------------------------------------------------------------------------

def rule_link_target(tree: DocumentNode, registry: ComponentRegistry) -> list[Diagnostic]:
    """MB007: Links and buttons should carry an ``href`` property."""
    linkish = {ComponentType.LINK.value, ComponentType.BUTTON.value}
    return [
        _make(
            "MB007",
            DiagnosticSeverity.WARNING,
            f"{node.component_type} {node.id!r} has no href",
            path,
            rule="link_target",
        )
        for path, node in walk(tree)
        if node.component_type in linkish and not node.properties.get("href")
    ]


#: Rules that make a tree unrenderable.
STRUCTURAL_RULES: list[Rule] = [
    rule_unknown_type,
    rule_leaf_children,
    rule_duplicate_ids,
    rule_missing_ids,
    rule_nested_root,
]

DEFAULT_RULES: list[Rule] = STRUCTURAL_RULES + [
    rule_image_source,
    rule_link_target,
]
