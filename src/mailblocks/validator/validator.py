"""Tree validator: structural analysis of a ``DocumentNode`` tree.

The ``TreeValidator`` runs a configurable set of rules against a tree and
returns a list of ``Diagnostic`` objects.  In strict mode, warnings are
promoted to errors.  ``ensure_valid`` is the pre-render gate used by the
renderer: it raises ``StructuralError`` for the first error found.

Usage
-----
::

    from mailblocks.validator import TreeValidator

    diagnostics = TreeValidator().validate(tree)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

import dataclasses

from mailblocks.errors import StructuralError
from mailblocks.nodes.nodes import DocumentNode
from mailblocks.registry.components import DEFAULT_REGISTRY, ComponentRegistry
from mailblocks.tree.paths import walk
from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity
from mailblocks.validator.rules import DEFAULT_RULES, STRUCTURAL_RULES, Rule


class TreeValidator:
    """Structural validator for document trees.

    Parameters
    ----------
    rules:
        The rules to run.  Defaults to all built-in rules
        (``DEFAULT_RULES``).
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR.
    registry:
        Component registry used to resolve types.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        strict: bool = False,
        registry: ComponentRegistry = DEFAULT_REGISTRY,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict: bool = strict
        self._registry = registry

    def validate(self, tree: DocumentNode) -> list[Diagnostic]:
        """Run all rules against ``tree`` and return the collected diagnostics.

        Returns
        -------
        list[Diagnostic]
            All findings, ordered by the document position of the node they
            refer to.  Empty if the tree is valid.
        """
        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            all_diagnostics.extend(rule(tree, self._registry))

        if self._strict:
            all_diagnostics = [
                dataclasses.replace(d, severity=DiagnosticSeverity.ERROR)
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        order = {path: i for i, (path, _) in enumerate(walk(tree))}
        all_diagnostics.sort(key=lambda d: (order.get(d.path, len(order)), d.code))
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate_tree(tree: DocumentNode, strict: bool = False) -> list[Diagnostic]:
    """Convenience function: validate ``tree`` with the default rules."""
    return TreeValidator(strict=strict).validate(tree)


def ensure_valid(tree: DocumentNode, registry: ComponentRegistry = DEFAULT_REGISTRY) -> None:
    """Raise ``StructuralError`` if ``tree`` breaks a structural rule.

    Raises
    ------
    StructuralError
        For the first error in document order, carrying the node path.
    """
    validator = TreeValidator(rules=list(STRUCTURAL_RULES), registry=registry)
    for diagnostic in validator.validate(tree):
        if diagnostic.is_error:
            raise StructuralError(diagnostic.message, path=diagnostic.path)
