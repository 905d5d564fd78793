"""Tree validation module.

Exports the ``TreeValidator`` class, the ``validate_tree`` and
``ensure_valid`` functions, ``Diagnostic`` types, and all built-in rules.
"""
from __future__ import annotations

from mailblocks.validator.diagnostics import Diagnostic, DiagnosticSeverity
from mailblocks.validator.rules import DEFAULT_RULES, STRUCTURAL_RULES, Rule
from mailblocks.validator.validator import TreeValidator, ensure_valid, validate_tree

__all__ = [
    "TreeValidator",
    "validate_tree",
    "ensure_valid",
    "Diagnostic",
    "DiagnosticSeverity",
    "Rule",
    "DEFAULT_RULES",
    "STRUCTURAL_RULES",
]
