"""Diagnostic types for mailblocks.

A ``Diagnostic`` is an annotated message attached to a node path or block
field.  Diagnostics are produced by the tree validator (structural checks),
the color safety engine (overridden colors) and the block compiler
(variant fallbacks).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostics, aligned with LSP conventions."""

    ERROR = auto()
    WARNING = auto()
    INFORMATION = auto()
    HINT = auto()


@dataclass(frozen=True)
class Diagnostic:
    """A single validation finding.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"MB001"``.
    message:
        Human-readable description of the problem.
    path:
        Node path (``root.children[0]``) or block field the finding refers to.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The rule name that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    path: str = field(default="")
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        loc = f" at {self.path}" if self.path else ""
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix}{loc}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block rendering."""
        return self.severity == DiagnosticSeverity.ERROR
