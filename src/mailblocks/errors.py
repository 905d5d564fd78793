"""Exception and warning types for mailblocks.

Structural failures (unknown component types, invalid nesting, unbalanced
markup, unknown block kinds, missing required fields) are raised as
``StructuralError`` or one of its subclasses.  Non-fatal findings are
reported as ``Diagnostic`` records (see ``mailblocks.validator``) and,
for color overrides, through the ``ColorSafetyWarning`` category.
"""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StructuralError(Exception):
    """A tree, block, or markup document violates a structural rule.

    Parameters
    ----------
    message:
        Human-readable description of the problem.
    path:
        Node path (``root.children[0]``), markup location (``line:col``),
        or field name identifying where the problem was found.
    """

    message: str
    path: str = ""

    def __str__(self) -> str:
        if self.path:
            return f"{self.message} (at {self.path})"
        return self.message

    # dataclass(frozen=True) doesn't call Exception.__init__ automatically
    def __post_init__(self) -> None:
        object.__setattr__(self, "args", (str(self),))


@dataclass(frozen=True)
class UnknownBlockKindError(StructuralError):
    """Raised when a semantic block names a kind with no registered builder."""

    kind: str = ""


@dataclass(frozen=True)
class MissingFieldError(StructuralError):
    """Raised when a structurally required block field is absent."""

    kind: str = ""
    field_name: str = ""


@dataclass(frozen=True)
class MarkupParseError(StructuralError):
    """Raised on malformed markup.

    Parameters
    ----------
    fragment:
        The offending markup fragment, truncated for display.
    line:
        1-based line of the fragment.
    col:
        1-based column of the fragment.
    """

    fragment: str = ""
    line: int = 0
    col: int = 0

    def __str__(self) -> str:
        base = f"{self.message} at {self.line}:{self.col}"
        if self.fragment:
            return f"{base}: {self.fragment!r}"
        return base


class ColorSafetyWarning(UserWarning):
    """Emitted when a requested text color is replaced by a safe fallback."""
