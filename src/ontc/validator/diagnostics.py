"""Diagnostic types shared by the loader, validator, collector and interpreter.

A ``Diagnostic`` is an annotated message attached to a location in the
program.  Programs arrive as trees without source positions, so the
location is a short human-readable path such as ``body[2]`` or
``function 'main'``.
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
    """A single finding about a program.

    Parameters
    ----------
    severity:
        How serious this finding is.
    code:
        A short machine-readable identifier, e.g. ``"ONT003"``.
    message:
        Human-readable description of the problem.
    location:
        Where in the program the problem was found; empty if unknown.
    suggestion:
        Optional human-readable fix suggestion.
    rule:
        The rule or component that produced this diagnostic.
    """

    severity: DiagnosticSeverity
    code: str
    message: str
    location: str = field(default="")
    suggestion: str | None = field(default=None)
    rule: str = field(default="")

    def __str__(self) -> str:
        prefix = f"[{self.code}] {self.severity.name}"
        where = f" at {self.location}" if self.location else ""
        suggestion_part = f" (hint: {self.suggestion})" if self.suggestion else ""
        return f"{prefix}{where}: {self.message}{suggestion_part}"

    @property
    def is_error(self) -> bool:
        """Return True if this diagnostic should block a successful run."""
        return self.severity == DiagnosticSeverity.ERROR


def has_errors(diagnostics: list[Diagnostic]) -> bool:
    """Return True if any diagnostic in the list is an error."""
    return any(d.is_error for d in diagnostics)
