"""Individual validation rules for translation units.

Each rule is a callable that accepts the root ``Node`` and returns a list
of ``Diagnostic`` objects.  Rules are composed into the ``Validator``
class which runs them all and aggregates results.

Rule codes use the ``ONT`` prefix followed by a three-digit number:

    ONT001  Root is not a translation unit
    ONT002  Function signature without a string identifier
    ONT003  Missing main function
    ONT004  More than one main function
    ONT005  Duplicate function name
"""
from __future__ import annotations

from collections.abc import Iterator
from typing import Callable

from ontc.ast.nodes import Node, NodeKind, function_name, top_level
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity

Rule = Callable[[Node], list[Diagnostic]]

ENTRY_POINT = "main"


def _make(
    code: str,
    severity: DiagnosticSeverity,
    message: str,
    location: str = "",
    suggestion: str | None = None,
    rule: str = "",
) -> Diagnostic:
    return Diagnostic(
        severity=severity,
        code=code,
        message=message,
        location=location,
        suggestion=suggestion,
        rule=rule,
    )


def _functions(root: Node) -> Iterator[tuple[int, Node]]:
    """Yield ``(position, func)`` for each top-level function of a translation unit."""
    if root.kind is not NodeKind.TRANS_UNIT:
        return
    for position, node in enumerate(top_level(root)):
        if node.kind is NodeKind.FUNC:
            yield position, node


# ---------------------------------------------------------------------------
# ONT001 — root kind
# ---------------------------------------------------------------------------

def rule_translation_unit(root: Node) -> list[Diagnostic]:
    """ONT001: The tree handed to the toolchain must be rooted at a TransUnit."""
    if root.kind is NodeKind.TRANS_UNIT:
        return []
    return [_make(
        "ONT001",
        DiagnosticSeverity.ERROR,
        f"Program root is a {root.kind.value} node, expected TransUnit",
        suggestion="Wrap the top-level declarations in a TransUnit",
        rule="translation_unit",
    )]


# ---------------------------------------------------------------------------
# ONT002 — invalid function signatures
# ---------------------------------------------------------------------------

def rule_function_signatures(root: Node) -> list[Diagnostic]:
    """ONT002: Every function signature must carry a string identifier."""
    diagnostics: list[Diagnostic] = []
    for position, func in _functions(root):
        if function_name(func) is None:
            diagnostics.append(_make(
                "ONT002",
                DiagnosticSeverity.ERROR,
                "Invalid function signature: identifier is not a string",
                f"body[{position}]",
                rule="function_signatures",
            ))
    return diagnostics


# ---------------------------------------------------------------------------
# ONT003 / ONT004 — exactly one main
# ---------------------------------------------------------------------------

def rule_missing_main(root: Node) -> list[Diagnostic]:
    """ONT003: A runnable program declares a ``main`` function."""
    if root.kind is not NodeKind.TRANS_UNIT:
        return []
    if any(function_name(f) == ENTRY_POINT for _, f in _functions(root)):
        return []
    return [_make(
        "ONT003",
        DiagnosticSeverity.ERROR,
        "Missing main function",
        suggestion="Declare a top-level function named 'main'",
        rule="missing_main",
    )]


def rule_single_main(root: Node) -> list[Diagnostic]:
    """ONT004: ``main`` may be declared only once."""
    positions = [p for p, f in _functions(root) if function_name(f) == ENTRY_POINT]
    return [
        _make(
            "ONT004",
            DiagnosticSeverity.ERROR,
            f"Function 'main' declared again; first declared at body[{positions[0]}]",
            f"body[{position}]",
            suggestion="Remove or rename the extra 'main'",
            rule="single_main",
        )
        for position in positions[1:]
    ]


# ---------------------------------------------------------------------------
# ONT005 — duplicate function names
# ---------------------------------------------------------------------------

def rule_duplicate_functions(root: Node) -> list[Diagnostic]:
    """ONT005: Function names should be unique; only the first is reachable."""
    diagnostics: list[Diagnostic] = []
    seen: dict[str, int] = {}
    for position, func in _functions(root):
        name = function_name(func)
        if name is None or name == ENTRY_POINT:
            continue
        if name in seen:
            diagnostics.append(_make(
                "ONT005",
                DiagnosticSeverity.WARNING,
                f"Duplicate function name {name!r}; first declared at body[{seen[name]}]",
                f"body[{position}]",
                suggestion=f"Rename one of the '{name}' functions",
                rule="duplicate_functions",
            ))
        else:
            seen[name] = position
    return diagnostics


# ---------------------------------------------------------------------------
# Rule registry
# ---------------------------------------------------------------------------

DEFAULT_RULES: list[Rule] = [
    rule_translation_unit,
    rule_function_signatures,
    rule_missing_main,
    rule_single_main,
    rule_duplicate_functions,
]
