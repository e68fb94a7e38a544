"""Built-in functions callable from OXPL programs.

The set is closed: ``BUILTINS`` maps each name to its implementation and
anything else at a call site is an unknown function.  Every built-in takes
the head of the call's argument chain and the output stream, and returns a
``Diagnostic`` when the call is rejected (the call is then a no-op).

Diagnostic codes:

    ONT201  Unknown function
    ONT202  Argument missing
    ONT203  Wrong type of argument
    ONT204  Too many arguments
"""
from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Callable, TextIO

import click

from ontc.ast.nodes import Node, StrNode
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity

Builtin = Callable[[Node | None, TextIO | None], Diagnostic | None]


def _reject(name: str, code: str, message: str) -> Diagnostic:
    return Diagnostic(
        severity=DiagnosticSeverity.ERROR,
        code=code,
        message=f"{name}: {message}",
        location=f"call to {name!r}",
        rule="builtins",
    )


def _single_string(name: str, args: Node | None) -> str | Diagnostic:
    """Return the only argument's string value, or the reason it is unusable."""
    if args is None:
        return _reject(name, "ONT202", "argument missing")
    if not isinstance(args, StrNode) or args.value is None:
        return _reject(name, "ONT203", "wrong type of argument")
    if args.sibling is not None:
        return _reject(name, "ONT204", "too many arguments")
    return args.value


def builtin_print(args: Node | None, stream: TextIO | None = None) -> Diagnostic | None:
    """Write the string argument without a trailing newline."""
    value = _single_string("print", args)
    if isinstance(value, Diagnostic):
        return value
    click.echo(value, file=stream, nl=False)
    return None


def builtin_println(args: Node | None, stream: TextIO | None = None) -> Diagnostic | None:
    """Write the string argument followed by a newline."""
    value = _single_string("println", args)
    if isinstance(value, Diagnostic):
        return value
    click.echo(value, file=stream)
    return None


BUILTINS: Mapping[str, Builtin] = MappingProxyType({
    "print": builtin_print,
    "println": builtin_println,
})


def call_builtin(
    name: str, args: Node | None, stream: TextIO | None = None
) -> Diagnostic | None:
    """Dispatch ``name`` to its built-in, or report it as unknown."""
    builtin = BUILTINS.get(name)
    if builtin is None:
        return Diagnostic(
            severity=DiagnosticSeverity.WARNING,
            code="ONT201",
            message=f"Unknown function {name!r}; call skipped",
            location=f"call to {name!r}",
            suggestion=f"Available built-ins: {', '.join(sorted(BUILTINS))}",
            rule="builtins",
        )
    return builtin(args, stream)
