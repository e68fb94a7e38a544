"""ontc — ontology toolchain: OXPL program trees, fact store and interpreter.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
::

    import ontc

    # Build a program tree from a tree document
    result = ontc.load("hello.yaml")

    # Check it has exactly one main function
    diagnostics = ontc.validate(result.tree)

    # Run it: precedence facts first, then main's body
    outcome = ontc.run(result.tree)

    ontc.__version__
    '0.1.0'
"""
from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TextIO

__version__: str = "0.1.0"

if TYPE_CHECKING:
    from ontc.ast.loader import LoadResult
    from ontc.ast.nodes import Node
    from ontc.ontology.store import Database
    from ontc.runtime.interpreter import ExecutionResult
    from ontc.validator.diagnostics import Diagnostic


def load(source: str | Path) -> "LoadResult":
    """Load a program tree from a JSON or YAML tree document.

    Parameters
    ----------
    source:
        Path to the document.

    Returns
    -------
    LoadResult
        The ``TransUnit`` tree and any ONT301 diagnostics for skipped
        top-level items.

    Raises
    ------
    ontc.ast.LoadError
        If the file cannot be read or is not a tree document.
    """
    from ontc.ast.loader import load as _load

    return _load(source)


def validate(root: "Node | None", strict: bool = False) -> list["Diagnostic"]:
    """Validate a program tree against all built-in rules.

    Parameters
    ----------
    root:
        The ``TransUnit`` node.
    strict:
        When ``True``, warnings are promoted to errors.
    """
    from ontc.validator.validator import validate as _validate

    return _validate(root, strict=strict)


def collect(root: "Node", database: "Database") -> list["Diagnostic"]:
    """Seed ``database`` and fill it with the program's functions and facts."""
    from ontc.ontology.collector import collect_facts

    return collect_facts(root, database)


def run(
    root: "Node | None", output: TextIO | None = None, strict: bool = False
) -> "ExecutionResult":
    """Validate, collect and execute a program tree.

    Parameters
    ----------
    root:
        The ``TransUnit`` node.
    output:
        Stream for ``print``/``println`` output.  Defaults to stdout.
    strict:
        When ``True``, validation warnings block execution.

    Returns
    -------
    ExecutionResult
        Success flag, diagnostics and the order in which functions ran.
    """
    from ontc.runtime.interpreter import run_program

    return run_program(root, output=output, strict=strict)


__all__ = [
    "__version__",
    "load",
    "validate",
    "collect",
    "run",
]
