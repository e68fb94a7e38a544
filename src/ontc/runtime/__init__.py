"""Runtime module.

Exports the ``Interpreter``, the ``run_program`` pipeline and the closed
set of built-in functions.
"""
from __future__ import annotations

from ontc.runtime.builtins import BUILTINS, Builtin, builtin_print, builtin_println, call_builtin
from ontc.runtime.interpreter import (
    TEST_MESSAGE,
    ExecutionResult,
    Interpreter,
    PrecedenceCycleError,
    run_program,
)

__all__ = [
    "Interpreter",
    "ExecutionResult",
    "PrecedenceCycleError",
    "run_program",
    "TEST_MESSAGE",
    "BUILTINS",
    "Builtin",
    "builtin_print",
    "builtin_println",
    "call_builtin",
]
