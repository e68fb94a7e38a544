"""Tree-walking interpreter for OXPL programs.

Running a function happens in two phases.  First the ontology is asked
which functions must precede it (``isPreceededBy(F, ?)``) and each of them
is run first, in the order the facts were collected.  Pending functions are
kept on an explicit stack, so long precedence chains need no recursion.  Then the
function body is walked and every top-level call is dispatched to a
built-in.  A precedence chain that leads back to a function that is still
running is a cycle and aborts the run.

Diagnostic codes:

    ONT205  Unsupported callee (not a single-level name)
    ONT206  Preceding function not found
    ONT207  Precedence cycle
    ONT208  Missing entry point
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field, replace
from typing import TextIO

import click

from ontc.ast.nodes import (
    Node,
    NodeKind,
    StrNode,
    call_parts,
    find_function,
    function_body,
    function_name,
)
from ontc.ontology.collector import PRECEDED_BY, PRINTS_TEST_MESSAGE, FactCollector
from ontc.ontology.store import Database, Resource
from ontc.runtime.builtins import call_builtin
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity, has_errors
from ontc.validator.rules import ENTRY_POINT
from ontc.validator.validator import Validator

logger = logging.getLogger(__name__)

TEST_MESSAGE = "OXPL rocks!"


class PrecedenceCycleError(RuntimeError):
    """Raised when precedence resolution reaches a function that is still running.

    Parameters
    ----------
    cycle:
        Function names along the cycle, first and last being the same.
    """

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Precedence cycle: {' -> '.join(cycle)}")


@dataclass
class ExecutionResult:
    """Outcome of running a program.

    ``success`` is ``False`` only when the run could not start or was
    aborted; rejected calls are reported in ``diagnostics`` while the run
    continues.
    """

    success: bool
    diagnostics: list[Diagnostic] = field(default_factory=list)
    executed: list[str] = field(default_factory=list)
    error_message: str | None = None

    @property
    def errors(self) -> list[Diagnostic]:
        return [d for d in self.diagnostics if d.is_error]


@dataclass
class _Frame:
    """A function whose predecessors are still being run."""

    func: Node
    name: str | None
    resource: Resource | None
    pending: Iterator[Node]


class Interpreter:
    """Execute a translation unit against a populated ontology database.

    Parameters
    ----------
    database:
        The database filled by ``FactCollector`` from the same tree.
    output:
        Stream that built-ins write to.  ``None`` means standard output.
    entry_point:
        Name of the function the run starts with.
    """

    def __init__(
        self,
        database: Database,
        output: TextIO | None = None,
        entry_point: str = ENTRY_POINT,
    ) -> None:
        self._database = database
        self._output = output
        self._entry_point = entry_point
        self._running: list[Resource] = []
        self._diagnostics: list[Diagnostic] = []
        self._executed: list[str] = []

    def execute(self, root: Node) -> ExecutionResult:
        """Run the entry-point function of ``root``.

        Returns
        -------
        ExecutionResult
            Diagnostics and the order in which function bodies ran.
        """
        self._running = []
        self._diagnostics = []
        self._executed = []

        entry = find_function(root, self._entry_point)
        if entry is None:
            message = f"{self._entry_point} function not present"
            self._report(Diagnostic(
                severity=DiagnosticSeverity.ERROR,
                code="ONT208",
                message=message,
                rule="interpreter",
            ))
            return self._result(success=False, error_message=message)

        try:
            self._execute_function(root, entry)
        except PrecedenceCycleError as exc:
            self._report(Diagnostic(
                severity=DiagnosticSeverity.ERROR,
                code="ONT207",
                message=str(exc),
                location=f"function {exc.cycle[0]!r}",
                suggestion="Remove one of the isPreceededBy statements on the cycle",
                rule="interpreter",
            ))
            return self._result(success=False, error_message=str(exc))

        return self._result(success=True)

    # ------------------------------------------------------------------
    # Function execution
    # ------------------------------------------------------------------

    def _execute_function(self, root: Node, entry: Node) -> None:
        frames = [self._enter(root, entry)]
        while frames:
            frame = frames[-1]
            target = next(frame.pending, None)
            if target is not None:
                frames.append(self._enter(root, target))
                continue
            frames.pop()
            self._run_body(frame.func, frame.name)
            if frame.resource is not None:
                self._running.pop()

    def _enter(self, root: Node, func: Node) -> _Frame:
        """Start ``func``: check for a cycle, announce it, queue its predecessors."""
        name = function_name(func)
        resource = self._database.find_resource(name)
        if resource is None:
            return _Frame(func, name, None, iter(()))

        if resource in self._running:
            start = self._running.index(resource)
            cycle = [r.name for r in self._running[start:]] + [resource.name]
            raise PrecedenceCycleError(cycle)
        self._running.append(resource)
        self._announce(resource)
        return _Frame(func, name, resource, self._preceding(root, resource))

    def _run_body(self, func: Node, name: str | None) -> None:
        logger.debug("Executing body of %r", name)
        self._executed.append(name or "")
        for statement in function_body(func):
            if statement.kind is NodeKind.CALL:
                self._execute_call(statement, name)

    def _announce(self, resource: Resource) -> None:
        """Print the test message if the program says this function does so."""
        predicate = self._database.find_resource(PRINTS_TEST_MESSAGE)
        if predicate is None:
            return
        probe = self._database.create_fact(predicate)
        self._database.add_argument(probe, resource)
        if self._database.check(probe):
            click.echo(TEST_MESSAGE, file=self._output)

    def _preceding(self, root: Node, resource: Resource) -> Iterator[Node]:
        """Yield the functions that must run before ``resource``, in fact order."""
        relation = self._database.find_resource(PRECEDED_BY)
        if relation is None:
            return
        for preceding in self._database.query_triple(relation, subject=resource):
            target = find_function(root, preceding.name)
            if target is None:
                self._report(Diagnostic(
                    severity=DiagnosticSeverity.WARNING,
                    code="ONT206",
                    message=f"{preceding.name!r} must precede {resource.name!r} "
                    "but is not a function; skipped",
                    location=f"function {resource.name!r}",
                    rule="interpreter",
                ))
                continue
            logger.debug("%r is preceded by %r", resource.name, preceding.name)
            yield target

    def _execute_call(self, call: Node, caller: str | None) -> None:
        callee, args = call_parts(call)
        head = callee.child
        if (
            callee.kind is not NodeKind.SCOPE
            or not isinstance(head, StrNode)
            or head.value is None
            or head.sibling is not None
        ):
            self._report(Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code="ONT205",
                message="Only single-level names can be called; call skipped",
                location=f"function {caller!r}",
                rule="interpreter",
            ))
            return

        diagnostic = call_builtin(head.value, args, self._output)
        if diagnostic is not None:
            self._report(replace(
                diagnostic, location=f"{diagnostic.location} in function {caller!r}"
            ))

    # ------------------------------------------------------------------
    # Bookkeeping
    # ------------------------------------------------------------------

    def _report(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)
        logger.info("%s", diagnostic)

    def _result(self, success: bool, error_message: str | None = None) -> ExecutionResult:
        return ExecutionResult(
            success=success,
            diagnostics=list(self._diagnostics),
            executed=list(self._executed),
            error_message=error_message,
        )


def run_program(
    root: Node | None,
    output: TextIO | None = None,
    strict: bool = False,
) -> ExecutionResult:
    """Validate, collect facts from and execute a program tree.

    Nothing is executed when validation reports errors.  The database
    lives for this call only; the tree stays owned by the caller.

    Parameters
    ----------
    root:
        The ``TransUnit`` node.
    output:
        Stream for built-in output; ``None`` means standard output.
    strict:
        Promote validation warnings to errors.
    """
    diagnostics = Validator(strict=strict).validate(root)
    if root is None or has_errors(diagnostics):
        return ExecutionResult(
            success=False,
            diagnostics=diagnostics,
            error_message="Program failed validation",
        )
    with Database() as database:
        diagnostics.extend(FactCollector().collect(root, database))
        result = Interpreter(database, output=output).execute(root)

    result.diagnostics[:0] = diagnostics
    return result
