"""Structural validation of a translation unit.

The ``Validator`` runs a configurable set of rules against the root of a
program tree and returns a list of ``Diagnostic`` objects.  A program
with error diagnostics must not be executed.  In strict mode, warnings
are promoted to errors.

Usage
-----
::

    from ontc.ast import TreeLoader
    from ontc.validator import Validator

    result = TreeLoader().load_file("hello.yaml")
    diagnostics = Validator().validate(result.tree)
    errors = [d for d in diagnostics if d.is_error]
"""
from __future__ import annotations

import logging

from ontc.ast.nodes import Node
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity
from ontc.validator.rules import DEFAULT_RULES, Rule

logger = logging.getLogger(__name__)


class Validator:
    """Structural validator for program trees.

    Parameters
    ----------
    rules:
        The list of validation rules to run.  Defaults to all built-in
        rules (``DEFAULT_RULES``).
    strict:
        When ``True``, WARNING-level diagnostics are promoted to ERROR
        severity.
    """

    def __init__(
        self,
        rules: list[Rule] | None = None,
        strict: bool = False,
    ) -> None:
        self._rules: list[Rule] = rules if rules is not None else list(DEFAULT_RULES)
        self._strict: bool = strict

    def validate(self, root: Node | None) -> list[Diagnostic]:
        """Run all rules against ``root`` and return the collected diagnostics.

        Parameters
        ----------
        root:
            The ``TransUnit`` node of the program.

        Returns
        -------
        list[Diagnostic]
            All findings in rule order.  Empty if the tree is valid.
        """
        if root is None:
            return [
                Diagnostic(
                    severity=DiagnosticSeverity.ERROR,
                    code="ONT001",
                    message="Program tree is empty",
                    rule="translation_unit",
                )
            ]

        all_diagnostics: list[Diagnostic] = []
        for rule in self._rules:
            try:
                all_diagnostics.extend(rule(root))
            except Exception as exc:  # noqa: BLE001
                # A broken rule is reported, not raised.
                logger.exception("Validation rule %r failed", rule.__name__)
                all_diagnostics.append(
                    Diagnostic(
                        severity=DiagnosticSeverity.ERROR,
                        code="ONT999",
                        message=f"Internal validator error in rule {rule.__name__!r}: {exc}",
                        suggestion="Please report this as a bug",
                        rule=rule.__name__,
                    )
                )

        if self._strict:
            all_diagnostics = [
                Diagnostic(
                    severity=DiagnosticSeverity.ERROR,
                    code=d.code,
                    message=d.message,
                    location=d.location,
                    suggestion=d.suggestion,
                    rule=d.rule,
                )
                if d.severity == DiagnosticSeverity.WARNING
                else d
                for d in all_diagnostics
            ]

        logger.debug("Validation produced %d diagnostic(s)", len(all_diagnostics))
        return all_diagnostics

    def add_rule(self, rule: Rule) -> None:
        """Add a custom rule to this validator instance."""
        self._rules.append(rule)

    @property
    def rule_count(self) -> int:
        """Return the number of rules currently registered."""
        return len(self._rules)


def validate(root: Node | None, strict: bool = False) -> list[Diagnostic]:
    """Convenience function: validate a program tree with default rules.

    Parameters
    ----------
    root:
        The ``TransUnit`` node to validate.
    strict:
        If ``True``, warnings become errors.

    Returns
    -------
    list[Diagnostic]
        All findings.
    """
    return Validator(strict=strict).validate(root)
