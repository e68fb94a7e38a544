"""Validator module.

Exports the ``Validator`` class, the ``validate`` convenience function,
``Diagnostic`` types, and all built-in validation rules.
"""
from __future__ import annotations

from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity, has_errors
from ontc.validator.rules import DEFAULT_RULES, Rule
from ontc.validator.validator import Validator, validate

__all__ = [
    "Validator",
    "validate",
    "Diagnostic",
    "DiagnosticSeverity",
    "has_errors",
    "Rule",
    "DEFAULT_RULES",
]
