"""Fact collection: turning a program tree into ontology facts.

The collector seeds the predicate resources the interpreter depends on,
registers one resource per top-level function, and then converts the
program's fact statements into stored facts.

Diagnostic codes:

    ONT101  Unknown relation or subject in a triple statement
    ONT102  Unknown object in a triple statement (fact kept as unary)
    ONT103  Unknown relation or argument in a fact statement
"""
from __future__ import annotations

import logging

from ontc.ast.nodes import (
    Node,
    NodeKind,
    address_name,
    fact_parts,
    function_name,
    scope_names,
    top_level,
    triple_parts,
)
from ontc.ontology.store import Database
from ontc.validator.diagnostics import Diagnostic, DiagnosticSeverity

logger = logging.getLogger(__name__)

PRECEDED_BY = "isPreceededBy"
PRINTS_TEST_MESSAGE = "printsATestMessageWhenCalled"

PREDEFINED_PREDICATES: tuple[str, ...] = (PRECEDED_BY, PRINTS_TEST_MESSAGE)


def _relation_name(relation: Node) -> str | None:
    names = scope_names(relation)
    return ".".join(names) if names else None


def seed_predicates(database: Database) -> None:
    """Register the predicate resources the interpreter queries."""
    for name in PREDEFINED_PREDICATES:
        database.intern(name)


class FactCollector:
    """Populate a ``Database`` from the top level of a translation unit.

    Parameters
    ----------
    seed:
        When ``True`` (the default) the predefined predicates are
        registered before collection.
    """

    def __init__(self, seed: bool = True) -> None:
        self._seed = seed

    def collect(self, root: Node, database: Database) -> list[Diagnostic]:
        """Collect function resources and facts from ``root`` into ``database``.

        Statements whose parts cannot be resolved are skipped with a
        diagnostic; collection always continues.

        Returns
        -------
        list[Diagnostic]
            Warnings about skipped or reduced statements.
        """
        if self._seed:
            seed_predicates(database)

        for node in top_level(root):
            if node.kind is NodeKind.FUNC:
                name = function_name(node)
                if name is not None:
                    database.intern(name)

        diagnostics: list[Diagnostic] = []
        for position, node in enumerate(top_level(root)):
            location = f"body[{position}]"
            if node.kind is NodeKind.TRIPLE_FACT:
                diagnostics.extend(self._collect_triple(node, database, location))
            elif node.kind is NodeKind.FACT:
                diagnostics.extend(self._collect_fact(node, database, location))

        logger.debug(
            "Collected %d resource(s) and %d fact(s)",
            len(database.resources),
            len(database.facts),
        )
        return diagnostics

    def _collect_triple(
        self, node: Node, database: Database, location: str
    ) -> list[Diagnostic]:
        relation, subject, obj = triple_parts(node)
        relation_name = _relation_name(relation)
        subject_name = address_name(subject)
        object_name = address_name(obj)

        rel = database.find_resource(relation_name)
        sbj = database.find_resource(subject_name)
        if rel is None or sbj is None:
            unknown = relation_name if rel is None else subject_name
            logger.warning("Unknown sentence part %r at %s", unknown, location)
            return [Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code="ONT101",
                message=f"Unknown sentence part {unknown!r}; statement ignored",
                location=location,
                suggestion="Relations and subjects must name a function or a predefined predicate",
                rule="collector",
            )]

        diagnostics: list[Diagnostic] = []
        fact = database.create_fact(rel)
        database.add_argument(fact, sbj)
        if obj is not None:
            objres = database.find_resource(object_name)
            if objres is None:
                logger.warning("Unknown object %r at %s", object_name, location)
                diagnostics.append(Diagnostic(
                    severity=DiagnosticSeverity.WARNING,
                    code="ONT102",
                    message=f"Unknown object {object_name!r}; stored as a unary fact",
                    location=location,
                    rule="collector",
                ))
            else:
                database.add_argument(fact, objres)
        database.add_fact(fact)
        return diagnostics

    def _collect_fact(
        self, node: Node, database: Database, location: str
    ) -> list[Diagnostic]:
        relation, args = fact_parts(node)
        names = [_relation_name(relation)] + [address_name(arg) for arg in args]
        resolved = [database.find_resource(name) for name in names]
        missing = [name for name, res in zip(names, resolved) if res is None]
        if missing:
            logger.warning("Unknown fact part(s) %r at %s", missing, location)
            return [Diagnostic(
                severity=DiagnosticSeverity.WARNING,
                code="ONT103",
                message=f"Unknown fact part(s) {', '.join(map(repr, missing))}; statement ignored",
                location=location,
                rule="collector",
            )]

        predicate, *arguments = resolved
        fact = database.create_fact(predicate)
        for argument in arguments:
            database.add_argument(fact, argument)
        database.add_fact(fact)
        return []


def collect_facts(root: Node, database: Database) -> list[Diagnostic]:
    """Convenience function: seed ``database`` and collect facts from ``root``."""
    return FactCollector().collect(root, database)
