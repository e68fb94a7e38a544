"""Ontology module.

Exports the in-memory ``Database`` with its ``Resource`` and ``Fact``
types, the error types, and the ``FactCollector`` that fills a database
from a program tree.
"""
from __future__ import annotations

from ontc.ontology.collector import (
    PRECEDED_BY,
    PREDEFINED_PREDICATES,
    PRINTS_TEST_MESSAGE,
    FactCollector,
    collect_facts,
    seed_predicates,
)
from ontc.ontology.errors import OntologyError, UnknownResourceError
from ontc.ontology.store import Database, Fact, Resource, create_resource, format_fact

__all__ = [
    "Database",
    "Resource",
    "Fact",
    "create_resource",
    "format_fact",
    "OntologyError",
    "UnknownResourceError",
    "FactCollector",
    "collect_facts",
    "seed_predicates",
    "PRECEDED_BY",
    "PRINTS_TEST_MESSAGE",
    "PREDEFINED_PREDICATES",
]
