"""In-memory ontology database: resources, facts and triple queries.

A ``Database`` owns two append-only collections.  *Resources* are interned
named constants; *facts* pair a predicate resource with an ordered list of
argument resources.  Every resource a fact mentions must already belong to
the same database, which is checked when the fact is built.

All matching is by identity.  Two resources that share a name are different
objects unless both came from the same ``find_resource`` lookup; the
database keeps an interning table so that lookup by name always returns the
first resource registered under that name.

Usage
-----
::

    from ontc.ontology import Database

    with Database() as db:
        rel = db.intern("isPreceededBy")
        main, setup = db.intern("main"), db.intern("setup")
        fact = db.create_fact(rel)
        db.add_argument(fact, main)
        db.add_argument(fact, setup)
        db.add_fact(fact)
        db.query_triple(rel, subject=main)   # [setup]
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import TracebackType

from ontc.ontology.errors import OntologyError, UnknownResourceError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Resource:
    """An individual constant in the domain of discourse.

    Parameters
    ----------
    name:
        The resource name.
    handle:
        Position in the owning database's resource list, assigned by
        ``Database.add_resource``.  ``None`` until registered.
    """

    name: str
    handle: int | None = field(default=None)

    def __repr__(self) -> str:
        return f"Resource({self.name!r}, handle={self.handle})"


@dataclass(eq=False)
class Fact:
    """An atomic sentence: ``predicate(arguments...)``.

    Argument position encodes the role; for triple facts the subject is the
    first argument and the object the second.
    """

    predicate: Resource
    arguments: list[Resource] = field(default_factory=list)

    @property
    def arity(self) -> int:
        return len(self.arguments)

    def __repr__(self) -> str:
        return f"Fact({format_fact(self)!r})"


def create_resource(name: str) -> Resource:
    """Create a free-standing resource; register it with ``Database.add_resource``."""
    if not isinstance(name, str):
        raise TypeError(f"Resource name must be a string, got {type(name).__name__}")
    return Resource(name=name)


def format_fact(fact: Fact) -> str:
    """Render a fact as ``predicate(arg1, arg2).``."""
    args = ", ".join(arg.name for arg in fact.arguments)
    return f"{fact.predicate.name}({args})."


class Database:
    """Owner of all resources and facts of one run."""

    def __init__(self) -> None:
        self._resources: list[Resource] = []
        self._facts: list[Fact] = []
        self._members: set[Resource] = set()
        self._by_name: dict[str, Resource] = {}

    def __repr__(self) -> str:
        return (
            f"Database(resources={len(self._resources)}, "
            f"facts={len(self._facts)})"
        )

    def __enter__(self) -> Database:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    @property
    def resources(self) -> tuple[Resource, ...]:
        """Registered resources in insertion order."""
        return tuple(self._resources)

    @property
    def facts(self) -> tuple[Fact, ...]:
        """Stored facts in insertion order."""
        return tuple(self._facts)

    def owns(self, resource: Resource) -> bool:
        """Return True if ``resource`` (by identity) is registered here."""
        return resource in self._members

    # ------------------------------------------------------------------
    # Resources
    # ------------------------------------------------------------------

    def add_resource(self, resource: Resource) -> None:
        """Append ``resource`` to the resource list and assign its handle.

        Re-adding a resource this database already owns is a no-op.

        Raises
        ------
        OntologyError
            If ``resource`` is registered with another database.
        """
        if resource in self._members:
            logger.debug("Resource %r is already registered; skipping.", resource.name)
            return
        if resource.handle is not None:
            raise OntologyError(
                f"Resource {resource.name!r} is registered with another database"
            )
        resource.handle = len(self._resources)
        self._resources.append(resource)
        self._members.add(resource)
        self._by_name.setdefault(resource.name, resource)
        logger.debug("Registered resource %r as handle %d", resource.name, resource.handle)

    def find_resource(self, name: str | None) -> Resource | None:
        """Return the first resource registered under ``name``, or ``None``."""
        if name is None:
            return None
        return self._by_name.get(name)

    def intern(self, name: str) -> Resource:
        """Return the canonical resource for ``name``, creating it if needed."""
        resource = self.find_resource(name)
        if resource is None:
            resource = create_resource(name)
            self.add_resource(resource)
        return resource

    # ------------------------------------------------------------------
    # Facts
    # ------------------------------------------------------------------

    def create_fact(self, predicate: Resource) -> Fact:
        """Create an argument-less fact over ``predicate``.

        Raises
        ------
        UnknownResourceError
            If ``predicate`` is not registered in this database.
        """
        if predicate not in self._members:
            logger.error(
                "Predicate %r being added to a fact is not present in the resource list",
                predicate.name,
            )
            raise UnknownResourceError(predicate, "predicate")
        return Fact(predicate=predicate)

    def add_argument(self, fact: Fact, argument: Resource) -> None:
        """Append ``argument`` to ``fact``; call order decides argument position.

        Raises
        ------
        UnknownResourceError
            If ``argument`` is not registered in this database.  The fact
            is left unchanged.
        """
        if argument not in self._members:
            logger.error(
                "Argument %r being added to a fact is not present in the resource list",
                argument.name,
            )
            raise UnknownResourceError(argument, "argument")
        fact.arguments.append(argument)

    def add_fact(self, fact: Fact) -> None:
        """Store ``fact``.  Duplicates are kept."""
        self._facts.append(fact)
        logger.debug("Stored fact %s", format_fact(fact))

    def check(self, fact: Fact) -> bool:
        """Return True if an identical fact is stored.

        Identical means the same predicate and an argument sequence of the
        same length whose resources are the same, position by position.
        """
        for stored in self._facts:
            if stored.predicate is not fact.predicate:
                continue
            if len(stored.arguments) != len(fact.arguments):
                continue
            if all(a is b for a, b in zip(stored.arguments, fact.arguments)):
                return True
        return False

    def query_triple(
        self,
        relation: Resource | None,
        subject: Resource | None = None,
        obj: Resource | None = None,
    ) -> list[Resource]:
        """Answer ``relation(subject, ?)`` or ``relation(?, obj)``.

        Exactly one of ``subject`` and ``obj`` must be given; the other is
        the query goal.  Only facts with at least two arguments take part.

        Returns
        -------
        list[Resource]
            Matching resources in fact insertion order.  Empty when both or
            neither of ``subject`` and ``obj`` are given.
        """
        if subject is not None and obj is not None:
            logger.error("Triple query has no goal: both subject and object given")
            return []
        if subject is None and obj is None:
            logger.warning("Triple query has neither subject nor object")
            return []

        result: list[Resource] = []
        for stored in self._facts:
            if stored.predicate is not relation or len(stored.arguments) < 2:
                continue
            first, second = stored.arguments[0], stored.arguments[1]
            if obj is None and first is subject:
                result.append(second)
            elif subject is None and second is obj:
                result.append(first)
        return result

    # ------------------------------------------------------------------
    # Lifetime
    # ------------------------------------------------------------------

    def release(self) -> None:
        """Drop all facts, then all resources."""
        fact_count, resource_count = len(self._facts), len(self._resources)
        self._facts.clear()
        for resource in self._resources:
            resource.handle = None
        self._resources.clear()
        self._members.clear()
        self._by_name.clear()
        logger.debug(
            "Released database with %d fact(s) and %d resource(s)",
            fact_count,
            resource_count,
        )
