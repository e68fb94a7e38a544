"""Error types for the ontology database."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ontc.ontology.store import Resource


class OntologyError(Exception):
    """Base class for refused ontology database operations."""


class UnknownResourceError(OntologyError):
    """Raised when a fact refers to a resource its database does not own.

    Parameters
    ----------
    resource:
        The offending resource.
    role:
        ``"predicate"`` or ``"argument"``.
    """

    def __init__(self, resource: Resource, role: str) -> None:
        self.resource = resource
        self.role = role
        super().__init__(
            f"{role.capitalize()} {resource.name!r} is not present in the "
            "resource list of this database. "
            "Obtain resources through find_resource() on the same database."
        )
