"""Shared test fixtures for ontc.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import io
from collections.abc import Iterator

import pytest

from ontc.ontology.store import Database


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "ontc"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def database() -> Iterator[Database]:
    """An empty database, released after the test."""
    with Database() as db:
        yield db


@pytest.fixture()
def output() -> io.StringIO:
    """A stream that captures built-in output."""
    return io.StringIO()
