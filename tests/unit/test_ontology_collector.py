"""Unit tests for ontc.ontology.collector — seeding and fact collection."""
from __future__ import annotations

import pytest

from ontc.ast.nodes import add_sibling, new_address, new_fact
from ontc.ontology.collector import (
    PRECEDED_BY,
    PREDEFINED_PREDICATES,
    PRINTS_TEST_MESSAGE,
    FactCollector,
    collect_facts,
    seed_predicates,
)
from ontc.ontology.store import Database, format_fact
from trees import call, func, name, program, triple


def _facts(db: Database) -> list[str]:
    return [format_fact(f) for f in db.facts]


class TestSeeding:
    def test_predefined_predicates(self) -> None:
        assert PREDEFINED_PREDICATES == (PRECEDED_BY, PRINTS_TEST_MESSAGE)
        assert PRECEDED_BY == "isPreceededBy"
        assert PRINTS_TEST_MESSAGE == "printsATestMessageWhenCalled"

    def test_seed_is_idempotent(self, database: Database) -> None:
        seed_predicates(database)
        seed_predicates(database)
        assert [r.name for r in database.resources] == list(PREDEFINED_PREDICATES)

    def test_collector_seeds_by_default(self, database: Database) -> None:
        FactCollector().collect(program(), database)
        assert database.find_resource(PRECEDED_BY) is not None

    def test_seeding_can_be_disabled(self, database: Database) -> None:
        FactCollector(seed=False).collect(program(func("main")), database)
        assert [r.name for r in database.resources] == ["main"]


class TestFunctionResources:
    def test_one_resource_per_function(self, database: Database) -> None:
        collect_facts(program(func("main"), func("setup")), database)
        assert database.find_resource("main") is not None
        assert database.find_resource("setup") is not None

    def test_duplicate_function_names_share_a_resource(self, database: Database) -> None:
        collect_facts(program(func("a"), func("a")), database)
        assert [r.name for r in database.resources].count("a") == 1

    def test_nested_items_are_not_collected(self, database: Database) -> None:
        collect_facts(program(func("main", call("println", "x"))), database)
        assert database.find_resource("println") is None


class TestTripleFacts:
    def test_binary_triple(self, database: Database) -> None:
        root = program(func("main"), func("setup"), triple("main", PRECEDED_BY, "setup"))
        assert collect_facts(root, database) == []
        assert _facts(database) == ["isPreceededBy(main, setup)."]

    def test_subject_is_first_argument(self, database: Database) -> None:
        collect_facts(program(func("a"), func("b"), triple("a", PRECEDED_BY, "b")), database)
        (fact,) = database.facts
        assert fact.arguments[0] is database.find_resource("a")
        assert fact.arguments[1] is database.find_resource("b")

    def test_unary_triple(self, database: Database) -> None:
        collect_facts(program(func("main"), triple("main", PRINTS_TEST_MESSAGE)), database)
        assert _facts(database) == ["printsATestMessageWhenCalled(main)."]

    def test_check_succeeds_after_collection(self, database: Database) -> None:
        collect_facts(program(func("main"), triple("main", PRINTS_TEST_MESSAGE)), database)
        probe = database.create_fact(database.find_resource(PRINTS_TEST_MESSAGE))  # type: ignore[arg-type]
        database.add_argument(probe, database.find_resource("main"))  # type: ignore[arg-type]
        assert database.check(probe)

    def test_function_can_be_used_as_relation(self, database: Database) -> None:
        collect_facts(program(func("a"), func("b"), func("rel"), triple("a", "rel", "b")), database)
        assert _facts(database) == ["rel(a, b)."]

    @pytest.mark.parametrize(
        "statement, unknown",
        [
            (triple("main", "unknownRelation"), "unknownRelation"),
            (triple("ghost", PRINTS_TEST_MESSAGE), "ghost"),
        ],
    )
    def test_unknown_relation_or_subject_discarded(
        self, database: Database, statement, unknown: str
    ) -> None:
        diagnostics = collect_facts(program(func("main"), statement, func("other")), database)
        (diag,) = diagnostics
        assert diag.code == "ONT101"
        assert unknown in diag.message
        assert diag.location == "body[1]"
        assert database.facts == ()
        # collection continued past the bad statement
        assert database.find_resource("other") is not None

    def test_unknown_object_kept_as_unary(self, database: Database) -> None:
        diagnostics = collect_facts(
            program(func("main"), triple("main", PRECEDED_BY, "ghost")), database
        )
        assert [d.code for d in diagnostics] == ["ONT102"]
        assert _facts(database) == ["isPreceededBy(main)."]

    def test_facts_kept_in_statement_order(self, database: Database) -> None:
        root = program(
            func("main"),
            func("a"),
            func("b"),
            triple("main", PRECEDED_BY, "b"),
            triple("main", PRECEDED_BY, "a"),
        )
        collect_facts(root, database)
        assert _facts(database) == ["isPreceededBy(main, b).", "isPreceededBy(main, a)."]


class TestFirstOrderFacts:
    def test_nary_fact(self, database: Database) -> None:
        args = add_sibling(new_address(name("a")), new_address(name("b")))
        add_sibling(args, new_address(name("c")))
        root = program(func("a"), func("b"), func("c"), func("between"), new_fact(name("between"), args))
        assert collect_facts(root, database) == []
        assert _facts(database) == ["between(a, b, c)."]

    def test_unknown_part_discards_fact(self, database: Database) -> None:
        root = program(func("a"), new_fact(name(PRECEDED_BY), new_address(name("ghost"))))
        (diag,) = collect_facts(root, database)
        assert diag.code == "ONT103"
        assert "ghost" in diag.message
        assert database.facts == ()
