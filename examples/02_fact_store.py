#!/usr/bin/env python3
"""Example: Working with the fact store directly

Builds a small database by hand, checks facts and answers both triple
query shapes.

Usage:
    python examples/02_fact_store.py

Requirements:
    pip install ontc
"""
from __future__ import annotations

from ontc.ontology import Database, format_fact


def main() -> None:
    with Database() as db:
        knows = db.intern("knows")
        alice, bob, carol = db.intern("alice"), db.intern("bob"), db.intern("carol")

        for subject, obj in [(alice, bob), (alice, carol), (bob, carol)]:
            fact = db.create_fact(knows)
            db.add_argument(fact, subject)
            db.add_argument(fact, obj)
            db.add_fact(fact)

        print("Facts:")
        for fact in db.facts:
            print(f"  {format_fact(fact)}")

        probe = db.create_fact(knows)
        db.add_argument(probe, bob)
        db.add_argument(probe, alice)
        print(f"\nknows(bob, alice)? {db.check(probe)}")

        print(f"alice knows: {[r.name for r in db.query_triple(knows, subject=alice)]}")
        print(f"who knows carol: {[r.name for r in db.query_triple(knows, obj=carol)]}")


if __name__ == "__main__":
    main()
