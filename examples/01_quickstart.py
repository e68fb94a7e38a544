#!/usr/bin/env python3
"""Example: Quickstart — ontc

Minimal working example: load a tree document, validate it, and run it
so that the ontology decides which functions run before ``main``.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install ontc
"""
from __future__ import annotations

from pathlib import Path

import ontc

PROGRAM = Path(__file__).parent / "programs" / "precedence.yaml"


def main() -> None:
    print(f"ontc version: {ontc.__version__}")

    # Step 1: Load the tree document into a program tree
    loaded = ontc.load(PROGRAM)
    print(f"Loaded {PROGRAM.name}: {len(loaded.diagnostics)} load problem(s)")

    # Step 2: Validate (exactly one main)
    diagnostics = ontc.validate(loaded.tree)
    print(f"Validation: {len(diagnostics)} finding(s)")
    for diag in diagnostics:
        print(f"  {diag}")

    # Step 3: Run. Facts are collected, then main and its predecessors execute.
    print("\nProgram output:")
    result = ontc.run(loaded.tree)
    print(f"\nExecution order: {' -> '.join(result.executed)}")


if __name__ == "__main__":
    main()
