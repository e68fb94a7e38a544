"""CLI entry point for ontc.

Invoked as::

    ontc [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m ontc.cli.main

Commands
--------
run         Run an OXPL program
dbgon       Debug the ontology of an OXPL program in the interactive shell
shell       Open an interactive knowledge-base shell
validate    Load and validate an OXPL program
version     Show version information

Programs are read as tree documents (``.yaml``/``.yml`` or ``.json``); see
``ontc.ast.loader`` for the format.
"""
from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from ontc.ast.loader import LoadResult
    from ontc.validator.diagnostics import Diagnostic

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_or_exit(path: str) -> "LoadResult":
    """Load a tree document, printing the error and exiting on failure."""
    from ontc.ast.loader import LoadError, TreeLoader

    try:
        return TreeLoader().load_file(path)
    except LoadError as exc:
        err_console.print(f"[red]Error:[/red] {escape(str(exc))}")
        sys.exit(1)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


def _print_diagnostics(diagnostics: list["Diagnostic"]) -> None:
    """Print diagnostics one per line on stderr."""
    for d in diagnostics:
        color = _severity_color(d.severity.name)
        err_console.print(f"[{color}]{d.severity.name}[/{color}] {escape(str(d))}", highlight=False)


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True)
@click.version_option(package_name="ontc")
@click.option("-v", "--verbose", is_flag=True, default=False, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ontc - ontology toolchain for OXPL programs."""
    _configure_logging(verbose)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from ontc import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]ontc[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# run command
# ---------------------------------------------------------------------------


@cli.command(name="run")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def run_command(file: str, strict: bool) -> None:
    """Run an OXPL program.

    FILE is the path to the program's tree document.
    """
    from ontc.ast.nodes import release
    from ontc.runtime import run_program

    loaded = _load_or_exit(file)
    if loaded.diagnostics:
        _print_diagnostics(loaded.diagnostics)
        release(loaded.tree)
        sys.exit(1)

    try:
        result = run_program(loaded.tree, strict=strict)
    finally:
        release(loaded.tree)

    _print_diagnostics(result.diagnostics)
    if not result.success:
        err_console.print(f"[red]Error:[/red] {escape(str(result.error_message))}")
        sys.exit(1)
    if result.errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# dbgon command
# ---------------------------------------------------------------------------


@cli.command(name="dbgon")
@click.argument("file", type=click.Path(exists=False))
def dbgon_command(file: str) -> None:
    """Debug the ontology of an OXPL program using the interactive shell.

    FILE is the path to the program's tree document.  Its facts are
    collected into a fresh database which the shell then operates on.
    """
    from ontc.ast.nodes import release
    from ontc.ontology import Database, FactCollector
    from ontc.shell import KnowledgeShell
    from ontc.validator import Validator, has_errors

    loaded = _load_or_exit(file)
    diagnostics = loaded.diagnostics + Validator().validate(loaded.tree)
    if has_errors(diagnostics):
        _print_diagnostics(diagnostics)
        release(loaded.tree)
        sys.exit(1)

    with Database() as database:
        diagnostics.extend(FactCollector().collect(loaded.tree, database))
        release(loaded.tree)
        _print_diagnostics(diagnostics)
        KnowledgeShell(database).run()


# ---------------------------------------------------------------------------
# shell command
# ---------------------------------------------------------------------------


@cli.command(name="shell")
def shell_command() -> None:
    """Open an interactive knowledge-base shell.

    The shell starts without a database; create one with ``createdb``.
    """
    from ontc.shell import KnowledgeShell

    KnowledgeShell().run()


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
def validate_command(file: str, strict: bool) -> None:
    """Load and validate an OXPL program.

    FILE is the path to the program's tree document.
    """
    from ontc.ast.nodes import release
    from ontc.validator import Validator

    loaded = _load_or_exit(file)
    diagnostics = loaded.diagnostics + Validator(strict=strict).validate(loaded.tree)
    release(loaded.tree)

    if not diagnostics:
        console.print(f"[green]OK[/green] {file}: no issues found")
        sys.exit(0)

    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]

    table = Table(title=f"Validation: {file}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Location", min_width=10)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            d.location or "-",
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(warnings)} warning(s)"
    )

    if errors:
        sys.exit(1)


if __name__ == "__main__":
    cli()
