"""Interactive knowledge-base shell.

A line-oriented command loop over the public operations of
``ontc.ontology.store.Database``.  Input and output go through injectable
callables that default to ``click.prompt`` and ``click.echo``, so the shell
can be driven from tests without a terminal.

Commands
--------
help        List the available commands
createdb    Create a new database
newres      Add a new resource
newfact     Add a new fact (predicate and arguments chosen by number)
listres     List all resources
listfacts   List all facts
quit        Leave the shell (also ``exit`` and ``q``)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import click

from ontc.ontology.store import Database, Resource, create_resource, format_fact

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "Available commands:\n"
    "createdb\tCreate new database\n"
    "newres\t\tAdd new resource\n"
    "newfact\t\tAdd new fact\n"
    "listres\t\tList all resources\n"
    "listfacts\tList all facts\n"
    "quit\t\tQuit\n"
    "exit\t\tQuit"
)

EXIT_COMMANDS = frozenset({"quit", "exit", "q"})
NO_DATABASE = "Error: no database available"


@dataclass(frozen=True)
class ShellResult:
    """What a single command produced.

    Attributes
    ----------
    output:
        Text to show the user, or ``None``.
    exit:
        ``True`` when the command ends the session.
    """

    output: str | None = None
    exit: bool = False


class KnowledgeShell:
    """REPL over an ontology database.

    Parameters
    ----------
    database:
        Database to work on.  When ``None`` the user creates one with
        ``createdb``; such a database is released when the session ends.
    prompt:
        Callable used for every line of input, with ``click.prompt``'s
        signature.
    echo:
        Callable used for every line of output, with ``click.echo``'s
        signature.
    """

    def __init__(
        self,
        database: Database | None = None,
        prompt: Callable[..., Any] = click.prompt,
        echo: Callable[..., Any] = click.echo,
    ) -> None:
        self._database = database
        self._owns_database = False
        self._prompt = prompt
        self._echo = echo
        self._commands: dict[str, Callable[[], str]] = {
            "help": self._cmd_help,
            "createdb": self._cmd_create_db,
            "newres": self._cmd_new_resource,
            "newfact": self._cmd_new_fact,
            "listres": self._cmd_list_resources,
            "listfacts": self._cmd_list_facts,
        }

    @property
    def database(self) -> Database | None:
        return self._database

    def run(self) -> None:
        """Read and evaluate commands until the user quits or input ends."""
        self._echo("ontc interactive shell")
        self._echo('Enter "help" for a list of available commands.')
        try:
            while True:
                try:
                    line = self._read("", prompt_suffix="> ")
                    result = self.evaluate(line)
                except click.Abort:
                    self._echo("")
                    break
                if result.exit:
                    break
                if result.output is not None:
                    self._echo(result.output)
        finally:
            if self._owns_database and self._database is not None:
                self._database.release()
                self._database = None
                self._owns_database = False

    def evaluate(self, line: str) -> ShellResult:
        """Run the command on ``line`` and return its result."""
        command = line.strip()
        if command in EXIT_COMMANDS:
            return ShellResult(exit=True)
        handler = self._commands.get(command)
        if handler is None:
            return ShellResult(output="Unknown command")
        logger.debug("Shell command %r", command)
        return ShellResult(output=handler())

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def _cmd_help(self) -> str:
        return HELP_TEXT

    def _cmd_create_db(self) -> str:
        if self._database is not None:
            return "Database exists already!"
        self._database = Database()
        self._owns_database = True
        return "Database created"

    def _cmd_new_resource(self) -> str:
        if self._database is None:
            return NO_DATABASE
        name = self._read("Name")
        self._database.add_resource(create_resource(name))
        return "Resource created!"

    def _cmd_new_fact(self) -> str:
        database = self._database
        if database is None:
            return NO_DATABASE

        self._echo("Select predicate:")
        predicate = self._select(database)
        if predicate is None:
            return "Error while creating fact"

        fact = database.create_fact(predicate)
        while True:
            self._echo("Select argument or press enter to finish:")
            argument = self._select(database)
            if argument is None:
                break
            database.add_argument(fact, argument)
        database.add_fact(fact)
        return "Fact created!"

    def _cmd_list_resources(self) -> str:
        if self._database is None:
            return NO_DATABASE
        names = [resource.name for resource in self._database.resources]
        return "\n".join(names) if names else "No resources"

    def _cmd_list_facts(self) -> str:
        if self._database is None:
            return NO_DATABASE
        facts = [format_fact(fact) for fact in self._database.facts]
        return "\n".join(facts) if facts else "No facts"

    # ------------------------------------------------------------------
    # Input helpers
    # ------------------------------------------------------------------

    def _read(self, text: str, **kwargs: Any) -> str:
        return str(self._prompt(text, default="", show_default=False, **kwargs))

    def _select(self, database: Database) -> Resource | None:
        """Show numbered resources and return the chosen one.

        A blank answer returns ``None``; so does an invalid one, after an
        error message.
        """
        resources = database.resources
        for number, resource in enumerate(resources, start=1):
            self._echo(f"{number} {resource.name}")

        answer = self._read("Enter element to choose").strip()
        if not answer:
            return None
        try:
            selection = int(answer)
        except ValueError:
            selection = 0
        if not 0 < selection <= len(resources):
            self._echo("Error: invalid selection", err=True)
            return None
        return resources[selection - 1]


def start_shell(database: Database | None = None) -> None:
    """Convenience function: run an interactive shell on the terminal."""
    KnowledgeShell(database).run()
