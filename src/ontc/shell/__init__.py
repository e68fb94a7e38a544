"""Interactive shell package.

Exports ``KnowledgeShell``, a command loop over an ontology database.
"""
from __future__ import annotations

from ontc.shell.shell import HELP_TEXT, KnowledgeShell, ShellResult, start_shell

__all__ = ["KnowledgeShell", "ShellResult", "HELP_TEXT", "start_shell"]
