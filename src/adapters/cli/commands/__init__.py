"""Sous-package CLI commands - re-exporte les commandes publiques."""

from src.adapters.cli.commands.workflow_commands import (
    approve,
    process,
    run,
)
from src.adapters.cli.commands.library_commands import (
    duplicates,
    history,
    parse,
    pending,
)

__all__ = [
    "approve",
    "duplicates",
    "history",
    "parse",
    "pending",
    "process",
    "run",
]
