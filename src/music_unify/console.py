"""Shared Rich console utilities for music-unify.

Provides a global Rich console instance and helpers for consistent
output formatting across CLI commands.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.markup import escape

# Global console instance (initialized in CLI)
_console: Console | None = None


def get_console() -> Console:
    """Get the global Rich console instance, creating a default one on first use."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def set_console(console: Console) -> None:
    """Set the global Rich console instance."""
    global _console
    _console = console


def print(*args: Any, **kwargs: Any) -> None:
    """Print to the global console.

    Wrapper around console.print() that uses the global console instance.
    """
    get_console().print(*args, **kwargs)


def print_json(data: str) -> None:
    """Print pre-serialized JSON without Rich markup or highlighting."""
    get_console().print(data, markup=False, highlight=False, emoji=False, soft_wrap=True)


def print_error(message: str) -> None:
    get_console().print(f"[red]Error: {escape(message)}[/red]")
