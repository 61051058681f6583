"""Shared console utilities for CLI commands."""

from rich.console import Console
from rich.markup import escape

# Shared console instance for all CLI output
console = Console()


def error(msg: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]{escape(msg)}[/red]", soft_wrap=True)


def success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]{escape(msg)}[/green]", soft_wrap=True)


def plain(msg: str) -> None:
    """Print text verbatim, without markup or highlighting."""
    console.print(msg, markup=False, highlight=False, soft_wrap=True)
