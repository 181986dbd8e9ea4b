"""
Console output helpers for the ftp-checkout CLI.
"""

from typing import Sequence

from rich.console import Console
from rich.table import Table

from ..models.ftp import ServerProfile

console = Console()
error_console = Console(stderr=True)


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    error_console.print(f"[red]✗[/red] {message}")


def print_line(line: str) -> None:
    """Print a progress line verbatim, without markup interpretation."""
    console.print(line, markup=False, highlight=False)


def profiles_table(profiles: Sequence[ServerProfile]) -> Table:
    """Table of server profiles."""
    table = Table(title="FTP servers")
    table.add_column("Name", style="cyan")
    table.add_column("Host")
    table.add_column("Port", justify="right")
    table.add_column("Credentials")
    for profile in profiles:
        table.add_row(
            profile.name, profile.host, profile.port, profile.credential_id or "-"
        )
    return table


def names_table(title: str, names: Sequence[str]) -> Table:
    table = Table(title=title)
    table.add_column("Id", style="cyan")
    for name in names:
        table.add_row(name)
    return table
