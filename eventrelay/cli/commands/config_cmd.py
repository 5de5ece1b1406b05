"""``eventrelay config`` — show the effective configuration."""

from __future__ import annotations

from enum import Enum

from rich.console import Console
from rich.table import Table

from eventrelay.config import config

console = Console()


def config_cmd() -> None:
    """Print the settings resolved from EVENTRELAY_* variables and .env."""
    table = Table(title="eventrelay configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")
    table.add_column("Env var", style="dim")

    for name, value in config.model_dump().items():
        shown = value.value if isinstance(value, Enum) else str(value)
        table.add_row(name, shown, f"EVENTRELAY_{name.upper()}")

    console.print(table)
    if config.is_production:
        console.print("[bold yellow]Running in production mode.[/bold yellow]")
