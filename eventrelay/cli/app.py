"""Main Typer application — imports and registers all CLI commands.

Entry point: ``eventrelay`` (configured via pyproject.toml project.scripts).
"""

from __future__ import annotations

import typer

from eventrelay.cli.commands.config_cmd import config_cmd
from eventrelay.cli.commands.demo import demo_cmd

app = typer.Typer(
    name="eventrelay",
    help="eventrelay: single-consumer, multi-recipient event dispatch loop.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)

# Register subcommands
app.command(name="demo", help="Run the dispatcher against mock collaborators.")(demo_cmd)
app.command(name="config", help="Show the effective configuration.")(config_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
