"""eventrelay CLI — Typer-based command-line interface.

Provides the ``eventrelay`` command with subcommands for running the demo
dispatch loop against mock collaborators and inspecting configuration.

All output uses Rich for formatted terminal display.
"""
