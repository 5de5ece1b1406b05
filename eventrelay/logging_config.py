"""Logging setup for the eventrelay process.

Library modules only call ``logging.getLogger(__name__)``.  Entry points
(the CLI) call ``configure_logging`` once to attach a Rich handler.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str = "INFO", console: Console | None = None) -> None:
    """Configure the root logger with a single ``RichHandler``.

    Existing root handlers are removed so repeated calls do not duplicate
    output.  Unknown level names fall back to INFO.
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handler = RichHandler(
        console=console,
        show_path=False,
        rich_tracebacks=True,
        log_time_format="%H:%M:%S",
    )
    handler.setLevel(resolved)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))

    root = logging.getLogger()
    root.setLevel(resolved)
    for existing in root.handlers[:]:
        root.removeHandler(existing)
    root.addHandler(handler)
