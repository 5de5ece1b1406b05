"""``eventrelay demo`` — run the dispatch loop against mock collaborators.

Wires a ``MockSource`` and ``MockSink`` into a ``Dispatcher`` and lets it
run for a fixed duration (or until Ctrl-C), then prints what the mocks saw.
"""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console
from rich.panel import Panel

from eventrelay.config import config
from eventrelay.core.cancellation import CancellationToken
from eventrelay.logging_config import configure_logging
from eventrelay.models.dispatch import RetryPolicy
from eventrelay.routing.dispatcher import Dispatcher
from eventrelay.routing.sinks.mock import MockSink
from eventrelay.routing.sources.mock import MockSource

console = Console()


async def _run_for(dispatcher: Dispatcher, duration: float) -> None:
    token = CancellationToken()
    if duration > 0:
        asyncio.get_running_loop().call_later(
            duration, token.cancel, "demo duration elapsed"
        )
    await dispatcher.run(token)


def demo_cmd(
    backoff: float | None = typer.Option(
        None,
        "--backoff",
        "-b",
        min=0,
        help="Backoff interval in seconds after a rejection. Defaults to config.",
    ),
    duration: float = typer.Option(
        10.0,
        "--duration",
        "-t",
        min=0,
        help="Seconds to run before cancelling. 0 runs until Ctrl-C.",
    ),
    read_delay: float | None = typer.Option(
        None, "--read-delay", min=0, help="MockSource delay per read in seconds."
    ),
    send_delay: float | None = typer.Option(
        None, "--send-delay", min=0, help="MockSink delay per send in seconds."
    ),
    reject_every: int = typer.Option(
        0,
        "--reject-every",
        min=0,
        help="Make the mock sink reject every Nth send. 0 accepts everything.",
    ),
    retry_policy: RetryPolicy | None = typer.Option(
        None,
        "--retry-policy",
        case_sensitive=False,
        help="advance: move on after backoff; resend: retry the same recipient.",
    ),
    max_attempts: int | None = typer.Option(
        None, "--max-attempts", min=1, help="Attempts per recipient under resend."
    ),
    log_level: str | None = typer.Option(
        None, "--log-level", help="Log level, e.g. DEBUG to trace every transition."
    ),
) -> None:
    """Run the dispatcher with a mock source and sink.

    Every read yields a single-recipient demo event; use --reject-every to
    see the backoff in action.
    """
    configure_logging(log_level or config.log_level, console=console)

    source = MockSource(
        read_delay=config.mock_read_delay if read_delay is None else read_delay
    )
    sink = MockSink(
        send_delay=config.mock_send_delay if send_delay is None else send_delay,
        reject_every=reject_every,
    )
    dispatcher = Dispatcher(
        source,
        sink,
        config.backoff_seconds if backoff is None else backoff,
        retry_policy=retry_policy or config.retry_policy,
        max_attempts=max_attempts or config.max_attempts,
        fault_policy=config.fault_policy,
    )

    console.print()
    console.print(
        Panel(
            "[bold]eventrelay demo[/bold]\n\n"
            f"Backoff:  {dispatcher.backoff_interval:.3f}s\n"
            f"Retry:    {dispatcher.retry_policy.value}"
            f" (max attempts {dispatcher.max_attempts})\n"
            f"Duration: {f'{duration:g}s' if duration > 0 else 'until Ctrl-C'}",
            border_style="cyan",
            padding=(1, 2),
        )
    )

    try:
        asyncio.run(_run_for(dispatcher, duration))
        outcome = "[bold green]Stopped cleanly[/bold green]"
    except KeyboardInterrupt:
        outcome = "[bold yellow]Interrupted[/bold yellow]"

    console.print()
    console.print(
        Panel(
            "\n".join([
                outcome,
                "",
                f"[bold]Reads:[/bold]       {source.read_count}",
                f"[bold]Sends:[/bold]       {len(sink.deliveries)}",
                f"[bold]Rejected:[/bold]    {sink.rejected_count}",
                f"[bold]State:[/bold]       {dispatcher.state.value}",
            ]),
            title="[bold]Demo Summary[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
