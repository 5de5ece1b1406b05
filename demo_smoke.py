"""Smoke test — runs the dispatcher against the mock collaborators.

Usage:
    python demo_smoke.py
"""

from __future__ import annotations

import asyncio

from eventrelay.config import config
from eventrelay.core.cancellation import CancellationToken
from eventrelay.routing.dispatcher import Dispatcher
from eventrelay.routing.sinks.mock import MockSink
from eventrelay.routing.sources.mock import MockSource

RUN_SECONDS = 3.0


async def main() -> None:
    """Run the mock pipeline for a few seconds and report what happened."""
    print(f"eventrelay smoke test ({config.environment})")
    print(f"Backoff: {config.backoff_seconds}s | Retry policy: {config.retry_policy.value}")
    print()

    source = MockSource(read_delay=config.mock_read_delay)
    sink = MockSink(send_delay=config.mock_send_delay)
    dispatcher = Dispatcher.from_config(source, sink, config)

    token = CancellationToken()
    asyncio.get_running_loop().call_later(RUN_SECONDS, token.cancel, "smoke test done")
    await dispatcher.run(token)

    print(f"Reads: {source.read_count}")
    for address, payload, result in sink.deliveries:
        print(f"  [{result.value}] {address} <- {payload.origin} ({len(payload.data)} bytes)")
    print(f"Dispatcher state: {dispatcher.state.value}")


if __name__ == "__main__":
    asyncio.run(main())
