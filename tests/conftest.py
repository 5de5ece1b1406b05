"""Shared test fixtures for eventrelay."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable
from typing import Any

import pytest

from eventrelay.core.cancellation import CancellationToken
from eventrelay.models.events import Address, Event, Payload, SendResult

Trace = list[tuple[Any, ...]]


# ---------------------------------------------------------------------------
# Scripted collaborators shared across test modules
# ---------------------------------------------------------------------------


class ScriptedSource:
    """Yields the scripted events in order.

    Once the script is exhausted the source cancels *token* (if given) and
    then blocks forever, so the dispatcher has to abandon the pending read.
    """

    def __init__(
        self,
        events: Iterable[Event],
        token: CancellationToken | None = None,
        trace: Trace | None = None,
    ) -> None:
        self._events = list(events)
        self._token = token
        self._trace = trace
        self.read_count = 0
        self.read_cancelled = False

    @property
    def source_name(self) -> str:
        return "scripted"

    async def read(self) -> Event:
        self.read_count += 1
        if self._trace is not None:
            self._trace.append(("read",))
        if self._events:
            return self._events.pop(0)
        if self._token is not None:
            self._token.cancel("script exhausted")
        try:
            await asyncio.get_running_loop().create_future()
        except asyncio.CancelledError:
            self.read_cancelled = True
            raise
        raise AssertionError("unreachable")


class RecordingSink:
    """Returns scripted results in order, then *default*; records every send."""

    def __init__(
        self,
        results: Iterable[SendResult] = (),
        trace: Trace | None = None,
        default: SendResult = SendResult.ACCEPTED,
    ) -> None:
        self._results = list(results)
        self._trace = trace
        self._default = default
        self.sent: list[tuple[Address, Payload]] = []

    @property
    def sink_name(self) -> str:
        return "recording"

    @property
    def sent_to(self) -> list[str]:
        return [address.node_id for address, _ in self.sent]

    async def send(self, address: Address, payload: Payload) -> SendResult:
        self.sent.append((address, payload))
        if self._trace is not None:
            self._trace.append(("send", address.node_id))
        return self._results.pop(0) if self._results else self._default


class RecordingToken(CancellationToken):
    """A token that records every backoff request.

    By default backoffs complete instantly; pass ``real_sleep=True`` to keep
    the real cancellable delay.
    """

    def __init__(self, trace: Trace | None = None, real_sleep: bool = False) -> None:
        super().__init__()
        self._trace = trace
        self._real_sleep = real_sleep
        self.sleeps: list[float] = []

    async def sleep(self, seconds: float) -> bool:
        self.sleeps.append(seconds)
        if self._trace is not None:
            self._trace.append(("backoff", seconds))
        if self._real_sleep:
            return await super().sleep(seconds)
        await asyncio.sleep(0)
        return self.is_cancelled


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def trace() -> Trace:
    """An ordered log of reads, sends, and backoffs."""
    return []


@pytest.fixture
def token(trace: Trace) -> RecordingToken:
    """A recording token whose backoffs return immediately."""
    return RecordingToken(trace)


@pytest.fixture
def payload() -> Payload:
    return Payload(origin="test-origin", data=b"\x00\x01\x02")


@pytest.fixture
def make_address() -> Callable[..., Address]:
    """Factory fixture: build an Address in a test data center."""

    def _factory(node_id: str, data_center: str = "dc-test") -> Address:
        return Address(data_center=data_center, node_id=node_id)

    return _factory


@pytest.fixture
def make_event(
    make_address: Callable[..., Address], payload: Payload
) -> Callable[..., Event]:
    """Factory fixture: build an Event addressed to the given node ids."""

    def _factory(*node_ids: str, event_payload: Payload | None = None) -> Event:
        return Event(
            recipients=[make_address(node_id) for node_id in node_ids],
            payload=event_payload or payload,
        )

    return _factory
