"""Integration test — dispatcher wired to the shipped mock collaborators.

Runs the real loop for a short, fixed duration with tiny delays and checks
what the mock sink observed end to end.
"""

from __future__ import annotations

import asyncio

import pytest

from eventrelay import CancellationToken, Dispatcher, DispatcherState, RetryPolicy
from eventrelay.config import RelayConfig
from eventrelay.models.events import Address, Event, Payload, SendResult
from eventrelay.routing.sinks.mock import MockSink
from eventrelay.routing.sources.mock import DEFAULT_EVENT, MockSource


async def _run_for(dispatcher: Dispatcher, seconds: float) -> CancellationToken:
    token = CancellationToken()
    asyncio.get_running_loop().call_later(seconds, token.cancel, "test window closed")
    await asyncio.wait_for(dispatcher.run(token), timeout=seconds + 2.0)
    return token


class TestMockPipeline:
    @pytest.mark.asyncio
    async def test_default_event_is_delivered_repeatedly(self):
        source = MockSource(read_delay=0.01)
        sink = MockSink(send_delay=0)
        dispatcher = Dispatcher(source, sink, backoff=0.05)

        token = await _run_for(dispatcher, 0.3)

        assert token.reason == "test window closed"
        assert dispatcher.state is DispatcherState.STOPPED
        assert source.read_count >= 2
        assert len(sink.deliveries) >= 2
        for address, payload, result in sink.deliveries:
            assert address == DEFAULT_EVENT.recipients[0]
            assert payload == DEFAULT_EVENT.payload
            assert result is SendResult.ACCEPTED

    @pytest.mark.asyncio
    async def test_rejections_slow_the_loop_down(self):
        multi = Event(
            recipients=[
                Address(data_center="dc-a", node_id="n1"),
                Address(data_center="dc-b", node_id="n2"),
            ],
            payload=Payload(origin="integration", data=b"hello"),
        )
        fast_sink = MockSink(send_delay=0)
        slow_sink = MockSink(send_delay=0, reject_every=1)

        fast = Dispatcher(MockSource(read_delay=0.005, event=multi), fast_sink, backoff=0.05)
        slow = Dispatcher(MockSource(read_delay=0.005, event=multi), slow_sink, backoff=0.05)

        await asyncio.gather(_run_for(fast, 0.3), _run_for(slow, 0.3))

        assert slow_sink.rejected_count == len(slow_sink.deliveries)
        assert len(slow_sink.deliveries) < len(fast_sink.deliveries)
        # fan-out order holds across the whole run
        nodes = [address.node_id for address, _, _ in fast_sink.deliveries]
        assert nodes[: len(nodes) // 2 * 2] == ["n1", "n2"] * (len(nodes) // 2)

    @pytest.mark.asyncio
    async def test_resend_policy_from_env_config(self, monkeypatch):
        monkeypatch.setenv("EVENTRELAY_BACKOFF_SECONDS", "0.01")
        monkeypatch.setenv("EVENTRELAY_RETRY_POLICY", "resend")
        monkeypatch.setenv("EVENTRELAY_MAX_ATTEMPTS", "2")
        config = RelayConfig()

        source = MockSource(read_delay=0.01)
        sink = MockSink(send_delay=0, reject_every=2)
        dispatcher = Dispatcher.from_config(source, sink, config)

        await _run_for(dispatcher, 0.3)

        assert dispatcher.retry_policy is RetryPolicy.RESEND
        # every rejected send is immediately followed by a re-send that the
        # mock accepts, so each read yields exactly one accepted delivery
        accepted = len(sink.deliveries) - sink.rejected_count
        assert accepted >= source.read_count - 1
