"""Mock sink — simulates delivery and records every attempt.

Accepts everything by default.  With ``reject_every=N`` every Nth send is
rejected, which makes the dispatcher's backoff visible in demos.
"""

from __future__ import annotations

import asyncio
import logging

from eventrelay.models.events import Address, Payload, SendResult

logger = logging.getLogger(__name__)


class MockSink:
    """Sleeps ``send_delay`` per send and records ``(address, payload, result)``.

    Parameters
    ----------
    send_delay:
        Seconds to sleep before each send returns.
    reject_every:
        When positive, every Nth send is rejected.  ``0`` accepts all.
    """

    def __init__(self, send_delay: float = 0.5, reject_every: int = 0) -> None:
        if send_delay < 0:
            raise ValueError(f"send_delay must be non-negative, got {send_delay!r}")
        if reject_every < 0:
            raise ValueError(f"reject_every must be non-negative, got {reject_every!r}")
        self._send_delay = send_delay
        self._reject_every = reject_every
        self.deliveries: list[tuple[Address, Payload, SendResult]] = []

    @property
    def sink_name(self) -> str:
        return "mock"

    @property
    def rejected_count(self) -> int:
        return sum(1 for _, _, result in self.deliveries if result is SendResult.REJECTED)

    async def send(self, address: Address, payload: Payload) -> SendResult:
        await asyncio.sleep(self._send_delay)
        attempt = len(self.deliveries) + 1
        if self._reject_every and attempt % self._reject_every == 0:
            result = SendResult.REJECTED
        else:
            result = SendResult.ACCEPTED
        self.deliveries.append((address, payload, result))
        logger.debug("MockSink: send #%d to %s -> %s", attempt, address, result.value)
        return result
