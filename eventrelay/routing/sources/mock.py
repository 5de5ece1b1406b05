"""Mock source — produces a fixed event after a simulated read delay.

Stands in for a real transport in demos and smoke tests.
"""

from __future__ import annotations

import asyncio
import logging

from eventrelay.models.events import Address, Event, Payload

logger = logging.getLogger(__name__)

DEFAULT_EVENT = Event(
    recipients=(Address(data_center="DataCenter1", node_id="Node1"),),
    payload=Payload(origin="Source", data=b"\x00\x01"),
)


class MockSource:
    """Returns the same event on every read, after sleeping ``read_delay``.

    Parameters
    ----------
    read_delay:
        Seconds to sleep before each read returns.
    event:
        The event to produce.  Defaults to a single-recipient demo event.
    """

    def __init__(self, read_delay: float = 1.0, event: Event | None = None) -> None:
        if read_delay < 0:
            raise ValueError(f"read_delay must be non-negative, got {read_delay!r}")
        self._read_delay = read_delay
        self._event = event if event is not None else DEFAULT_EVENT
        self.read_count = 0

    @property
    def source_name(self) -> str:
        return "mock"

    async def read(self) -> Event:
        await asyncio.sleep(self._read_delay)
        self.read_count += 1
        logger.debug(
            "MockSource: read #%d with %d recipient(s)",
            self.read_count,
            len(self._event.recipients),
        )
        return self._event
