"""Source protocol for eventrelay dispatch.

A source exposes a ``source_name`` property and a ``read()`` coroutine that
produces exactly one ``Event`` per call.  ``read()`` may suspend for as long
as it needs; the dispatcher cancels a pending read when it is asked to stop.
"""

from __future__ import annotations

from typing import Awaitable, Protocol, runtime_checkable

from eventrelay.models.events import Event


@runtime_checkable
class EventSource(Protocol):
    """Protocol that every event source must implement.

    Attributes
    ----------
    source_name : str
        A human-readable identifier used in log messages.
    """

    @property
    def source_name(self) -> str:
        """Return the name of this source."""
        ...

    def read(self) -> Awaitable[Event]:
        """Produce the next event.

        Implementations are usually ``async def`` methods.  Raising is a
        collaborator fault and is handled according to the dispatcher's
        ``FaultPolicy``.
        """
        ...
