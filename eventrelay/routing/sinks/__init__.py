"""Sink protocol for eventrelay dispatch.

All sinks implement the ``DeliverySink`` protocol: a ``sink_name`` property
and a ``send(address, payload)`` coroutine.  The dispatcher calls ``send``
once per recipient (or once per attempt under the RESEND retry policy).
"""

from __future__ import annotations

from typing import Awaitable, Protocol, runtime_checkable

from eventrelay.models.events import Address, Payload, SendResult


@runtime_checkable
class DeliverySink(Protocol):
    """Protocol that every delivery sink must implement.

    Attributes
    ----------
    sink_name : str
        A human-readable identifier used in log messages.
    """

    @property
    def sink_name(self) -> str:
        """Return the name of this sink."""
        ...

    def send(self, address: Address, payload: Payload) -> Awaitable[SendResult]:
        """Deliver *payload* to *address*.

        A recipient declining the payload is reported by returning
        ``SendResult.REJECTED``.  Implementations must not raise for an
        ordinary rejection; an exception is a collaborator fault.

        Parameters
        ----------
        address:
            The recipient to deliver to.
        payload:
            The event payload, passed through unchanged.
        """
        ...
