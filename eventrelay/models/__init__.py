"""eventrelay data models — Pydantic v2, frozen where they carry data."""

from eventrelay.models.dispatch import (
    VALID_TRANSITIONS,
    DispatcherState,
    FaultPolicy,
    RetryPolicy,
)
from eventrelay.models.events import Address, Event, Payload, SendResult

__all__ = [
    # events
    "Address",
    "Event",
    "Payload",
    "SendResult",
    # dispatch
    "DispatcherState",
    "FaultPolicy",
    "RetryPolicy",
    "VALID_TRANSITIONS",
]
