"""Event, address, and payload models carried through the dispatch loop.

Every value here is a frozen Pydantic model: immutable once built, compared
structurally, and hashable.  The dispatcher forwards these values untouched.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict


class SendResult(str, Enum):
    """Outcome of one delivery attempt.  Rejection is not an error."""

    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Payload(BaseModel):
    """Opaque payload forwarded to every recipient of an event."""

    model_config = ConfigDict(frozen=True)

    origin: str
    data: bytes = b""


class Address(BaseModel):
    """A single delivery target, identified by data center and node."""

    model_config = ConfigDict(frozen=True)

    data_center: str
    node_id: str

    def __str__(self) -> str:
        return f"{self.data_center}/{self.node_id}"


class Event(BaseModel):
    """One unit of work read from a source.

    ``recipients`` keeps the order it was given in; duplicates are allowed
    and each one is delivered to independently.  An empty tuple is legal.
    """

    model_config = ConfigDict(frozen=True)

    recipients: tuple[Address, ...] = ()
    payload: Payload
