"""Dispatcher state machine and policy models."""

from __future__ import annotations

from enum import Enum


class DispatcherState(str, Enum):
    """Lifecycle states of a Dispatcher."""

    IDLE = "idle"
    AWAITING_EVENT = "awaiting_event"
    DISPATCHING = "dispatching"
    BACKING_OFF = "backing_off"
    STOPPED = "stopped"


# Valid state transitions, enforced by Dispatcher._enter().
# STOPPED is terminal: a dispatcher cannot be restarted.
VALID_TRANSITIONS: dict[DispatcherState, set[DispatcherState]] = {
    DispatcherState.IDLE: {DispatcherState.AWAITING_EVENT, DispatcherState.STOPPED},
    DispatcherState.AWAITING_EVENT: {
        DispatcherState.DISPATCHING,
        DispatcherState.BACKING_OFF,  # recovered source fault
        DispatcherState.STOPPED,
    },
    DispatcherState.DISPATCHING: {
        DispatcherState.DISPATCHING,
        DispatcherState.BACKING_OFF,
        DispatcherState.AWAITING_EVENT,
        DispatcherState.STOPPED,
    },
    DispatcherState.BACKING_OFF: {
        DispatcherState.DISPATCHING,
        DispatcherState.AWAITING_EVENT,
        DispatcherState.STOPPED,
    },
    DispatcherState.STOPPED: set(),
}


class RetryPolicy(str, Enum):
    """What happens to a recipient after it rejects a delivery.

    ADVANCE backs off once and moves on to the next recipient.  RESEND backs
    off once and re-sends to the same recipient, up to ``max_attempts``.
    """

    ADVANCE = "advance"
    RESEND = "resend"


class FaultPolicy(str, Enum):
    """How exceptions raised by a source or sink are handled."""

    RECOVER = "recover"  # log, back off, keep looping
    PROPAGATE = "propagate"  # stop and re-raise out of run()
