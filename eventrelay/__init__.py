"""eventrelay: single-consumer, multi-recipient event dispatch loop.

Reads events one at a time from a pluggable source, delivers each payload
to every recipient in order through a pluggable sink, and backs off for a
fixed interval whenever a recipient rejects delivery.  Stops cooperatively
through a ``CancellationToken``.
"""

__version__ = "0.1.0"
__description__ = "Single-consumer, multi-recipient event dispatch loop"

from eventrelay.core.cancellation import CancellationToken
from eventrelay.models.dispatch import DispatcherState, FaultPolicy, RetryPolicy
from eventrelay.models.events import Address, Event, Payload, SendResult
from eventrelay.routing.dispatcher import Dispatcher, DispatcherStateError

__all__ = [
    "Address",
    "CancellationToken",
    "Dispatcher",
    "DispatcherState",
    "DispatcherStateError",
    "Event",
    "FaultPolicy",
    "Payload",
    "RetryPolicy",
    "SendResult",
    "__version__",
]
