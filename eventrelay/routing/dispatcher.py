"""Dispatcher — single-consumer, multi-recipient event dispatch loop.

Each cycle reads one event from the source and delivers its payload to every
recipient, strictly in order, through the sink.  A rejected delivery pauses
the loop for the backoff interval before it continues.  Nothing is silently
dropped: every recipient of every event that was read gets a send, unless the
loop is cancelled mid-event.

The loop ends only through its ``CancellationToken`` (or, under
``FaultPolicy.PROPAGATE``, a collaborator exception).
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from datetime import timedelta
from typing import TYPE_CHECKING, Any

from eventrelay.core.cancellation import CancellationToken, stop_task
from eventrelay.models.dispatch import (
    VALID_TRANSITIONS,
    DispatcherState,
    FaultPolicy,
    RetryPolicy,
)
from eventrelay.models.events import Address, Event, Payload, SendResult

if TYPE_CHECKING:
    from eventrelay.config import RelayConfig
    from eventrelay.routing.sinks import DeliverySink
    from eventrelay.routing.sources import EventSource

logger = logging.getLogger(__name__)


class DispatcherStateError(RuntimeError):
    """Raised when a requested dispatcher state transition is not valid."""


async def _resolve(result: Any) -> Any:
    """Await *result* if it is awaitable; sync collaborators return plain values."""
    if inspect.isawaitable(result):
        return await result
    return result


class Dispatcher:
    """Drives the read / fan-out / backoff cycle until cancelled.

    Parameters
    ----------
    source:
        Produces one ``Event`` per ``read()``.
    sink:
        Delivers a payload to one ``Address`` per ``send()``.
    backoff:
        The pause after every rejected delivery, in seconds or as a
        ``timedelta``.  The same interval is used for every rejection.
    retry_policy:
        ``ADVANCE`` moves on to the next recipient after the backoff;
        ``RESEND`` re-sends to the rejecting recipient, up to
        ``max_attempts`` attempts in total.
    max_attempts:
        Attempts per recipient under ``RESEND``.  Ignored under ``ADVANCE``.
    fault_policy:
        ``RECOVER`` logs collaborator exceptions and backs off as for a
        rejection; ``PROPAGATE`` stops the loop and re-raises.

    Usage
    -----
    >>> dispatcher = Dispatcher(source, sink, backoff=5.0)
    >>> token = CancellationToken()
    >>> await dispatcher.run(token)   # returns once token.cancel() is called
    """

    # Seconds to wait for a cancelled read to wind down before moving on.
    read_stop_timeout: float = 5.0

    def __init__(
        self,
        source: EventSource,
        sink: DeliverySink,
        backoff: float | timedelta,
        *,
        retry_policy: RetryPolicy = RetryPolicy.ADVANCE,
        max_attempts: int = 3,
        fault_policy: FaultPolicy = FaultPolicy.RECOVER,
    ) -> None:
        if isinstance(backoff, timedelta):
            backoff = backoff.total_seconds()
        if backoff < 0:
            raise ValueError(f"Backoff interval must be non-negative, got {backoff!r}")
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {max_attempts!r}")

        self._source = source
        self._sink = sink
        self._backoff = float(backoff)
        self._retry_policy = RetryPolicy(retry_policy)
        self._max_attempts = max_attempts
        self._fault_policy = FaultPolicy(fault_policy)
        self._state = DispatcherState.IDLE

    @classmethod
    def from_config(
        cls, source: EventSource, sink: DeliverySink, config: RelayConfig
    ) -> Dispatcher:
        """Build a dispatcher from the dispatch fields of a ``RelayConfig``."""
        return cls(
            source,
            sink,
            config.backoff_seconds,
            retry_policy=config.retry_policy,
            max_attempts=config.max_attempts,
            fault_policy=config.fault_policy,
        )

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def backoff_interval(self) -> float:
        """The backoff interval in seconds."""
        return self._backoff

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry_policy

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    @property
    def fault_policy(self) -> FaultPolicy:
        return self._fault_policy

    @property
    def state(self) -> DispatcherState:
        """The current lifecycle state."""
        return self._state

    # ------------------------------------------------------------------
    # Run loop
    # ------------------------------------------------------------------

    async def run(self, token: CancellationToken) -> None:
        """Run the dispatch loop until *token* is cancelled.

        Returns cleanly on cancellation.  Rejections are absorbed by the
        backoff policy and never surface here.

        Raises
        ------
        DispatcherStateError
            If this dispatcher has already been started.
        """
        if self._state is not DispatcherState.IDLE:
            raise DispatcherStateError(
                f"Dispatcher cannot run from state {self._state.value}; "
                "a dispatcher runs exactly once."
            )

        logger.info(
            "Dispatcher started: source=%s sink=%s backoff=%.3fs retry=%s fault=%s",
            _name_of(self._source, "source_name"),
            _name_of(self._sink, "sink_name"),
            self._backoff,
            self._retry_policy.value,
            self._fault_policy.value,
        )

        try:
            while not token.is_cancelled:
                self._enter(DispatcherState.AWAITING_EVENT)
                try:
                    event = await self._read_event(token)
                except Exception:
                    if self._fault_policy is FaultPolicy.PROPAGATE:
                        raise
                    logger.exception(
                        "Source %s failed to produce an event; backing off %.3fs",
                        _name_of(self._source, "source_name"),
                        self._backoff,
                    )
                    if await self._back_off(token):
                        break
                    continue

                if event is None:
                    break
                if await self._fan_out(event, token):
                    break

                # A source that never suspends would otherwise starve the
                # event loop, including whoever is meant to cancel the token.
                await asyncio.sleep(0)
        finally:
            self._enter(DispatcherState.STOPPED)
            logger.info(
                "Dispatcher stopped%s",
                f" ({token.reason})" if token.reason else "",
            )

    # ------------------------------------------------------------------
    # Cycle steps
    # ------------------------------------------------------------------

    async def _read_event(self, token: CancellationToken) -> Event | None:
        """Wait for the next event; return ``None`` if the token fires first.

        A read still pending at cancellation is cancelled.  If the read and
        the token complete together, cancellation wins and the event is
        discarded.
        """
        read_task = asyncio.ensure_future(_resolve(self._source.read()))
        cancel_task = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {read_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            lingering = await stop_task(
                read_task, cancel_task, timeout=self.read_stop_timeout
            )
            if lingering:
                logger.warning(
                    "Source %s ignored cancellation for %.3fs; leaving its read "
                    "running in the background",
                    _name_of(self._source, "source_name"),
                    self.read_stop_timeout,
                )

        if token.is_cancelled:
            if read_task.done() and not read_task.cancelled():
                if read_task.exception() is None:
                    logger.warning(
                        "Discarding event read from %s: cancellation arrived "
                        "before dispatch",
                        _name_of(self._source, "source_name"),
                    )
            else:
                logger.debug("Source read abandoned on cancellation")
            return None

        event = read_task.result()
        if not isinstance(event, Event):
            raise TypeError(
                f"Source {_name_of(self._source, 'source_name')} returned "
                f"{type(event).__name__}, expected Event"
            )
        return event

    async def _fan_out(self, event: Event, token: CancellationToken) -> bool:
        """Deliver the event's payload to each recipient in order.

        Returns ``True`` if the token fired during a backoff, in which case
        the remaining recipients are abandoned.
        """
        self._enter(DispatcherState.DISPATCHING)
        logger.debug(
            "Dispatching payload from %s to %d recipient(s)",
            event.payload.origin,
            len(event.recipients),
        )

        attempts = self._max_attempts if self._retry_policy is RetryPolicy.RESEND else 1
        for recipient in event.recipients:
            for attempt in range(1, attempts + 1):
                self._enter(DispatcherState.DISPATCHING)
                result = await self._send(recipient, event.payload)
                if result is SendResult.ACCEPTED:
                    logger.debug("Delivered to %s", recipient)
                    break

                logger.warning(
                    "Recipient %s rejected payload from %s (attempt %d/%d); "
                    "backing off %.3fs",
                    recipient,
                    event.payload.origin,
                    attempt,
                    attempts,
                    self._backoff,
                )
                if await self._back_off(token):
                    return True
        return False

    async def _send(self, address: Address, payload: Payload) -> SendResult:
        """Send to one recipient.  A recovered sink fault counts as a rejection."""
        try:
            return SendResult(await _resolve(self._sink.send(address, payload)))
        except Exception:
            if self._fault_policy is FaultPolicy.PROPAGATE:
                raise
            logger.exception(
                "Sink %s failed delivering to %s; treating as rejected",
                _name_of(self._sink, "sink_name"),
                address,
            )
            return SendResult.REJECTED

    async def _back_off(self, token: CancellationToken) -> bool:
        """Pause for the backoff interval.  Returns ``True`` if cancelled."""
        self._enter(DispatcherState.BACKING_OFF)
        cancelled = await token.sleep(self._backoff)
        if cancelled:
            logger.debug("Backoff interrupted by cancellation")
        return cancelled

    def _enter(self, target: DispatcherState) -> None:
        current = self._state
        if target not in VALID_TRANSITIONS[current]:
            raise DispatcherStateError(
                f"Cannot transition dispatcher from {current.value} to {target.value}. "
                f"Allowed: {sorted(s.value for s in VALID_TRANSITIONS[current])}"
            )
        if target is not current:
            logger.debug("Dispatcher: %s -> %s", current.value, target.value)
        self._state = target

    def __repr__(self) -> str:
        return (
            f"Dispatcher(source={_name_of(self._source, 'source_name')!r}, "
            f"sink={_name_of(self._sink, 'sink_name')!r}, "
            f"backoff={self._backoff}, state={self._state.value})"
        )


def _name_of(collaborator: Any, attr: str) -> str:
    return getattr(collaborator, attr, None) or type(collaborator).__name__
