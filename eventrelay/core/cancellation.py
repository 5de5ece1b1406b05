"""Cooperative cancellation for the dispatch loop.

A ``CancellationToken`` is handed to ``Dispatcher.run``.  Whoever owns the
token calls ``cancel()``; the dispatcher observes it at the top of every
cycle, while waiting on its source, and while backing off.
"""

from __future__ import annotations

import asyncio
import logging

logger = logging.getLogger(__name__)


class CancellationToken:
    """An idempotent, awaitable stop request backed by ``asyncio.Event``."""

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """The reason passed to the first ``cancel()`` call, if any."""
        return self._reason

    def cancel(self, reason: str = "") -> bool:
        """Request cancellation.

        Returns ``True`` only for the call that actually cancelled the
        token; later calls are no-ops and return ``False``.

        Must be called on the event loop that runs the dispatcher.  From
        another thread (a signal handler thread, a GUI) use
        ``cancel_threadsafe``.
        """
        if self._event.is_set():
            return False
        self._reason = reason or None
        self._event.set()
        logger.debug("Cancellation requested%s", f": {reason}" if reason else "")
        return True

    def cancel_threadsafe(
        self, loop: asyncio.AbstractEventLoop, reason: str = ""
    ) -> None:
        """Schedule ``cancel(reason)`` on *loop* from any thread."""
        loop.call_soon_threadsafe(self.cancel, reason)

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """Sleep for *seconds* unless cancelled first.

        Returns ``True`` if the token fired before (or during) the delay,
        ``False`` if the full delay elapsed.
        """
        if seconds < 0:
            raise ValueError(f"Delay must be non-negative, got {seconds!r}")
        if self._event.is_set():
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.is_cancelled})"


async def stop_task(
    *tasks: asyncio.Future, timeout: float | None = None
) -> set[asyncio.Future]:
    """Cancel *tasks* and wait for them to finish.

    The tasks' own ``CancelledError`` is absorbed, and so is any exception
    they finish with.  Cancellation of the *calling* task is not: it
    propagates as usual.

    Parameters
    ----------
    timeout:
        Upper bound in seconds on the wait.  ``None`` waits indefinitely.

    Returns
    -------
    set
        The tasks still running when the wait ended (empty unless a task
        ignored its cancellation past *timeout*).
    """
    pending = {task for task in tasks if not task.done()}
    for task in pending:
        task.cancel()
    if pending:
        _, pending = await asyncio.wait(pending, timeout=timeout)
    for task in tasks:
        if task.done() and not task.cancelled():
            task.exception()
    return pending
