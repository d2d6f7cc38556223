"""Sync bridge — turns one callback-style directory operation into one outcome.

:func:`run_bridged` starts the operation, then waits until either its
completion fires or the deadline passes. Exactly one of
:attr:`BridgeStatus.SUCCEEDED`, :attr:`BridgeStatus.FAILED` or
:attr:`BridgeStatus.TIMED_OUT` is produced per call. A completion arriving
after the deadline is dropped; the operation itself is not cancelled or
retried.

Usage::

    outcome = await run_bridged(
        lambda done: directory.rename_room(room, "Den", done),
        label="rename_room",
    )
    if outcome.timed_out:
        ...
"""

from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Callable
from enum import Enum

from pydantic import BaseModel

from homemcp.directory.provider import Completion
from homemcp.utils.telemetry import ATTR_BRIDGE_OPERATION, ATTR_BRIDGE_STATUS, get_tracer

logger = logging.getLogger(__name__)
_tracer = get_tracer(__name__)

DEFAULT_TIMEOUT = 5.0


class BridgeStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


class BridgeOutcome(BaseModel):
    """The single result of a bridged directory operation."""

    status: BridgeStatus
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status == BridgeStatus.SUCCEEDED

    @property
    def timed_out(self) -> bool:
        return self.status == BridgeStatus.TIMED_OUT


class _OneShotCompletion:
    """Completion callback that releases its waiter at most once.

    Safe to call from any thread. After :meth:`expire` every call is a no-op.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop, future: asyncio.Future[Exception | None]) -> None:
        self._loop = loop
        self._future = future
        self._fired = False
        self._lock = threading.Lock()

    def __call__(self, error: Exception | None = None) -> None:
        with self._lock:
            if self._fired:
                logger.debug("Dropping late or repeated completion (error=%r)", error)
                return
            self._fired = True
        self._loop.call_soon_threadsafe(self._release, error)

    def expire(self) -> None:
        with self._lock:
            self._fired = True

    def _release(self, error: Exception | None) -> None:
        if not self._future.done():
            self._future.set_result(error)


async def run_bridged(
    operation: Callable[[Completion], None],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    label: str = "directory operation",
) -> BridgeOutcome:
    """Start *operation* with a completion callback and wait for its outcome.

    *operation* receives the completion and must arrange for it to be
    called once. An exception raised synchronously by *operation* counts as
    a reported failure.
    """
    loop = asyncio.get_running_loop()
    future: asyncio.Future[Exception | None] = loop.create_future()
    completion = _OneShotCompletion(loop, future)

    with _tracer.start_as_current_span("homemcp.bridge") as span:
        span.set_attribute(ATTR_BRIDGE_OPERATION, label)
        try:
            operation(completion)
        except Exception as exc:
            completion(exc)

        try:
            error = await asyncio.wait_for(future, timeout)
        except TimeoutError:
            completion.expire()
            logger.warning("%s timed out after %ss; its result will be discarded", label, timeout)
            outcome = BridgeOutcome(status=BridgeStatus.TIMED_OUT)
        else:
            if error is None:
                outcome = BridgeOutcome(status=BridgeStatus.SUCCEEDED)
            else:
                logger.info("%s failed: %s", label, error)
                outcome = BridgeOutcome(
                    status=BridgeStatus.FAILED,
                    error=str(error) or type(error).__name__,
                )
        span.set_attribute(ATTR_BRIDGE_STATUS, outcome.status.value)
    return outcome
