"""Wait-for-condition primitive used to poll Gemini file state.

The sleep function is injected so tests can run the loop without real
delays. Cancellation is the caller's: cancelling the awaiting task stops
the loop at the next ``sleep``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from .errors import PollTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[object]]


async def wait_for(
    probe: Callable[[], Awaitable[T]],
    *,
    is_done: Callable[[T], bool],
    interval: float,
    max_attempts: int | None = None,
    sleep: SleepFn = asyncio.sleep,
    description: str = "condition",
) -> T:
    """Call *probe* until *is_done* accepts its result, sleeping *interval* between calls.

    Args:
        probe: Zero-arg callable returning a fresh awaitable each attempt.
        is_done: Predicate on the probe result. May raise to abort the wait.
        interval: Seconds between attempts.
        max_attempts: Maximum probe calls; None polls forever.
        sleep: Awaitable sleep function.
        description: Label used in log and error messages.

    Returns:
        The first probe result accepted by *is_done*.

    Raises:
        PollTimeoutError: If *max_attempts* probes were made without success.
    """
    attempt = 0
    while True:
        attempt += 1
        result = await probe()
        if is_done(result):
            if attempt > 1:
                logger.debug("%s satisfied after %d attempt(s)", description, attempt)
            return result
        if max_attempts is not None and attempt >= max_attempts:
            raise PollTimeoutError(
                f"{description} not satisfied after {attempt} attempt(s) "
                f"({interval:g}s interval)"
            )
        await sleep(interval)
