"""
Wait helpers for the booking flow.

The club site renders the grid and the booking modal asynchronously, so every
step waits on page state before acting. All waits here are bounded polls:

- poll_until: read page state at a fixed interval until a predicate accepts its
  value. On timeout the last observed value is returned instead of raising,
  so callers can decide what an inconclusive wait means.
- wait_for_element: poll_until over element visibility, bounded by wall-clock
  time including the time spent in each visibility check.
- settle: a fixed pause for animations that expose no observable event.
"""

import logging
import time as time_module
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from padel_booker.providers.base import PageHandle

logger = logging.getLogger(__name__)

T = TypeVar("T")

ELEMENT_POLL_INTERVAL_SECONDS = 0.1


@dataclass
class PollResult(Generic[T]):
    value: T
    matched: bool
    attempts: int


def poll_until(
    read_state: Callable[[], T],
    predicate: Callable[[T], bool],
    interval: float,
    max_attempts: int,
    timeout: float | None = None,
) -> PollResult[T]:
    """
    Read state repeatedly until the predicate accepts it.

    Args:
        read_state: Reads the current state (e.g. parses the modal)
        predicate: Decides whether the observed state is the one awaited
        interval: Seconds to sleep between reads
        max_attempts: Number of reads before giving up
        timeout: Optional wall-clock limit in seconds. Time spent in
            read_state counts against it, so slow reads end the poll early.

    Returns:
        PollResult with the accepted value, or with the last observed state
        (matched=False) once the attempts or the timeout ran out. When the
        attempts are used up one final read is made.
    """
    deadline = time_module.monotonic() + timeout if timeout is not None else None

    for attempt in range(1, max_attempts + 1):
        value = read_state()
        if predicate(value):
            return PollResult(value=value, matched=True, attempts=attempt)
        if deadline is None:
            time_module.sleep(interval)
            continue
        remaining = deadline - time_module.monotonic()
        if remaining <= 0:
            logger.debug(f"Poll deadline of {timeout}s passed after {attempt} reads")
            return PollResult(value=value, matched=False, attempts=attempt)
        time_module.sleep(min(interval, remaining))

    value = read_state()
    matched = predicate(value)
    if not matched:
        logger.debug(f"Poll budget of {max_attempts}x{interval}s exhausted without a match")
    return PollResult(value=value, matched=matched, attempts=max_attempts + 1)


def wait_for_element(
    page: PageHandle,
    selector: str,
    timeout: float,
    interval: float = ELEMENT_POLL_INTERVAL_SECONDS,
) -> bool:
    """Wait up to timeout seconds for an element matching the selector. False on timeout."""
    max_attempts = max(1, int(round(timeout / interval)))
    result = poll_until(
        lambda: page.is_visible(selector), bool, interval, max_attempts, timeout=timeout
    )
    if not result.matched:
        logger.warning(f"Timeout waiting for element: {selector}")
    return result.matched


def settle(seconds: float) -> None:
    if seconds > 0:
        time_module.sleep(seconds)
