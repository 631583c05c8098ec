"""Fixed-interval polling shared by the instance and agent waits."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TypeVar

from ec2flip.core.deadline import Deadline

logger = logging.getLogger(__name__)

T = TypeVar("T")


def wait_until(
    fetch: Callable[[], T],
    check: Callable[[T], bool],
    interval: float,
    deadline: Deadline,
    description: str = "condition",
) -> T:
    """Poll until a fetched snapshot satisfies a check.

    Each tick waits one interval first and then fetches, so nothing is
    fetched at time zero. A snapshot fetched after the deadline has passed
    is discarded. There is no attempt limit; the deadline ends the loop.

    Parameters
    ----------
    fetch : Callable[[], T]
        Returns a fresh snapshot on every call
    check : Callable[[T], bool]
        Returns True when the snapshot is the one waited for, False to keep
        polling. Raises to stop polling immediately.
    interval : float
        Seconds between ticks
    deadline : Deadline
        Overall deadline of the run
    description : str
        What is being waited for, used in log and timeout messages

    Returns
    -------
    T
        The first snapshot accepted by ``check``

    Raises
    ------
    OverallTimeoutError
        If the deadline passes before the check succeeds
    Exception
        Anything raised by ``fetch`` or ``check``, unchanged
    """
    attempt = 0

    while True:
        deadline.sleep(interval, description)
        attempt += 1

        snapshot = fetch()
        deadline.check(description)

        if check(snapshot):
            logger.debug("%s reached after %d attempt(s)", description, attempt)
            return snapshot

        logger.debug(
            "Still waiting for %s (attempt %d, %.0fs remaining)",
            description,
            attempt,
            max(deadline.remaining_seconds(), 0),
        )
