"""Overall deadline shared by every step of a run."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from ec2flip.exceptions import OverallTimeoutError

logger = logging.getLogger(__name__)


class Deadline:
    """Cancellation scope bounding the total duration of a run.

    The deadline is passed down to the start/stop request and to both poll
    loops. Every suspension point goes through :meth:`sleep` or
    :meth:`check`, so the run stops at the first suspension point after the
    budget is spent.

    Parameters
    ----------
    budget_seconds : float
        Total time allowed for the run
    clock : Callable[[], float]
        Monotonic clock, injectable for tests
    sleep : Callable[[float], None]
        Blocking sleep, injectable for tests
    """

    def __init__(
        self,
        budget_seconds: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.budget_seconds = budget_seconds
        self._clock = clock
        self._sleep = sleep
        self.start_time = clock()
        self.deadline = self.start_time + budget_seconds

    def elapsed_seconds(self) -> float:
        """Get elapsed time since the deadline was created.

        Returns
        -------
        float
            Elapsed seconds
        """
        return self._clock() - self.start_time

    def remaining_seconds(self) -> float:
        """Get remaining time until the deadline.

        Returns
        -------
        float
            Remaining seconds (negative once the deadline has passed)
        """
        return self.deadline - self._clock()

    @property
    def expired(self) -> bool:
        """Whether the deadline has passed.

        Returns
        -------
        bool
            True once no time remains
        """
        return self.remaining_seconds() <= 0

    def check(self, description: str = "operation") -> None:
        """Fail if the deadline has passed.

        Parameters
        ----------
        description : str
            What the run is about to do, used in the error message

        Raises
        ------
        OverallTimeoutError
            If no time remains
        """
        if self.expired:
            raise OverallTimeoutError(self.budget_seconds, description)

    def sleep(self, seconds: float, description: str = "operation") -> None:
        """Sleep for an interval without running past the deadline.

        Parameters
        ----------
        seconds : float
            Requested sleep
        description : str
            What the run is waiting for, used in the error message

        Raises
        ------
        OverallTimeoutError
            If the deadline has passed before or after sleeping
        """
        self.check(description)
        self._sleep(min(seconds, self.remaining_seconds()))
        self.check(description)

    def checkpoint(self, description: str) -> None:
        """Log elapsed and remaining time at a checkpoint."""
        logger.debug(
            "Deadline checkpoint '%s': elapsed=%.2fs, remaining=%.2fs",
            description,
            self.elapsed_seconds(),
            self.remaining_seconds(),
        )
