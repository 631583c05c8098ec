"""Sequencing of a start or stop run under one overall deadline."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Any

from ec2flip.constants import POLL_INTERVAL_SECONDS, Action
from ec2flip.core.deadline import Deadline
from ec2flip.core.models import TransitionResult
from ec2flip.core.states import desired_state_for, validate_desired_state
from ec2flip.exceptions import InvalidResponseError
from ec2flip.providers.exceptions import ProviderError

logger = logging.getLogger(__name__)


class TransitionExecutor:
    """Run one start or stop of one instance to completion.

    The run is strictly sequential: the start/stop request, then the
    instance state wait, then (start only, when requested) the SSM agent
    wait. A single :class:`Deadline` covers all three. Errors from the
    request or the state wait abort the run; errors from the agent wait are
    reported on the result and do not.

    Parameters
    ----------
    compute_provider_factory : Callable[[str | None], Any]
        Creates the instance controller for a region
    agent_provider_factory : Callable[[str | None], Any]
        Creates the SSM agent checker for a region
    poll_interval : float
        Seconds between polls for both waits
    clock : Callable[[], float]
        Monotonic clock handed to the deadline
    sleep : Callable[[float], None]
        Blocking sleep handed to the deadline
    """

    def __init__(
        self,
        compute_provider_factory: Callable[[str | None], Any],
        agent_provider_factory: Callable[[str | None], Any],
        poll_interval: float = POLL_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.compute_provider_factory = compute_provider_factory
        self.agent_provider_factory = agent_provider_factory
        self.poll_interval = poll_interval
        self.clock = clock
        self.sleep = sleep

    def execute(
        self,
        action: Action,
        instance_id: str,
        timeout: float,
        wait_for_ssm: bool = False,
        region: str | None = None,
    ) -> TransitionResult:
        """Start or stop the instance and wait until it settles.

        Parameters
        ----------
        action : Action
            START or STOP
        instance_id : str
            Instance ID to act on
        timeout : float
            Overall deadline in seconds
        wait_for_ssm : bool
            Also wait for the SSM agent after a start
        region : str | None
            AWS region, or None for the default chain

        Returns
        -------
        TransitionResult
            Final snapshot and agent outcome

        Raises
        ------
        ConfigurationError
            If the action has no valid desired state
        OverallTimeoutError
            If the deadline passes before the run completes
        InvalidResponseError, UnexpectedStateError, AbnormalTransitionError
            If the request or the state wait sees an unacceptable response
        ProviderError
            If an EC2 call fails
        """
        desired_state = validate_desired_state(desired_state_for(action))
        deadline = Deadline(timeout, clock=self.clock, sleep=self.sleep)

        if wait_for_ssm and action is not Action.START:
            logger.warning("--wait-for-ssm only applies to start; ignoring it")
            wait_for_ssm = False

        compute_provider = self.compute_provider_factory(region)

        deadline.check(f"{action.value} request")
        if action is Action.START:
            compute_provider.start_instance(instance_id)
        else:
            compute_provider.stop_instance(instance_id)
        deadline.check(f"{action.value} request")
        deadline.checkpoint(f"{action.value} requested")

        instance = compute_provider.wait_for_state(
            instance_id, desired_state, deadline, self.poll_interval
        )
        deadline.checkpoint(f"instance {desired_state.value}")

        result = TransitionResult(
            action=action,
            instance_id=instance_id,
            instance=instance,
        )

        if wait_for_ssm:
            self._wait_for_agent(result, deadline, region)

        result.elapsed_seconds = deadline.elapsed_seconds()
        return result

    def _wait_for_agent(
        self, result: TransitionResult, deadline: Deadline, region: str | None
    ) -> None:
        """Wait for the SSM agent, recording failures on the result.

        Parameters
        ----------
        result : TransitionResult
            Result of the instance wait, updated in place
        deadline : Deadline
            Overall deadline of the run
        region : str | None
            AWS region

        Raises
        ------
        OverallTimeoutError
            If the deadline passes during the agent wait
        """
        try:
            agent_provider = self.agent_provider_factory(region)
            agent_provider.wait_for_connection(
                result.instance_id, deadline, self.poll_interval
            )
        except (ProviderError, InvalidResponseError) as e:
            logger.warning("SSM agent check failed: %s", e)
            result.agent_error = str(e)
            return

        result.agent_connected = True
