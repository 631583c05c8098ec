"""EC2 instance start/stop and state tracking for ec2flip."""

import logging
from typing import Any

import boto3

from ec2flip.constants import POLL_INTERVAL_SECONDS
from ec2flip.core.deadline import Deadline
from ec2flip.core.models import Instance
from ec2flip.core.polling import wait_until
from ec2flip.core.states import InstanceState, ensure_progress, validate_desired_state
from ec2flip.exceptions import (
    AmbiguousResultError,
    IdentityMismatchError,
    InstanceNotFoundError,
    UnexpectedStateError,
)
from ec2flip.providers.aws.errors import handle_aws_errors
from ec2flip.providers.aws.utils import extract_instance_from_response

logger = logging.getLogger(__name__)

START_ACCEPTED_STATES = frozenset((InstanceState.PENDING, InstanceState.RUNNING))
"""States an instance may report right after a successful start request."""

STOP_ACCEPTED_STATES = frozenset((InstanceState.STOPPING, InstanceState.STOPPED))
"""States an instance may report right after a successful stop request."""


class EC2Manager:
    """Start, stop and observe a single EC2 instance.

    Every call is one-shot. Responses are checked against the one-instance
    invariant: an identifier names exactly one reservation holding exactly
    one instance.

    Parameters
    ----------
    region : str | None
        AWS region, or None for the boto3 default chain
    boto3_client_factory : Callable[..., Any] | None
        Optional factory for creating boto3 clients. If None, uses boto3.client
    """

    def __init__(
        self,
        region: str | None,
        boto3_client_factory: Any | None = None,
    ) -> None:
        self.region = region
        self.boto3_client_factory = boto3_client_factory or boto3.client

        with handle_aws_errors():
            self.ec2_client = self.boto3_client_factory("ec2", region_name=region)

    def get_instance(self, instance_id: str) -> Instance:
        """Describe the instance and return a fresh snapshot.

        Parameters
        ----------
        instance_id : str
            Instance ID to describe

        Returns
        -------
        Instance
            Current snapshot

        Raises
        ------
        InstanceNotFoundError
            If no reservation or instance is returned
        AmbiguousResultError
            If more than one reservation or instance is returned, or the
            response is paginated
        ProviderError
            If the API call fails
        """
        with handle_aws_errors():
            response = self.ec2_client.describe_instances(InstanceIds=[instance_id])

        return Instance.from_api(extract_instance_from_response(response))

    def start_instance(self, instance_id: str) -> InstanceState:
        """Request an instance start.

        Parameters
        ----------
        instance_id : str
            Instance ID to start

        Returns
        -------
        InstanceState
            State reported right after the request (PENDING or RUNNING)

        Raises
        ------
        InstanceNotFoundError
            If the response lists no state change
        AmbiguousResultError
            If the response lists more than one state change
        IdentityMismatchError
            If the state change names another instance
        UnexpectedStateError
            If the reported state is neither PENDING nor RUNNING
        ProviderError
            If the API call fails
        """
        logger.info("Starting instance %s...", instance_id)

        with handle_aws_errors():
            response = self.ec2_client.start_instances(InstanceIds=[instance_id])

        return self._validate_state_change(
            response.get("StartingInstances") or [],
            instance_id,
            START_ACCEPTED_STATES,
            "start",
            "started",
        )

    def stop_instance(self, instance_id: str) -> InstanceState:
        """Request an instance stop.

        Parameters
        ----------
        instance_id : str
            Instance ID to stop

        Returns
        -------
        InstanceState
            State reported right after the request (STOPPING or STOPPED)

        Raises
        ------
        InstanceNotFoundError
            If the response lists no state change
        AmbiguousResultError
            If the response lists more than one state change
        IdentityMismatchError
            If the state change names another instance
        UnexpectedStateError
            If the reported state is neither STOPPING nor STOPPED
        ProviderError
            If the API call fails
        """
        logger.info("Stopping instance %s...", instance_id)

        with handle_aws_errors():
            response = self.ec2_client.stop_instances(InstanceIds=[instance_id])

        return self._validate_state_change(
            response.get("StoppingInstances") or [],
            instance_id,
            STOP_ACCEPTED_STATES,
            "stop",
            "stopped",
        )

    def _validate_state_change(
        self,
        state_changes: list[dict[str, Any]],
        instance_id: str,
        accepted_states: frozenset[InstanceState],
        verb: str,
        past_tense: str,
    ) -> InstanceState:
        """Check a StartInstances/StopInstances state change list.

        Parameters
        ----------
        state_changes : list[dict[str, Any]]
            ``StartingInstances`` or ``StoppingInstances`` from the response
        instance_id : str
            Instance ID that was requested
        accepted_states : frozenset[InstanceState]
            States the instance may be in right after the request
        verb : str
            "start" or "stop", for messages
        past_tense : str
            "started" or "stopped", for messages

        Returns
        -------
        InstanceState
            Current state of the instance
        """
        if not state_changes:
            raise InstanceNotFoundError(f"Instance {instance_id} not found")
        if len(state_changes) > 1:
            raise AmbiguousResultError(f"Too many instances {past_tense}")

        change = state_changes[0]
        reported_id = change.get("InstanceId")
        if reported_id != instance_id:
            raise IdentityMismatchError(
                f"Wrong instance {past_tense}: expected {instance_id}, got {reported_id}",
                expected=instance_id,
                actual=reported_id,
            )

        state_name = (change.get("CurrentState") or {}).get("Name")
        current_state = InstanceState.from_api(state_name)

        if current_state not in accepted_states:
            raise UnexpectedStateError(
                f"Failed to {verb} instance: instance is {state_name}",
                state=current_state,
            )

        logger.debug("Instance %s is %s after %s request", instance_id, state_name, verb)
        return current_state

    def wait_for_state(
        self,
        instance_id: str,
        desired_state: InstanceState,
        deadline: Deadline,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> Instance:
        """Poll the instance until it reaches the desired state.

        Parameters
        ----------
        instance_id : str
            Instance ID to watch
        desired_state : InstanceState
            RUNNING or STOPPED
        deadline : Deadline
            Overall deadline of the run
        poll_interval : float
            Seconds between describe calls

        Returns
        -------
        Instance
            Snapshot in which the instance reached the desired state

        Raises
        ------
        ConfigurationError
            If desired_state is neither RUNNING nor STOPPED
        AbnormalTransitionError
            If a poll observes a state that cannot lead to the desired state
        OverallTimeoutError
            If the deadline passes first
        """
        validate_desired_state(desired_state)

        instance = wait_until(
            fetch=lambda: self.get_instance(instance_id),
            check=lambda snapshot: ensure_progress(
                snapshot.state, desired_state, snapshot.state_name
            ),
            interval=poll_interval,
            deadline=deadline,
            description=f"instance {instance_id} to be {desired_state.value}",
        )

        logger.info("Instance %s is %s", instance_id, instance.state_name)
        return instance
