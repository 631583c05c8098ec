"""SSM agent connectivity checks for ec2flip."""

import logging
from typing import Any

import boto3

from ec2flip.constants import POLL_INTERVAL_SECONDS
from ec2flip.core.deadline import Deadline
from ec2flip.core.models import AgentConnectionStatus
from ec2flip.core.polling import wait_until
from ec2flip.exceptions import InvalidResponseError
from ec2flip.providers.aws.errors import handle_aws_errors

logger = logging.getLogger(__name__)


class SSMManager:
    """Query and wait for the SSM agent connection of an instance.

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
            self.ssm_client = self.boto3_client_factory("ssm", region_name=region)

    def get_connection_status(self, instance_id: str) -> AgentConnectionStatus:
        """Get the SSM agent connection status of an instance.

        Parameters
        ----------
        instance_id : str
            Instance ID used as the SSM target

        Returns
        -------
        AgentConnectionStatus
            CONNECTED or NOT_CONNECTED

        Raises
        ------
        InvalidResponseError
            If the response has no status or an unknown one
        ProviderError
            If the API call fails
        """
        with handle_aws_errors():
            response = self.ssm_client.get_connection_status(Target=instance_id)

        status = response.get("Status")
        if not status:
            raise InvalidResponseError("SSM GetConnectionStatus returned nothing")

        try:
            return AgentConnectionStatus(status.lower())
        except ValueError:
            raise InvalidResponseError(
                f"SSM GetConnectionStatus returned an unknown status: {status}"
            ) from None

    def wait_for_connection(
        self,
        instance_id: str,
        deadline: Deadline,
        poll_interval: float = POLL_INTERVAL_SECONDS,
    ) -> None:
        """Poll until the SSM agent of the instance reports connected.

        Parameters
        ----------
        instance_id : str
            Instance ID used as the SSM target
        deadline : Deadline
            Overall deadline of the run
        poll_interval : float
            Seconds between status queries

        Raises
        ------
        InvalidResponseError
            If a status response is malformed
        ProviderError
            If a status query fails
        OverallTimeoutError
            If the deadline passes first
        """
        logger.info("Waiting for SSM agent on %s to connect...", instance_id)

        wait_until(
            fetch=lambda: self.get_connection_status(instance_id),
            check=lambda status: status is AgentConnectionStatus.CONNECTED,
            interval=poll_interval,
            deadline=deadline,
            description=f"SSM agent on {instance_id}",
        )

        logger.info("SSM agent on %s is connected", instance_id)
