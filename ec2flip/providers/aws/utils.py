"""AWS-specific utility functions for ec2flip."""

from __future__ import annotations

from typing import Any

import boto3
from botocore.exceptions import ProfileNotFound

from ec2flip.exceptions import (
    AmbiguousResultError,
    ConfigurationError,
    InstanceNotFoundError,
)


def extract_instance_from_response(response: dict[str, Any]) -> dict[str, Any]:
    """Extract the only instance from a describe_instances response.

    Parameters
    ----------
    response : dict[str, Any]
        Response from boto3 describe_instances call for one instance ID

    Returns
    -------
    dict[str, Any]
        The instance dictionary

    Raises
    ------
    InstanceNotFoundError
        If the response has no reservation or the reservation has no instance
    AmbiguousResultError
        If the response has more than one reservation, more than one
        instance, or a pagination token
    """
    reservations = response.get("Reservations") or []

    if not reservations:
        raise InstanceNotFoundError("Instance not found")
    if len(reservations) > 1 or response.get("NextToken"):
        raise AmbiguousResultError("Too many reservations returned")

    instances = reservations[0].get("Instances") or []

    if not instances:
        raise InstanceNotFoundError("Instance not found")
    if len(instances) > 1:
        raise AmbiguousResultError("Too many instances returned")

    return instances[0]


def build_client_factory(profile: str | None = None) -> Any:
    """Return a boto3 client factory bound to an optional named profile.

    Parameters
    ----------
    profile : str | None
        AWS shared-config profile name, or None for the default chain

    Returns
    -------
    Callable[..., Any]
        ``boto3.client`` or the ``client`` method of a profile session

    Raises
    ------
    ConfigurationError
        If the named profile does not exist
    """
    if not profile:
        return boto3.client

    try:
        return boto3.Session(profile_name=profile).client
    except ProfileNotFound as e:
        raise ConfigurationError(f"AWS profile not found: {profile}") from e
