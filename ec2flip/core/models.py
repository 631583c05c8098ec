"""Snapshot types passed between the controller, poll loops and the CLI."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ec2flip.constants import Action
from ec2flip.core.states import InstanceState


@dataclass(frozen=True)
class Instance:
    """One describe_instances observation of an instance.

    Attributes
    ----------
    instance_id : str
        EC2 instance ID
    state : InstanceState
        Lifecycle state
    state_name : str
        State name exactly as the API reported it
    public_ipv4 : str | None
        Public IPv4 address, if assigned
    private_ipv4 : str | None
        Private IPv4 address, if assigned
    ipv6 : str | None
        Primary IPv6 address, if assigned
    """

    instance_id: str
    state: InstanceState
    state_name: str
    public_ipv4: str | None = None
    private_ipv4: str | None = None
    ipv6: str | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Instance:
        """Build a snapshot from a describe_instances instance entry.

        Parameters
        ----------
        data : dict[str, Any]
            One element of ``Reservations[0]["Instances"]``

        Returns
        -------
        Instance
            Snapshot of the instance
        """
        state_name = (data.get("State") or {}).get("Name") or "unknown"
        return cls(
            instance_id=data.get("InstanceId", ""),
            state=InstanceState.from_api(state_name),
            state_name=state_name,
            public_ipv4=data.get("PublicIpAddress"),
            private_ipv4=data.get("PrivateIpAddress"),
            ipv6=data.get("Ipv6Address"),
        )


class AgentConnectionStatus(Enum):
    """SSM agent connectivity as reported by GetConnectionStatus."""

    CONNECTED = "connected"
    NOT_CONNECTED = "notconnected"


@dataclass
class TransitionResult:
    """Outcome of a completed run.

    Failed runs raise instead of returning a result, so a result always
    describes an instance that reached its desired state.

    Attributes
    ----------
    action : Action
        Requested action
    instance_id : str
        Target instance ID
    instance : Instance
        Snapshot accepted by the state wait
    agent_connected : bool | None
        True when the SSM agent connected, None when not requested or failed
    agent_error : str | None
        Why the SSM agent check failed, if it did
    elapsed_seconds : float
        Time spent on the run
    """

    action: Action
    instance_id: str
    instance: Instance
    agent_connected: bool | None = None
    agent_error: str | None = None
    elapsed_seconds: float = 0.0
