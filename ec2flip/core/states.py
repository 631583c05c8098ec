"""Instance lifecycle model and state classification.

Instance lifecycle docs:
https://docs.aws.amazon.com/AWSEC2/latest/UserGuide/ec2-instance-lifecycle.html
"""

from __future__ import annotations

from enum import Enum

from ec2flip.constants import Action
from ec2flip.exceptions import AbnormalTransitionError, ConfigurationError


class InstanceState(Enum):
    """EC2 instance lifecycle state, valued by the API's state names."""

    PENDING = "pending"
    RUNNING = "running"
    STOPPING = "stopping"
    STOPPED = "stopped"
    SHUTTING_DOWN = "shutting-down"
    TERMINATED = "terminated"
    UNKNOWN = "unknown"

    @classmethod
    def from_api(cls, name: str | None) -> InstanceState:
        """Map a state name reported by the API.

        Parameters
        ----------
        name : str | None
            State name, e.g. "running"

        Returns
        -------
        InstanceState
            Matching state, or UNKNOWN for anything unrecognized
        """
        try:
            return cls(name)
        except ValueError:
            return cls.UNKNOWN


class Classification(Enum):
    """Outcome of comparing an observed state with the desired one."""

    ARRIVED = "arrived"
    IN_PROGRESS = "in_progress"
    ABNORMAL = "abnormal"


# desired state -> (transient state on the way, terminal state)
_TRANSITIONS = {
    InstanceState.RUNNING: (InstanceState.PENDING, InstanceState.RUNNING),
    InstanceState.STOPPED: (InstanceState.STOPPING, InstanceState.STOPPED),
}

_DESIRED_BY_ACTION = {
    Action.START: InstanceState.RUNNING,
    Action.STOP: InstanceState.STOPPED,
}


def validate_desired_state(desired: InstanceState) -> InstanceState:
    """Ensure a desired state is one a run can wait for.

    Parameters
    ----------
    desired : InstanceState
        State to wait for

    Returns
    -------
    InstanceState
        The same state

    Raises
    ------
    ConfigurationError
        If the state is neither RUNNING nor STOPPED
    """
    if desired not in _TRANSITIONS:
        shown = getattr(desired, "value", desired)
        raise ConfigurationError(f"The desired state ({shown}) is invalid")
    return desired


def desired_state_for(action: Action) -> InstanceState:
    """Return the terminal state an action drives the instance to."""
    try:
        return _DESIRED_BY_ACTION[action]
    except KeyError:
        raise ConfigurationError(f"Unsupported action: {action}") from None


def classify(current: InstanceState, desired: InstanceState) -> Classification:
    """Decide whether an observed state is on track toward the desired one.

    Only PENDING -> RUNNING and STOPPING -> STOPPED count as progress. Every
    other state relative to the desired one is abnormal, including
    TERMINATED, SHUTTING_DOWN and UNKNOWN for either target.

    Parameters
    ----------
    current : InstanceState
        Observed state
    desired : InstanceState
        RUNNING or STOPPED

    Returns
    -------
    Classification
        ARRIVED, IN_PROGRESS or ABNORMAL

    Raises
    ------
    ConfigurationError
        If desired is neither RUNNING nor STOPPED, whatever current is
    """
    transient, terminal = _TRANSITIONS[validate_desired_state(desired)]

    if current is terminal:
        return Classification.ARRIVED
    if current is transient:
        return Classification.IN_PROGRESS
    return Classification.ABNORMAL


def ensure_progress(
    current: InstanceState, desired: InstanceState, current_name: str | None = None
) -> bool:
    """Classify a state and fail on anything abnormal.

    Parameters
    ----------
    current : InstanceState
        Observed state
    desired : InstanceState
        RUNNING or STOPPED
    current_name : str | None
        Raw state name from the API, used in the error message

    Returns
    -------
    bool
        True once arrived, False while still in progress

    Raises
    ------
    AbnormalTransitionError
        If the observed state cannot lead to the desired state
    """
    outcome = classify(current, desired)
    if outcome is Classification.ABNORMAL:
        raise AbnormalTransitionError(current, desired, current_name)
    return outcome is Classification.ARRIVED
