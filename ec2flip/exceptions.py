"""Domain exceptions raised by the transition engine.

Transport failures from the cloud API live in
:mod:`ec2flip.providers.exceptions`; everything here describes a run that
reached the API but saw something it cannot accept.
"""

from __future__ import annotations

from typing import Any


class Ec2flipError(Exception):
    """Base exception for ec2flip domain errors."""


class ConfigurationError(Ec2flipError, ValueError):
    """Invalid desired state, command line argument or configuration value."""


class InvalidResponseError(Ec2flipError):
    """API response does not have the shape a single-instance call must have."""


class InstanceNotFoundError(InvalidResponseError):
    """API response named no instance."""


class AmbiguousResultError(InvalidResponseError):
    """API response named more than one reservation or instance."""


class IdentityMismatchError(InvalidResponseError):
    """API response named an instance other than the one requested.

    Parameters
    ----------
    message : str
        Error message
    expected : str
        Instance ID that was requested
    actual : str | None
        Instance ID the API reported
    """

    def __init__(self, message: str, expected: str, actual: str | None) -> None:
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class UnexpectedStateError(Ec2flipError):
    """Start or stop request left the instance in a state it should not be in.

    Parameters
    ----------
    message : str
        Error message
    state : Any
        State reported right after the request
    """

    def __init__(self, message: str, state: Any) -> None:
        super().__init__(message)
        self.state = state


class AbnormalTransitionError(Ec2flipError):
    """A poll observed a state that cannot lead to the desired state.

    Parameters
    ----------
    current : Any
        Observed state
    desired : Any
        State the run is waiting for
    current_name : str | None
        Raw state name reported by the API, used in the message when given
    """

    def __init__(self, current: Any, desired: Any, current_name: str | None = None) -> None:
        self.current = current
        self.desired = desired
        shown = current_name or getattr(current, "value", current)
        super().__init__(
            "The instance is in an abnormal state. "
            f"Current: {shown}, Desired: {getattr(desired, 'value', desired)}"
        )


class OverallTimeoutError(Ec2flipError):
    """The overall deadline elapsed before the run completed.

    Parameters
    ----------
    timeout_seconds : float
        Configured overall deadline
    description : str
        What the run was doing when the deadline elapsed
    """

    def __init__(self, timeout_seconds: float, description: str = "operation") -> None:
        self.timeout_seconds = timeout_seconds
        self.description = description
        super().__init__(
            f"Timed out after {timeout_seconds:g}s while waiting for {description}"
        )
