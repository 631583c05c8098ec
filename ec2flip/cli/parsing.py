"""CLI argument parsing and parameter conversion utilities."""

from __future__ import annotations

from typing import Any

from ec2flip.constants import Action
from ec2flip.exceptions import ConfigurationError

SHORT_FLAG_ALIASES = {
    "-t": "--timeout",
    "-s": "--wait-for-ssm",
    "-r": "--region",
    "-p": "--profile",
    "-c": "--config",
    "-v": "--verbose",
}
"""Single-dash flags expanded before the command line reaches fire."""

BOOLEAN_FLAGS = frozenset({"--wait-for-ssm", "--wait_for_ssm", "--verbose"})
"""Switches that never take a value; given an explicit one so fire does not
consume the next argument."""


def expand_short_flags(argv: list[str]) -> list[str]:
    """Replace short flag aliases with their long form.

    Boolean switches are written as ``--flag=True`` so they can appear before
    the positional arguments. Arguments after a bare ``--`` are left
    untouched.

    Parameters
    ----------
    argv : list[str]
        Command line arguments without the program name

    Returns
    -------
    list[str]
        Arguments with aliases expanded
    """
    expanded: list[str] = []

    for index, arg in enumerate(argv):
        if arg == "--":
            expanded.extend(argv[index:])
            break

        flag, sep, value = arg.partition("=")
        flag = SHORT_FLAG_ALIASES.get(flag, flag)
        if flag in BOOLEAN_FLAGS and not sep:
            sep, value = "=", "True"

        expanded.append(flag + sep + value)

    return expanded


def parse_action(action: Any) -> Action:
    """Parse the action argument case-insensitively.

    Parameters
    ----------
    action : Any
        "start" or "stop" in any case

    Returns
    -------
    Action
        Parsed action

    Raises
    ------
    ConfigurationError
        If the value is not a known action
    """
    value = str(action).strip().lower()

    try:
        return Action(value)
    except ValueError:
        valid = ", ".join(a.value for a in Action)
        raise ConfigurationError(
            f"Invalid action: '{action}'. Must be one of: {valid}"
        ) from None


def parse_instance_id(instance_id: Any) -> str:
    """Parse the instance ID argument.

    Parameters
    ----------
    instance_id : Any
        Instance ID, possibly converted to a non-string type by the CLI parser

    Returns
    -------
    str
        Instance ID

    Raises
    ------
    ConfigurationError
        If the value is empty
    """
    if instance_id is None or isinstance(instance_id, bool):
        raise ConfigurationError("Instance ID must not be empty")

    value = str(instance_id).strip()
    if not value:
        raise ConfigurationError("Instance ID must not be empty")

    return value


def parse_timeout(timeout: Any) -> int:
    """Parse the timeout option into whole seconds.

    Parameters
    ----------
    timeout : Any
        Seconds as an int or numeric string

    Returns
    -------
    int
        Timeout in seconds

    Raises
    ------
    ConfigurationError
        If the value is not a positive integer
    """
    if isinstance(timeout, bool):
        raise ConfigurationError(f"Invalid timeout: '{timeout}' is not numeric")

    try:
        seconds = int(str(timeout).strip())
    except ValueError:
        raise ConfigurationError(f"Invalid timeout: '{timeout}' is not numeric") from None

    if seconds <= 0:
        raise ConfigurationError(f"Invalid timeout: {seconds}. Timeout must be positive")

    return seconds
