"""Global constants for ec2flip.

This module contains application-wide constants shared by the CLI, the
configuration loader and the transition engine.
"""

from enum import Enum

POLL_INTERVAL_SECONDS = 10
"""Delay between state checks in seconds.

Used by both the instance state wait and the SSM agent wait. The first check
happens only after one full interval has elapsed.
"""

DEFAULT_TIMEOUT_SECONDS = 120
"""Default overall deadline for a run in seconds.

Covers the start/stop request, the instance state wait and the optional
SSM agent wait together.
"""

DEFAULT_CONFIG_FILE = "ec2flip.yaml"
"""Configuration file looked up in the working directory.

Overridden by the EC2FLIP_CONFIG environment variable or the --config flag.
"""

EXIT_SUCCESS = 0
"""Process exit code for a completed transition."""

EXIT_TIMEOUT = 1
"""Process exit code when the overall deadline elapsed."""

EXIT_FAILURE = 2
"""Process exit code for every other failure, configuration errors included."""

ADDRESS_PLACEHOLDER = "None"
"""Shown in the start summary for an address the instance does not have."""


class Action(Enum):
    """Action requested on the command line."""

    START = "start"
    STOP = "stop"
