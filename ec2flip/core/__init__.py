"""Core ec2flip functionality."""

from __future__ import annotations

from ec2flip.core.deadline import Deadline
from ec2flip.core.polling import wait_until
from ec2flip.core.states import Classification, InstanceState, classify

__all__ = [
    "Classification",
    "Deadline",
    "InstanceState",
    "classify",
    "wait_until",
]
