"""CLI argument parsing and handling."""

from __future__ import annotations

from ec2flip.cli.parsing import (
    expand_short_flags,
    parse_action,
    parse_instance_id,
    parse_timeout,
)

__all__ = [
    "expand_short_flags",
    "parse_action",
    "parse_instance_id",
    "parse_timeout",
]
