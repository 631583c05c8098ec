"""Logging helpers for routing records to stdout and stderr."""

from ec2flip.logging.filters import StreamRoutingFilter
from ec2flip.logging.formatters import StreamFormatter

__all__ = ["StreamFormatter", "StreamRoutingFilter"]
