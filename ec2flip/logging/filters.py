"""Logging filters for stream routing."""

import logging


class StreamRoutingFilter(logging.Filter):
    """Pass records to the handler of one output stream.

    Records below WARNING belong to stdout, WARNING and above to stderr.

    Parameters
    ----------
    stream : str
        "stdout" or "stderr"
    """

    def __init__(self, stream: str) -> None:
        super().__init__()
        if stream not in ("stdout", "stderr"):
            raise ValueError(f"stream must be 'stdout' or 'stderr', got '{stream}'")
        self.stream = stream

    def filter(self, record: logging.LogRecord) -> bool:
        if self.stream == "stderr":
            return record.levelno >= logging.WARNING
        return record.levelno < logging.WARNING
