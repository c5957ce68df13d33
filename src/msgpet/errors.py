from __future__ import annotations


class MsgpetError(Exception):
    """Base class for every error raised by msgpet."""


class ConfigError(MsgpetError):
    """Invalid or missing configuration, raised before a run starts."""


class DialError(MsgpetError):
    """A dial failure that aborted the whole run."""

    def __init__(self, description: str) -> None:
        super().__init__(description)
        self.description = description


class AggregationError(MsgpetError):
    """More or fewer completions were reported than requests were configured."""
