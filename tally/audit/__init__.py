"""Interchange event logging package."""

from tally.audit.logger import InterchangeLogger, create_correlation_id
from tally.audit.sink import EventSinkInterface, InMemoryEventSink

__all__ = [
    "EventSinkInterface",
    "InMemoryEventSink",
    "InterchangeLogger",
    "create_correlation_id",
]
