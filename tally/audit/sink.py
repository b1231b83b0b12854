"""
Event sinks for interchange events.

The sink is optional; without one, events are only logged locally.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from tally.models.audit import InterchangeEvent


class EventSinkInterface(ABC):
    """Abstract interface for interchange event persistence."""

    @abstractmethod
    def append_event(self, event: InterchangeEvent) -> bool:
        """
        Append an event.

        Returns:
            True if recorded successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[InterchangeEvent]:
        """
        Get all events for one export or import call.

        Returns:
            List of related events in chronological order
        """
        pass


class InMemoryEventSink(EventSinkInterface):
    """Event sink that keeps events in a list."""

    def __init__(self):
        self.events: list[InterchangeEvent] = []

    def append_event(self, event: InterchangeEvent) -> bool:
        self.events.append(event)
        return True

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[InterchangeEvent]:
        return [e for e in self.events if e.correlation_id == correlation_id]
