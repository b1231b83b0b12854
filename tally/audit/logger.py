"""
Interchange Event Logger

Every export and import is logged with a correlation id so the events of
one call can be traced together.

The logger:
- Always logs locally through structlog
- Optionally appends events to a sink
- Never lets a sink failure escape into the export/import path
"""

from typing import Optional
from uuid import UUID, uuid4

import structlog

from tally.audit.sink import EventSinkInterface
from tally.models.audit import EventSeverity, InterchangeEvent


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class InterchangeLogger:
    """Central interchange event logging service."""

    def __init__(
        self,
        sink: Optional[EventSinkInterface] = None,
    ):
        """
        Initialize the logger.

        Args:
            sink: Event sink for persistence. If None, only logs locally.
        """
        self._sink = sink
        self._logger = structlog.get_logger("tally.interchange")

    def log(self, event: InterchangeEvent) -> bool:
        """
        Log an event.

        Returns True if the sink write succeeded (or no sink is configured).
        """
        log_dict = event.to_log_dict()

        if event.severity == EventSeverity.ERROR:
            self._logger.error("interchange_event", **log_dict)
        elif event.severity == EventSeverity.WARNING:
            self._logger.warning("interchange_event", **log_dict)
        elif event.severity == EventSeverity.DEBUG:
            self._logger.debug("interchange_event", **log_dict)
        else:
            self._logger.info("interchange_event", **log_dict)

        if self._sink:
            try:
                return self._sink.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "event_sink_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for one export or import call.
    """
    return uuid4()
