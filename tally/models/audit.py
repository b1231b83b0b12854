"""
Interchange Event Models for Category Tally

Every export and import is recorded as a short sequence of events:
started, then completed or failed. Events sharing a correlation id
belong to the same call.

Events never contain payload content, only sizes and carrier geometry.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class InterchangeEventType(str, Enum):
    """Types of events we record."""
    # Export
    EXPORT_STARTED = "export_started"
    EXPORT_COMPLETED = "export_completed"
    EXPORT_FAILED = "export_failed"

    # Import
    IMPORT_STARTED = "import_started"
    IMPORT_COMPLETED = "import_completed"
    IMPORT_FAILED = "import_failed"

    # Dataset changes
    DATASET_REPLACED = "dataset_replaced"
    DEMO_DATA_GENERATED = "demo_data_generated"


class EventSeverity(str, Enum):
    """Severity level for interchange events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class InterchangeEvent(BaseModel):
    """A single recorded event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="When the event occurred (UTC)"
    )

    event_type: InterchangeEventType = Field(
        ...,
        description="Type of event"
    )
    severity: EventSeverity = Field(
        default=EventSeverity.INFO,
        description="Event severity"
    )
    strategy: Optional[str] = Field(
        default=None,
        description="Carrier strategy ('qr', 'steganography', 'text')"
    )
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID shared by all events of one export or import"
    )
    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_code: Optional[str] = None
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "strategy": self.strategy,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


class InterchangeEventBuilder:
    """
    Helper class to build interchange events with common patterns.

    Usage:
        event = InterchangeEventBuilder.export_started("qr", 3, correlation_id)
        event = InterchangeEventBuilder.import_failed("qr", error, correlation_id)
    """

    @staticmethod
    def export_started(
        strategy: str,
        category_count: int,
        correlation_id: UUID,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.EXPORT_STARTED,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Export started ({strategy})",
            details={"category_count": category_count},
        )

    @staticmethod
    def export_completed(
        strategy: str,
        payload_size: int,
        image_size: Optional[tuple[int, int]],
        correlation_id: UUID,
    ) -> InterchangeEvent:
        details: dict[str, Any] = {"payload_size": payload_size}
        if image_size is not None:
            details["image_width"], details["image_height"] = image_size
        return InterchangeEvent(
            event_type=InterchangeEventType.EXPORT_COMPLETED,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Export completed ({strategy}, {payload_size} bytes)",
            details=details,
        )

    @staticmethod
    def export_failed(
        strategy: str,
        error: Exception,
        correlation_id: UUID,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.EXPORT_FAILED,
            severity=EventSeverity.ERROR,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Export failed ({strategy})",
            error_code=type(error).__name__,
            error_message=str(error),
        )

    @staticmethod
    def import_started(
        strategy: str,
        correlation_id: UUID,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.IMPORT_STARTED,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Import started ({strategy})",
        )

    @staticmethod
    def import_completed(
        strategy: str,
        category_count: int,
        correlation_id: UUID,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.IMPORT_COMPLETED,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Imported {category_count} categories ({strategy})",
            details={"category_count": category_count},
        )

    @staticmethod
    def import_failed(
        strategy: str,
        error: Exception,
        correlation_id: UUID,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.IMPORT_FAILED,
            severity=EventSeverity.WARNING,
            strategy=strategy,
            correlation_id=correlation_id,
            description=f"Import failed ({strategy}); dataset left unchanged",
            error_code=type(error).__name__,
            error_message=str(error),
        )

    @staticmethod
    def dataset_replaced(
        previous_count: int,
        new_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.DATASET_REPLACED,
            correlation_id=correlation_id,
            description=f"Dataset replaced: {previous_count} -> {new_count} categories",
            details={"previous_count": previous_count, "new_count": new_count},
        )

    @staticmethod
    def demo_data_generated(category_count: int) -> InterchangeEvent:
        return InterchangeEvent(
            event_type=InterchangeEventType.DEMO_DATA_GENERATED,
            severity=EventSeverity.WARNING,
            description="Dataset replaced with demo data",
            details={"category_count": category_count},
        )
