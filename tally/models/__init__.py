"""
Data Models Package

This package contains all Pydantic models used in Category Tally.
All data flowing through the interchange codec must conform to these schemas.
"""

from tally.models.category import (
    WIRE_CONTEXT,
    Category,
    Dataset,
    ExpenseItem,
    dataset_total,
)
from tally.models.audit import (
    EventSeverity,
    InterchangeEvent,
    InterchangeEventBuilder,
    InterchangeEventType,
)

__all__ = [
    # Dataset models
    "WIRE_CONTEXT",
    "Category",
    "Dataset",
    "ExpenseItem",
    "dataset_total",
    # Event models
    "EventSeverity",
    "InterchangeEvent",
    "InterchangeEventBuilder",
    "InterchangeEventType",
]
