"""
Core Data Models for Category Tally

These models define the schemas for the dataset that travels through
the interchange codec. They are designed to:
1. Enforce type safety at runtime
2. Round-trip exactly through JSON (ids and timestamps preserved)
3. Reject malformed wire data instead of guessing

DESIGN DECISION: Python callers get defaults (fresh ids, "now" timestamps,
empty descriptions). Wire data gets none: when validated with
WIRE_CONTEXT every field must be present.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)


WIRE_CONTEXT = {"wire": True}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class _WireModel(BaseModel):
    """Base for models that also arrive as wire JSON."""

    model_config = ConfigDict(extra="ignore")

    WIRE_FIELDS: ClassVar[tuple[str, ...]] = ()

    @model_validator(mode="before")
    @classmethod
    def require_wire_fields(cls, data: Any, info: ValidationInfo) -> Any:
        """Every wire field must be present when decoding exported data."""
        if info.context and info.context.get("wire") and isinstance(data, dict):
            missing = [name for name in cls.WIRE_FIELDS if name not in data]
            if missing:
                raise ValueError(
                    f"{cls.__name__} is missing required field(s): {', '.join(missing)}"
                )
        return data


class ExpenseItem(_WireModel):
    """A single expense recorded under a category."""

    WIRE_FIELDS: ClassVar[tuple[str, ...]] = ("id", "amount", "description", "date")

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable item identifier"
    )
    amount: float = Field(
        ...,
        strict=True,
        allow_inf_nan=False,
        description="Amount spent (may be zero or negative for refunds)"
    )
    description: str = Field(
        default="",
        strict=True,
        description="Optional free-text description"
    )
    date: datetime = Field(
        default_factory=_utcnow,
        description="When the expense was recorded"
    )

    @field_validator('date', mode='before')
    @classmethod
    def require_iso_date(cls, v: Any, info: ValidationInfo) -> Any:
        """Wire dates are ISO-8601 strings, never epoch numbers."""
        if info.context and info.context.get("wire") and not isinstance(v, str):
            raise ValueError("date must be an ISO-8601 string")
        return v


class Category(_WireModel):
    """
    A named group of expenses.

    The total is derived from the items and never stored.
    """

    WIRE_FIELDS: ClassVar[tuple[str, ...]] = ("id", "name", "items")

    id: UUID = Field(
        default_factory=uuid4,
        description="Stable category identifier"
    )
    name: str = Field(
        ...,
        strict=True,
        description="Category name"
    )
    items: list[ExpenseItem] = Field(default_factory=list)

    @property
    def total(self) -> float:
        """Sum of item amounts."""
        return sum(item.amount for item in self.items)


# The unit of export/import: the whole ordered list of categories.
Dataset = list[Category]


def dataset_total(categories: Dataset) -> float:
    """Grand total across every category."""
    return sum(category.total for category in categories)
