"""Base Pydantic schemas and helpers for ersync models."""

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Annotated, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

T = TypeVar("T")

# Amounts stay exact in Python and go over the wire as JSON numbers
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


# =============================================================================
# Pydantic Base Classes
# =============================================================================


class ERSBaseModel(BaseModel):
    """Base Pydantic model for all schemas with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class PassthroughModel(ERSBaseModel):
    """Model for backend objects whose unknown keys must survive a round trip."""

    model_config = ConfigDict(extra="allow")


# =============================================================================
# Common Result Models
# =============================================================================


class OperationResult(ERSBaseModel, Generic[T]):
    """Standardized result wrapper for a single backend operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    data: T | None = Field(None, description="Result data")
    error: str | None = Field(None, description="Error message if failed")
    status_code: int | None = Field(None, description="HTTP status if a response arrived")
    duration_ms: int = Field(0, ge=0, description="Execution duration in milliseconds")


# =============================================================================
# Utility Functions
# =============================================================================


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(timezone.utc)


def parse_date(value: Any) -> date | None:
    """Parse an ISO date or datetime string leniently.

    Returns None instead of raising when the value is missing or malformed.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None
    return None
