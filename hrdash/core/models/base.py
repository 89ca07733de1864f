"""Shared pydantic base classes for hrdash models."""

from datetime import datetime, timezone
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class HRBaseModel(BaseModel):
    """Common configuration for every hrdash record.

    Rows come from exports with camelCase keys and stray whitespace, so
    aliases and field names are both accepted and strings are trimmed.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class TimestampSchema(HRBaseModel):
    """Record with creation and last-update times (UTC)."""

    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class ServiceResult(HRBaseModel, Generic[T]):
    """Outcome of a service call that reports failure instead of raising."""

    success: bool = Field(..., description="Whether the call succeeded")
    data: T | None = Field(None, description="Result data")
    error: str | None = Field(None, description="Error message if failed")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Additional metadata")

    @classmethod
    def ok(cls, data: T | None = None, **metadata: Any) -> "ServiceResult[T]":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> "ServiceResult[T]":
        return cls(success=False, error=error, metadata=metadata)
