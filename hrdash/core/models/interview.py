"""Interview and response records as read from the data source.

Rows coming out of the store are loosely shaped (nullable columns, a free-form
``analytics`` bag). They are validated here once so downstream code can rely on
concrete types and defaults instead of checking for missing keys.
"""

import math
from datetime import datetime, timezone
from typing import Any

from pydantic import ConfigDict, Field, field_validator

from .base import HRBaseModel, utc_now


def _as_utc(value: datetime) -> datetime:
    # Naive timestamps from exports are UTC
    return value.replace(tzinfo=timezone.utc) if value.tzinfo is None else value


# =============================================================================
# Pydantic Schemas
# =============================================================================


class InterviewQuestion(HRBaseModel):
    """A question configured on an interview."""

    question: str = Field("", description="Question text")


class Interview(HRBaseModel):
    """An interview definition; each one backs exactly one position."""

    id: str = Field(..., description="Interview identifier")
    name: str = Field("Unnamed Interview", description="Interview name")
    description: str = Field("", description="Interview description")
    organization_id: str | None = Field(None, description="Owning organization")
    user_id: str | None = Field(None, description="Creating user")
    is_active: bool = Field(True, description="Whether the interview is live")
    created_at: datetime = Field(default_factory=utc_now)
    document_context: str | None = Field(None, description="Extracted resume text")
    questions: list[InterviewQuestion] = Field(default_factory=list)

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return value or "Unnamed Interview"

    @field_validator("description", mode="before")
    @classmethod
    def _default_description(cls, value: Any) -> Any:
        return value or ""

    @field_validator("questions", mode="before")
    @classmethod
    def _default_questions(cls, value: Any) -> Any:
        return value or []

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class ResponseAnalytics(HRBaseModel):
    """Analytics bag attached to a response.

    Only ``overallScore`` and ``skills`` are read; anything else is kept as-is.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    overall_score: float = Field(0.0, alias="overallScore", description="Overall score 0-100")
    skills: list[str] = Field(default_factory=list, description="Skills observed")

    @field_validator("overall_score", mode="before")
    @classmethod
    def _coerce_score(cls, value: Any) -> float:
        if value is None or isinstance(value, bool):
            return 0.0
        try:
            score = float(value)
        except (TypeError, ValueError):
            return 0.0
        # NaN and Infinity parse from JSON but cannot be rounded
        return score if math.isfinite(score) else 0.0

    @field_validator("skills", mode="before")
    @classmethod
    def _coerce_skills(cls, value: Any) -> list[str]:
        if not isinstance(value, list):
            return []
        return [str(skill) for skill in value if skill is not None]


class InterviewResponse(HRBaseModel):
    """One candidate's interview attempt."""

    id: str = Field(..., description="Response identifier")
    interview_id: str | None = Field(None, description="Interview this response belongs to")
    call_id: str | None = Field(None, description="Call identifier")
    name: str = Field("Anonymous", description="Candidate name")
    email: str = Field("", description="Candidate email")
    candidate_status: str | None = Field(None, description="Raw status (SELECTED, POTENTIAL, ...)")
    created_at: datetime = Field(default_factory=utc_now)
    duration: int | None = Field(None, description="Call duration in seconds")
    tab_switch_count: int | None = Field(None, description="Tab switches during the call")
    is_ended: bool = Field(True, description="Whether the call completed")
    analytics: ResponseAnalytics = Field(default_factory=ResponseAnalytics)
    details: dict[str, Any] = Field(default_factory=dict, description="Call details (transcript, ...)")

    @field_validator("id", "interview_id", "call_id", mode="before")
    @classmethod
    def _coerce_ids(cls, value: Any) -> Any:
        return str(value) if isinstance(value, int) else value

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return value or "Anonymous"

    @field_validator("duration", "tab_switch_count", mode="before")
    @classmethod
    def _coerce_count(cls, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("email", mode="before")
    @classmethod
    def _default_email(cls, value: Any) -> Any:
        return value or ""

    @field_validator("created_at")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @field_validator("analytics", "details", mode="before")
    @classmethod
    def _default_mapping(cls, value: Any) -> Any:
        return value if isinstance(value, dict) or isinstance(value, HRBaseModel) else {}

    @property
    def transcript(self) -> str | None:
        return self.details.get("transcript") or None
