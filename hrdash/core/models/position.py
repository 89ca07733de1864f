"""Position and candidate display models (Pydantic only)."""

from datetime import datetime

from pydantic import Field, model_validator

from .base import HRBaseModel, utc_now
from .enums import DisplayStatus, PerformanceRating


# =============================================================================
# Pydantic Schemas
# =============================================================================


class PositionAggregate(HRBaseModel):
    """Per-position candidate counts, recomputed on every read."""

    total_candidates: int = Field(0, ge=0, description="All ended responses")
    hired_count: int = Field(0, ge=0, description="Responses marked SELECTED")
    interviewed_count: int = Field(0, ge=0, description="Responses marked POTENTIAL")
    pending_count: int = Field(0, ge=0, description="Responses without a decision")
    rejected_count: int = Field(0, ge=0, description="Responses marked NOT_SELECTED")

    @model_validator(mode="after")
    def _check_total(self) -> "PositionAggregate":
        parts = self.hired_count + self.interviewed_count + self.pending_count + self.rejected_count
        if parts != self.total_candidates:
            raise ValueError(
                f"total_candidates ({self.total_candidates}) must equal the sum of status counts ({parts})"
            )
        return self


class Position(PositionAggregate):
    """A hiring position: one interview plus its candidate counts."""

    id: str = Field(..., description="Position identifier (the interview id)")
    name: str = Field("Unnamed Interview", description="Position name")
    description: str = Field("", description="Position description")
    organization_id: str | None = Field(None, description="Owning organization")
    created_at: datetime = Field(default_factory=utc_now)
    interview_id: str = Field(..., description="Backing interview")


class CandidateDisplayRecord(HRBaseModel):
    """A response shaped for the candidate list."""

    id: str = Field(..., description="Response identifier")
    name: str = Field("Anonymous", description="Candidate name")
    email: str = Field("", description="Candidate email")
    score: int = Field(0, description="Rounded overall score")
    status: DisplayStatus = Field(DisplayStatus.NO_STATUS, description="Display status")
    performance_rating: PerformanceRating = Field(..., description="Tier derived from score")
    interview_date: str = Field(..., description="ISO date the interview completed")
    skills: list[str] = Field(default_factory=list, description="Skills observed")
    interview_id: str = Field(..., description="Position/interview identifier")
    call_id: str | None = Field(None, description="Call identifier")
    duration: int | None = Field(None, description="Call duration in seconds")
    tab_switch_count: int | None = Field(None, description="Tab switches during the call")


class PositionStats(HRBaseModel):
    """Summary statistics for a position's candidate list."""

    total_candidates: int = Field(0, ge=0)
    hired_count: int = Field(0, ge=0)
    interviewed_count: int = Field(0, ge=0)
    pending_count: int = Field(0, ge=0)
    rejected_count: int = Field(0, ge=0)
    average_score: int = Field(0, description="Rounded mean score")
    top_performers: list[CandidateDisplayRecord] = Field(
        default_factory=list, description="Five highest scores"
    )
