"""AI feedback assessment, course catalog and roadmap models (Pydantic only)."""

from typing import Any

from pydantic import Field, field_validator

from .base import HRBaseModel, TimestampSchema


def _none_to_list(value: Any) -> Any:
    return [] if value is None else value


# =============================================================================
# Feedback Assessment
# =============================================================================


class ATSFactors(HRBaseModel):
    """Breakdown of the ATS score."""

    keyword_match: float = Field(0.0, description="Keyword match points")
    experience_relevance: float = Field(0.0, description="Experience relevance points")
    skills_alignment: float = Field(0.0, description="Skills alignment points")
    education_match: float = Field(0.0, description="Education match points")
    format_quality: float = Field(0.0, description="Format quality points")


class ATSScore(HRBaseModel):
    """Applicant Tracking System compatibility score."""

    score: float | None = Field(None, description="ATS score 0-100")
    max_score: float = Field(100.0, description="Maximum possible score")
    factors: ATSFactors = Field(default_factory=ATSFactors)
    improvement_suggestions: list[str] = Field(default_factory=list)

    @field_validator("improvement_suggestions", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _none_to_list(value)

    @field_validator("factors", mode="before")
    @classmethod
    def _default_factors(cls, value: Any) -> Any:
        return {} if value is None else value


class TopicFeedback(HRBaseModel):
    """Feedback for one topic discussed in the interview."""

    topic: str = Field("", description="Topic name")
    questions_asked: list[str] = Field(default_factory=list)
    candidate_response_summary: str = Field("", description="What the candidate said")
    resume_alignment: str = Field("", description="How answers line up with the resume")
    performance_rating: float | None = Field(None, description="Rating 1-5")
    feedback: str = Field("", description="Reviewer feedback")
    areas_for_improvement: list[str] = Field(default_factory=list)

    @field_validator("questions_asked", "areas_for_improvement", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _none_to_list(value)


class OverallAssessment(HRBaseModel):
    """Overall verdict across resume and interview."""

    resume_interview_consistency: float | None = Field(
        None, description="Consistency between resume and interview, 0-100"
    )
    strengths: list[str] = Field(default_factory=list)
    weaknesses: list[str] = Field(default_factory=list)
    recommendation: str | None = Field(
        None, description="SELECTED, POTENTIAL, NOT_SELECTED or DEVELOPMENTAL"
    )

    @field_validator("strengths", "weaknesses", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _none_to_list(value)


class FeedbackAssessment(HRBaseModel):
    """AI-produced feedback for a single call."""

    ats_score: ATSScore | None = Field(None, description="ATS score section")
    topic_wise_feedback: list[TopicFeedback] = Field(default_factory=list)
    overall_assessment: OverallAssessment | None = Field(None, description="Overall section")

    @field_validator("topic_wise_feedback", mode="before")
    @classmethod
    def _default_lists(cls, value: Any) -> Any:
        return _none_to_list(value)


class CachedFeedback(TimestampSchema):
    """Feedback cache entry, keyed by call id."""

    call_id: str = Field(..., description="Call identifier (unique)")
    interview_id: str | None = Field(None, description="Interview identifier")
    feedback_data: FeedbackAssessment = Field(..., description="Cached assessment")


# =============================================================================
# Courses and Roadmap
# =============================================================================


class Course(HRBaseModel):
    """A course in the remediation catalog."""

    title: str = Field(..., description="Course title")
    duration: str = Field("", description="Course length, e.g. '6 months'")
    level: str = Field("", description="Target level")
    skills: list[str] = Field(default_factory=list, description="Skills taught")
    description: str = Field("", description="Short description")
    rating: float = Field(0.0, ge=0.0, le=5.0, description="Average rating")


class ImprovementArea(HRBaseModel):
    """A weak topic shown on the roadmap."""

    topic: str
    performance_rating: float | None = None
    areas: list[str] = Field(default_factory=list, description="First two improvement areas")


class Roadmap(HRBaseModel):
    """Learning roadmap shown to an underperforming candidate."""

    improvement_areas: list[ImprovementArea] = Field(default_factory=list)
    general_weaknesses: list[str] = Field(default_factory=list)
    courses: list[Course] = Field(default_factory=list, max_length=3)
