"""hrdash data models for interviews, positions, candidates and feedback."""

from .base import (
    HRBaseModel,
    ServiceResult,
    TimestampSchema,
    utc_now,
)
from .enums import (
    CandidateStatus,
    DisplayStatus,
    FilterType,
    PerformanceRating,
    Recommendation,
)
from .feedback import (
    ATSFactors,
    ATSScore,
    CachedFeedback,
    Course,
    FeedbackAssessment,
    ImprovementArea,
    OverallAssessment,
    Roadmap,
    TopicFeedback,
)
from .interview import Interview, InterviewQuestion, InterviewResponse, ResponseAnalytics
from .position import CandidateDisplayRecord, Position, PositionAggregate, PositionStats

__all__ = [
    # Base
    "HRBaseModel",
    "TimestampSchema",
    "ServiceResult",
    "utc_now",
    # Enums
    "CandidateStatus",
    "DisplayStatus",
    "PerformanceRating",
    "FilterType",
    "Recommendation",
    # Interviews
    "Interview",
    "InterviewQuestion",
    "InterviewResponse",
    "ResponseAnalytics",
    # Positions
    "PositionAggregate",
    "Position",
    "PositionStats",
    "CandidateDisplayRecord",
    # Feedback
    "FeedbackAssessment",
    "ATSScore",
    "ATSFactors",
    "TopicFeedback",
    "OverallAssessment",
    "CachedFeedback",
    # Roadmap
    "Course",
    "ImprovementArea",
    "Roadmap",
]
