"""Enumeration types for hrdash models."""

from enum import Enum


class CandidateStatus(str, Enum):
    """Raw candidate status as stored on a response row."""

    SELECTED = "SELECTED"
    POTENTIAL = "POTENTIAL"
    NOT_SELECTED = "NOT_SELECTED"
    NO_STATUS = "NO_STATUS"


class DisplayStatus(str, Enum):
    """Candidate status as shown on the dashboard."""

    SELECTED = "selected"
    POTENTIAL = "potential"
    NOT_SELECTED = "not_selected"
    NO_STATUS = "no_status"


class PerformanceRating(str, Enum):
    """Performance tier derived from a candidate score."""

    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    BELOW_AVERAGE = "Below Average"


class FilterType(str, Enum):
    """Candidate list filters offered on a position page."""

    ALL = "all"
    TOP_5 = "top5"
    TOP_10 = "top10"
    SELECTED = "selected"
    POTENTIAL = "potential"
    NOT_SELECTED = "not_selected"
    NO_STATUS = "no_status"


class Recommendation(str, Enum):
    """Hiring recommendations the feedback model is asked to produce."""

    SELECTED = "SELECTED"
    POTENTIAL = "POTENTIAL"
    NOT_SELECTED = "NOT_SELECTED"
    DEVELOPMENTAL = "DEVELOPMENTAL"
