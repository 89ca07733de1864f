"""Remediation heuristic: who gets a learning roadmap, and which courses.

A roadmap is shown when any weakness signal is present in the AI feedback.
Courses are picked by loose keyword overlap between course skills and the
candidate's weak areas.
"""

from collections.abc import Sequence

from ..models.enums import Recommendation
from ..models.feedback import (
    Course,
    FeedbackAssessment,
    ImprovementArea,
    Roadmap,
    TopicFeedback,
)
from .catalog import DEFAULT_COURSES

ATS_SCORE_THRESHOLD = 70
CONSISTENCY_THRESHOLD = 70
WEAK_TOPIC_RATING = 2
MAX_COURSES = 3
# Software Engineering Fundamentals, then Full Stack Web Development
FALLBACK_COURSE_INDICES = (2, 0)
ROADMAP_RECOMMENDATIONS = frozenset(
    {Recommendation.NOT_SELECTED.value, Recommendation.DEVELOPMENTAL.value}
)
PREVIEW_ITEMS = 2


def is_weak_topic(topic: TopicFeedback) -> bool:
    # An unrated topic counts as 0, like the other missing scores
    return (topic.performance_rating or 0) <= WEAK_TOPIC_RATING


def should_show_roadmap(feedback: FeedbackAssessment | None) -> bool:
    """Decide whether a candidate needs supplemental coursework.

    Missing ATS score or consistency values count as 0, so incomplete
    feedback always qualifies.

    Args:
        feedback: AI feedback for the call, or None when unavailable

    Returns:
        True if any weakness signal is present
    """
    if feedback is None:
        return False

    ats_score = (feedback.ats_score.score if feedback.ats_score else None) or 0
    overall = feedback.overall_assessment
    consistency = (overall.resume_interview_consistency if overall else None) or 0
    recommendation = ((overall.recommendation if overall else None) or "").upper()

    return (
        ats_score < ATS_SCORE_THRESHOLD
        or consistency < CONSISTENCY_THRESHOLD
        or recommendation in ROADMAP_RECOMMENDATIONS
        or any(is_weak_topic(topic) for topic in feedback.topic_wise_feedback)
    )


def extract_weak_areas(feedback: FeedbackAssessment) -> list[str]:
    """Collect lowercase weak-area keywords from the feedback.

    Weak topic names come first, each followed by its improvement areas,
    then the overall weaknesses.
    """
    areas: list[str] = []
    for topic in feedback.topic_wise_feedback:
        if is_weak_topic(topic):
            areas.append(topic.topic)
            areas.extend(topic.areas_for_improvement)

    if feedback.overall_assessment:
        areas.extend(feedback.overall_assessment.weaknesses)

    return [area.lower() for area in areas]


def course_matches(course: Course, weak_areas: Sequence[str]) -> bool:
    """True if any course skill and weak area contain one another."""
    for skill in course.skills:
        skill_key = skill.lower()
        for area in weak_areas:
            area_key = area.lower()
            if skill_key in area_key or area_key in skill_key:
                return True
    return False


def match_courses(
    weak_areas: Sequence[str], catalog: Sequence[Course] = DEFAULT_COURSES
) -> list[Course]:
    """Pick up to three courses for the given weak areas.

    Args:
        weak_areas: Keywords from ``extract_weak_areas``
        catalog: Courses in catalog order

    Returns:
        Matching courses in catalog order, or the fallback pair when
        nothing matches
    """
    matched = [course for course in catalog if course_matches(course, weak_areas)]
    if not matched:
        return [catalog[i] for i in FALLBACK_COURSE_INDICES if i < len(catalog)]
    return matched[:MAX_COURSES]


def recommend_courses(
    feedback: FeedbackAssessment, catalog: Sequence[Course] = DEFAULT_COURSES
) -> list[Course]:
    return match_courses(extract_weak_areas(feedback), catalog)


def build_roadmap(
    feedback: FeedbackAssessment | None, catalog: Sequence[Course] = DEFAULT_COURSES
) -> Roadmap | None:
    """Assemble the roadmap panel, or None when it should not be shown.

    Args:
        feedback: AI feedback for the call
        catalog: Course catalog to match against

    Returns:
        Roadmap with weak topics, general weaknesses and courses
    """
    if feedback is None or not should_show_roadmap(feedback):
        return None

    improvement_areas = [
        ImprovementArea(
            topic=topic.topic,
            performance_rating=topic.performance_rating,
            areas=topic.areas_for_improvement[:PREVIEW_ITEMS],
        )
        for topic in feedback.topic_wise_feedback
        if is_weak_topic(topic)
    ]
    weaknesses = feedback.overall_assessment.weaknesses if feedback.overall_assessment else []

    return Roadmap(
        improvement_areas=improvement_areas,
        general_weaknesses=weaknesses[:PREVIEW_ITEMS],
        courses=recommend_courses(feedback, catalog),
    )
