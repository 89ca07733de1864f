"""Boundary validation for loosely shaped rows."""

from hrdash.core.models.feedback import FeedbackAssessment
from hrdash.core.models.interview import Interview, InterviewResponse


def test_response_row_defaults():
    row = {
        "id": 7,
        "interview_id": "int1",
        "call_id": "call_7",
        "name": None,
        "email": None,
        "candidate_status": None,
        "created_at": "2024-06-01T10:00:00Z",
        "duration": "125.7",
        "tab_switch_count": None,
        "analytics": {"overallScore": "82.4", "skills": None, "communication": {"score": 7}},
    }

    response = InterviewResponse.model_validate(row)

    assert response.id == "7"
    assert response.name == "Anonymous"
    assert response.email == ""
    assert response.candidate_status is None
    assert response.duration == 125
    assert response.tab_switch_count is None
    assert response.analytics.overall_score == 82.4
    assert response.analytics.skills == []
    assert response.is_ended is True


def test_response_bad_analytics_values_default_to_zero():
    response = InterviewResponse.model_validate(
        {"id": "r1", "analytics": {"overallScore": "n/a", "skills": "python"}}
    )
    assert response.analytics.overall_score == 0.0
    assert response.analytics.skills == []

    response = InterviewResponse.model_validate({"id": "r2", "analytics": "garbage"})
    assert response.analytics.overall_score == 0.0


def test_response_keeps_raw_status_verbatim():
    response = InterviewResponse(id="r1", candidate_status="selected")
    assert response.candidate_status == "selected"


def test_transcript_property():
    response = InterviewResponse(id="r1", details={"transcript": "Hello"})
    assert response.transcript == "Hello"
    assert InterviewResponse(id="r2").transcript is None


def test_interview_defaults():
    interview = Interview.model_validate({"id": 3, "name": None, "description": None, "questions": None})
    assert interview.id == "3"
    assert interview.name == "Unnamed Interview"
    assert interview.description == ""
    assert interview.questions == []
    assert interview.is_active is True


def test_feedback_tolerates_nulls():
    feedback = FeedbackAssessment.model_validate(
        {
            "ats_score": {"score": "64", "factors": None, "improvement_suggestions": None},
            "topic_wise_feedback": None,
            "overall_assessment": {"weaknesses": None, "recommendation": "DEVELOPMENTAL"},
        }
    )
    assert feedback.ats_score.score == 64.0
    assert feedback.ats_score.factors.keyword_match == 0.0
    assert feedback.topic_wise_feedback == []
    assert feedback.overall_assessment.weaknesses == []


def test_non_finite_scores_default_to_zero():
    for raw in ("NaN", "inf", "-Infinity", float("inf"), float("nan")):
        response = InterviewResponse.model_validate({"id": "r1", "analytics": {"overallScore": raw}})
        assert response.analytics.overall_score == 0.0


def test_non_finite_duration_defaults_to_none():
    response = InterviewResponse.model_validate({"id": "r1", "duration": "inf", "tab_switch_count": "nan"})
    assert response.duration is None
    assert response.tab_switch_count is None
