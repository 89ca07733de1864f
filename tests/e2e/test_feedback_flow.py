"""Feedback generation, caching and roadmap flow with a mocked LLM."""

import asyncio

import pytest

from hrdash.core.models.feedback import FeedbackAssessment
from hrdash.core.models.interview import Interview, InterviewResponse
from hrdash.core.remediation.catalog import DEFAULT_COURSES
from hrdash.core.storage.object_store import ObjectStore
from hrdash.integrations.llm_client import LLMClient, parse_model_output, placeholder_instance
from hrdash.services.feedback import (
    FeedbackService,
    FeedbackUnavailableError,
    RoadmapService,
    build_feedback_prompt,
)

WEAK_FEEDBACK = {
    "ats_score": {"score": 58, "max_score": 100, "improvement_suggestions": ["Quantify impact"]},
    "topic_wise_feedback": [
        {
            "topic": "React",
            "performance_rating": 2,
            "areas_for_improvement": ["State management", "Testing components"],
        },
        {"topic": "Communication", "performance_rating": 4, "areas_for_improvement": []},
    ],
    "overall_assessment": {
        "resume_interview_consistency": 64,
        "strengths": ["Curious"],
        "weaknesses": ["Limited cloud exposure with AWS"],
        "recommendation": "DEVELOPMENTAL",
    },
}


class FakeLLM:
    """Records calls and returns a fixed assessment."""

    def __init__(self, payload):
        self.payload = payload
        self.calls = []

    async def create_json(self, system_prompt, user_prompt, response_model, model=None):
        self.calls.append(user_prompt)
        return response_model.model_validate(self.payload), {"tokens_total": 42}


@pytest.fixture
def store(tmp_path):
    store = ObjectStore(tmp_path / "store")
    store.save_interview(
        Interview(
            id="int1",
            name="Frontend",
            document_context="Jane Doe - React developer, 3 years",
            questions=[{"question": "Tell me about React hooks"}],
        )
    )
    store.save_response(
        InterviewResponse(
            id="r1",
            interview_id="int1",
            call_id="call_1",
            details={"transcript": "Agent: Tell me about hooks. User: I used useState."},
        )
    )
    store.save_response(InterviewResponse(id="r2", interview_id="int1", call_id="call_no_transcript"))
    return store


def test_feedback_generated_then_cached(store):
    llm = FakeLLM(WEAK_FEEDBACK)
    service = FeedbackService(store, llm_client=llm)

    first = asyncio.run(service.get_feedback("call_1"))
    second = asyncio.run(service.get_feedback("call_1"))

    assert first.ats_score.score == 58
    assert second == first
    assert len(llm.calls) == 1
    assert "React developer" in llm.calls[0]
    assert "1. Tell me about React hooks" in llm.calls[0]
    assert store.load_cached_feedback("call_1").interview_id == "int1"
    assert service.cached_feedback_for_interview("int1")[0].overall_assessment.recommendation == "DEVELOPMENTAL"

    asyncio.run(service.get_feedback("call_1", refresh=True))
    assert len(llm.calls) == 2


def test_missing_inputs_raise(store):
    service = FeedbackService(store, llm_client=FakeLLM(WEAK_FEEDBACK))

    with pytest.raises(FeedbackUnavailableError, match="transcript"):
        asyncio.run(service.get_feedback("call_no_transcript"))
    with pytest.raises(FeedbackUnavailableError):
        asyncio.run(service.get_feedback("unknown_call"))

    store.save_interview(Interview(id="int2"))
    store.save_response(
        InterviewResponse(id="r3", interview_id="int2", call_id="call_3", details={"transcript": "hi"})
    )
    with pytest.raises(FeedbackUnavailableError, match="resume"):
        asyncio.run(service.get_feedback("call_3"))


def test_roadmap_for_weak_candidate(store):
    service = RoadmapService(FeedbackService(store, llm_client=FakeLLM(WEAK_FEEDBACK)))

    result = asyncio.run(service.get_roadmap("call_1"))

    assert result.success
    assert result.metadata["eligible"] is True
    roadmap = result.data
    assert [a.topic for a in roadmap.improvement_areas] == ["React"]
    assert [c.title for c in roadmap.courses] == [
        "Full Stack Web Development",
        "Cloud Computing & DevOps",
    ]


def test_roadmap_hidden_for_strong_candidate(store):
    strong = {
        "ats_score": {"score": 91},
        "topic_wise_feedback": [{"topic": "React", "performance_rating": 4}],
        "overall_assessment": {"resume_interview_consistency": 88, "recommendation": "SELECTED"},
    }
    service = RoadmapService(FeedbackService(store, llm_client=FakeLLM(strong)))

    result = asyncio.run(service.get_roadmap("call_1"))

    assert result.success
    assert result.data is None
    assert result.metadata["eligible"] is False


def test_roadmap_reports_unavailable_feedback(store):
    service = RoadmapService(FeedbackService(store, llm_client=FakeLLM(WEAK_FEEDBACK)))
    result = asyncio.run(service.get_roadmap("call_no_transcript"))
    assert not result.success
    assert "transcript" in result.error


def test_test_mode_client_end_to_end(store, monkeypatch):
    monkeypatch.setenv("HRDASH_TEST_MODE", "1")
    service = FeedbackService(store, llm_client=LLMClient())

    result = asyncio.run(RoadmapService(service).get_roadmap("call_1"))

    # An empty assessment has no scores, so the roadmap shows with fallback courses
    assert result.success
    assert result.data.courses == [DEFAULT_COURSES[2], DEFAULT_COURSES[0]]
    assert store.has_cached_feedback("call_1")


def test_llm_output_repair():
    parsed = parse_model_output(
        FeedbackAssessment, 'Sure! {"ats_score": {"score": 71}} Hope this helps.'
    )
    assert parsed.ats_score.score == 71

    fenced = 'Here it is:\n```json\n{"overall_assessment": {"strengths": ["Clear"]}}\n```'
    assert parse_model_output(FeedbackAssessment, fenced).overall_assessment.strengths == ["Clear"]

    with pytest.raises(ValueError):
        parse_model_output(FeedbackAssessment, "no json here")


def test_placeholder_instance_is_empty_assessment():
    feedback = placeholder_instance(FeedbackAssessment)
    assert feedback.ats_score is None
    assert feedback.topic_wise_feedback == []


def test_client_requires_key_outside_test_mode(monkeypatch):
    for var in ("HRDASH_TEST_MODE", "GROQ_API_KEY", "OPENAI_API_KEY"):
        monkeypatch.delenv(var, raising=False)
    with pytest.raises(ValueError):
        LLMClient()


def test_prompt_mentions_json(store):
    interview = store.load_interview("int1")
    response = store.load_response_by_call_id("call_1")
    prompt = build_feedback_prompt(interview, response)
    assert "JSON" in prompt
    assert "I used useState" in prompt
