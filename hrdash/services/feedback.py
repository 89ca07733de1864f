"""Resume/interview feedback generation, caching and learning roadmaps."""

from __future__ import annotations

from typing import Any

from openai import OpenAIError

from ..core.models.base import ServiceResult
from ..core.models.feedback import CachedFeedback, Course, FeedbackAssessment, Roadmap
from ..core.models.interview import Interview, InterviewResponse
from ..core.remediation.catalog import load_catalog
from ..core.remediation.roadmap import build_roadmap
from ..core.storage.object_store import ObjectStore
from ..integrations.llm_client import LLMClient, get_llm_client
from ..observability.logger import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an ATS (Applicant Tracking System) and HR analyst. Compare a candidate's "
    "resume with their interview answers and report where they line up and where they do not."
)


class FeedbackUnavailableError(LookupError):
    """Raised when a call lacks the data needed to produce feedback."""


def build_feedback_prompt(interview: Interview, response: InterviewResponse) -> str:
    questions = "\n".join(
        f"{idx}. {q.question}" for idx, q in enumerate(interview.questions, start=1)
    )
    return f"""Analyze the resume and interview transcript below.

RESUME:
{interview.document_context}

INTERVIEW TRANSCRIPT:
{response.transcript}

QUESTIONS ASKED:
{questions or "Not recorded"}

Respond with a JSON object with these keys:
- ats_score: {{score (0-100), max_score, factors {{keyword_match, experience_relevance,
  skills_alignment, education_match, format_quality}}, improvement_suggestions []}}
- topic_wise_feedback: [{{topic, questions_asked [], candidate_response_summary,
  resume_alignment, performance_rating (1-5), feedback, areas_for_improvement []}}]
- overall_assessment: {{resume_interview_consistency (0-100), strengths [], weaknesses [],
  recommendation (SELECTED, POTENTIAL, NOT_SELECTED or DEVELOPMENTAL)}}

Cover every resume topic that came up in the interview."""


class FeedbackService:
    """Produces AI feedback for a call, backed by the store's feedback cache."""

    def __init__(
        self,
        store: ObjectStore,
        llm_client: LLMClient | None = None,
        config: dict[str, Any] | None = None,
    ):
        self.store = store
        self.config = config or {}
        self._llm_client = llm_client

    @property
    def llm(self) -> LLMClient:
        # Created on first use so cache hits work without an API key
        if self._llm_client is None:
            self._llm_client = get_llm_client(self.config)
        return self._llm_client

    async def get_feedback(self, call_id: str, refresh: bool = False) -> FeedbackAssessment:
        """Return feedback for a call, generating and caching it if needed.

        Args:
            call_id: Call identifier
            refresh: Ignore any cached entry and regenerate

        Returns:
            FeedbackAssessment

        Raises:
            FeedbackUnavailableError: If the call, resume or transcript is missing
            OpenAIError: If the LLM call fails after retries
        """
        if not refresh:
            cached = self.store.load_cached_feedback(call_id)
            if cached is not None:
                logger.info("feedback_cache_hit", call_id=call_id)
                return cached.feedback_data

        return await self.generate_feedback(call_id)

    async def generate_feedback(self, call_id: str) -> FeedbackAssessment:
        response = self.store.load_response_by_call_id(call_id)
        if response is None:
            raise FeedbackUnavailableError(f"No response found for call {call_id}")

        interview = self.store.load_interview(response.interview_id) if response.interview_id else None
        if interview is None or not interview.document_context:
            raise FeedbackUnavailableError(
                "No resume found for this interview. Upload a resume when creating the interview."
            )
        if not response.transcript:
            raise FeedbackUnavailableError("No transcript available for this call")

        logger.info("feedback_generation_started", call_id=call_id, interview_id=interview.id)
        feedback, usage = await self.llm.create_json(
            SYSTEM_PROMPT,
            build_feedback_prompt(interview, response),
            FeedbackAssessment,
        )
        self.store.save_cached_feedback(call_id, interview.id, feedback)
        logger.info("feedback_generated", call_id=call_id, tokens_total=usage.get("tokens_total", 0))
        return feedback

    def cached_feedback(self, call_id: str) -> CachedFeedback | None:
        return self.store.load_cached_feedback(call_id)

    def clear_cached_feedback(self, call_id: str) -> bool:
        deleted = self.store.delete_cached_feedback(call_id)
        logger.info("feedback_cache_cleared", call_id=call_id, deleted=deleted)
        return deleted

    def cached_feedback_for_interview(self, interview_id: str) -> list[FeedbackAssessment]:
        return [entry.feedback_data for entry in self.store.list_cached_feedback(interview_id)]


class RoadmapService:
    """Turns call feedback into a learning roadmap."""

    def __init__(self, feedback_service: FeedbackService, catalog: list[Course] | None = None):
        self.feedback_service = feedback_service
        self.catalog = catalog if catalog is not None else load_catalog(feedback_service.config)

    async def get_roadmap(self, call_id: str) -> ServiceResult[Roadmap]:
        """Build the roadmap for a call.

        A successful result with ``data=None`` means the candidate did well
        enough that no roadmap is shown.
        """
        try:
            feedback = await self.feedback_service.get_feedback(call_id)
        except (FeedbackUnavailableError, OpenAIError, ValueError) as e:
            logger.warning("roadmap_feedback_unavailable", call_id=call_id, error=str(e))
            return ServiceResult.fail(str(e), call_id=call_id)

        roadmap = build_roadmap(feedback, self.catalog)
        return ServiceResult.ok(roadmap, eligible=roadmap is not None)
