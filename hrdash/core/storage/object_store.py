"""File-based object store for interviews, responses and feedback.

Interviews and responses are plain JSON files, one per record. The feedback
cache is keyed by call id (saving again replaces the entry) and the resume
mapping table is a single JSON document. Every read goes back to disk; the
store keeps no in-memory state beyond its base directory.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any

from ..models.base import utc_now
from ..models.enums import CandidateStatus
from ..models.feedback import CachedFeedback, FeedbackAssessment
from ..models.interview import Interview, InterviewResponse

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class ObjectStore:
    """Simple JSON-backed persistence layer."""

    def __init__(self, base_dir: str | Path | None = None):
        self.base_dir = Path(base_dir) if base_dir else Path("data/store")
        self.base_dir.mkdir(parents=True, exist_ok=True)

    # ------------------------------------------------------------------
    # Generic helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _key(identifier: str) -> str:
        # ids become file names; keep them inside the store
        return _UNSAFE_CHARS.sub("_", str(identifier))

    def _dump(self, path: Path, data: dict[str, Any]) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _load(self, path: Path) -> dict[str, Any] | None:
        if not path.exists():
            return None
        return json.loads(path.read_text(encoding="utf-8"))

    def _interview_path(self, interview_id: str) -> Path:
        return self.base_dir / "interviews" / f"{self._key(interview_id)}.json"

    def _responses_dir(self, interview_id: str) -> Path:
        return self.base_dir / "responses" / self._key(interview_id)

    def _feedback_path(self, call_id: str) -> Path:
        return self.base_dir / "feedback_cache" / f"{self._key(call_id)}.json"

    @property
    def _mappings_path(self) -> Path:
        return self.base_dir / "resume_mappings.json"

    # ------------------------------------------------------------------
    # Interviews
    # ------------------------------------------------------------------
    def save_interview(self, interview: Interview) -> None:
        self._dump(self._interview_path(interview.id), interview.model_dump(mode="json"))

    def load_interview(self, interview_id: str) -> Interview | None:
        data = self._load(self._interview_path(interview_id))
        return Interview.model_validate(data) if data else None

    def list_interviews(
        self,
        organization_id: str | None = None,
        user_id: str | None = None,
        active_only: bool = True,
    ) -> list[Interview]:
        """List interviews owned by an organization or created by a user.

        With neither filter set, every interview is returned. Newest first.
        """
        interviews_dir = self.base_dir / "interviews"
        if not interviews_dir.exists():
            return []

        interviews: list[Interview] = []
        for path in interviews_dir.glob("*.json"):
            data = self._load(path)
            if not data:
                continue
            interview = Interview.model_validate(data)
            if active_only and not interview.is_active:
                continue
            if organization_id or user_id:
                owned = organization_id is not None and interview.organization_id == organization_id
                created = user_id is not None and interview.user_id == user_id
                if not (owned or created):
                    continue
            interviews.append(interview)

        interviews.sort(key=lambda i: i.created_at, reverse=True)
        return interviews

    # ------------------------------------------------------------------
    # Responses
    # ------------------------------------------------------------------
    def save_response(self, response: InterviewResponse) -> None:
        if not response.interview_id:
            raise ValueError(f"Response {response.id} has no interview_id")
        path = self._responses_dir(response.interview_id) / f"{self._key(response.id)}.json"
        self._dump(path, response.model_dump(mode="json", by_alias=True))

    def load_response(self, interview_id: str, response_id: str) -> InterviewResponse | None:
        path = self._responses_dir(interview_id) / f"{self._key(response_id)}.json"
        data = self._load(path)
        return InterviewResponse.model_validate(data) if data else None

    def list_responses(self, interview_id: str, ended_only: bool = True) -> list[InterviewResponse]:
        """List responses for an interview, newest first."""
        responses_dir = self._responses_dir(interview_id)
        if not responses_dir.exists():
            return []

        responses: list[InterviewResponse] = []
        for path in responses_dir.glob("*.json"):
            data = self._load(path)
            if not data:
                continue
            response = InterviewResponse.model_validate(data)
            if ended_only and not response.is_ended:
                continue
            responses.append(response)

        responses.sort(key=lambda r: r.created_at, reverse=True)
        return responses

    def _response_path_by_call_id(self, call_id: str) -> Path | None:
        root = self.base_dir / "responses"
        if not root.exists():
            return None
        for path in root.glob("*/*.json"):
            data = self._load(path)
            if isinstance(data, dict) and data.get("call_id") == call_id:
                return path
        return None

    def load_response_by_call_id(self, call_id: str) -> InterviewResponse | None:
        path = self._response_path_by_call_id(call_id)
        if path is None:
            return None
        data = self._load(path)
        return InterviewResponse.model_validate(data) if data else None

    def update_candidate_status(
        self, call_id: str, status: CandidateStatus | str
    ) -> InterviewResponse | None:
        """Set the recruiter decision on a call's response.

        Raises:
            ValueError: If status is not a known CandidateStatus
        """
        response = self.load_response_by_call_id(call_id)
        if response is None:
            return None
        response.candidate_status = CandidateStatus(status).value
        self.save_response(response)
        return response

    def delete_response(self, call_id: str) -> bool:
        path = self._response_path_by_call_id(call_id)
        if path is None:
            return False
        path.unlink()
        return True

    # ------------------------------------------------------------------
    # Feedback cache (one entry per call)
    # ------------------------------------------------------------------
    def save_cached_feedback(
        self,
        call_id: str,
        interview_id: str | None,
        feedback: FeedbackAssessment,
    ) -> CachedFeedback:
        existing = self.load_cached_feedback(call_id)
        entry = CachedFeedback(
            call_id=call_id,
            interview_id=interview_id,
            feedback_data=feedback,
            updated_at=utc_now(),
        )
        if existing is not None:
            entry.created_at = existing.created_at
        self._dump(self._feedback_path(call_id), entry.model_dump(mode="json"))
        return entry

    def load_cached_feedback(self, call_id: str) -> CachedFeedback | None:
        data = self._load(self._feedback_path(call_id))
        return CachedFeedback.model_validate(data) if data else None

    def has_cached_feedback(self, call_id: str) -> bool:
        return self._feedback_path(call_id).exists()

    def delete_cached_feedback(self, call_id: str) -> bool:
        path = self._feedback_path(call_id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list_cached_feedback(self, interview_id: str) -> list[CachedFeedback]:
        cache_dir = self.base_dir / "feedback_cache"
        if not cache_dir.exists():
            return []
        entries: list[CachedFeedback] = []
        for path in cache_dir.glob("*.json"):
            data = self._load(path)
            if isinstance(data, dict) and data.get("interview_id") == interview_id:
                entries.append(CachedFeedback.model_validate(data))
        return entries

    # ------------------------------------------------------------------
    # Resume mappings (interview id -> resume file path)
    # ------------------------------------------------------------------
    def list_resume_mappings(self) -> dict[str, str]:
        data = self._load(self._mappings_path)
        return data if isinstance(data, dict) else {}

    def save_resume_mapping(self, interview_id: str, file_path: str) -> None:
        mappings = self.list_resume_mappings()
        mappings[interview_id] = file_path
        self._dump(self._mappings_path, mappings)

    def load_resume_mapping(self, interview_id: str) -> str | None:
        return self.list_resume_mappings().get(interview_id)

    def remove_resume_mapping(self, interview_id: str) -> bool:
        mappings = self.list_resume_mappings()
        if interview_id not in mappings:
            return False
        del mappings[interview_id]
        self._dump(self._mappings_path, mappings)
        return True
