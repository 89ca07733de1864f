"""Position service: positions, candidate lists and stats from the store.

Read failures (missing or corrupt files) are logged and turned into empty
results so a broken record never takes down the whole dashboard.
"""

from __future__ import annotations

from ..core.models.enums import FilterType
from ..core.models.interview import Interview
from ..core.models.position import CandidateDisplayRecord, Position, PositionAggregate, PositionStats
from ..core.positions.aggregation import (
    aggregate_responses,
    build_candidate_list,
    compute_stats,
    filter_candidates,
)
from ..core.storage.object_store import ObjectStore
from ..observability.logger import get_logger

logger = get_logger(__name__)

# Corrupt JSON and failed validation both surface as ValueError
READ_ERRORS = (OSError, ValueError)


class PositionService:
    """Builds dashboard views over interviews and their responses."""

    def __init__(self, store: ObjectStore):
        self.store = store

    def _aggregate(self, interview_id: str) -> PositionAggregate:
        try:
            responses = self.store.list_responses(interview_id)
        except READ_ERRORS as e:
            logger.error("responses_fetch_failed", interview_id=interview_id, error=str(e))
            return PositionAggregate()
        return aggregate_responses(responses)

    def _to_position(self, interview: Interview) -> Position:
        counts = self._aggregate(interview.id)
        return Position(
            id=interview.id,
            name=interview.name,
            description=interview.description,
            organization_id=interview.organization_id,
            created_at=interview.created_at,
            interview_id=interview.id,
            **counts.model_dump(),
        )

    def list_positions(
        self, organization_id: str | None = None, user_id: str | None = None
    ) -> list[Position]:
        """One position per active interview, newest first."""
        try:
            interviews = self.store.list_interviews(organization_id=organization_id, user_id=user_id)
        except READ_ERRORS as e:
            logger.error("positions_fetch_failed", organization_id=organization_id, error=str(e))
            return []

        positions = [self._to_position(interview) for interview in interviews]
        logger.info("positions_listed", organization_id=organization_id, user_id=user_id, count=len(positions))
        return positions

    def get_position(self, position_id: str) -> Position | None:
        try:
            interview = self.store.load_interview(position_id)
        except READ_ERRORS as e:
            logger.error("position_fetch_failed", position_id=position_id, error=str(e))
            return None
        if interview is None:
            logger.warning("position_not_found", position_id=position_id)
            return None
        return self._to_position(interview)

    def get_candidates(
        self, position_id: str, filter_type: FilterType | str = FilterType.ALL
    ) -> list[CandidateDisplayRecord]:
        """Candidate records for a position, newest first, then filtered."""
        try:
            responses = self.store.list_responses(position_id)
        except READ_ERRORS as e:
            logger.error("candidates_fetch_failed", position_id=position_id, error=str(e))
            return []
        candidates = build_candidate_list(responses, interview_id=position_id)
        return filter_candidates(candidates, filter_type)

    def get_position_stats(self, position_id: str) -> PositionStats:
        return compute_stats(self.get_candidates(position_id))
